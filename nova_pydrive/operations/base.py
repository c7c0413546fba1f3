"""Base operations module for nova-pydrive."""

import logging
from functools import wraps
from typing import List, Optional

import pandas as pd

from nova_pydrive.auth.token_manager import TokenManager
from nova_pydrive.auth.token_storage import TokenStorage
from nova_pydrive.client import ClientProvider, DriveClient, InjectedClient, LazyClient
from nova_pydrive.config import Config
from nova_pydrive.constants import FOLDER_MIME_TYPE, ErrorPolicy
from nova_pydrive.operations.query import DriveQuery
from nova_pydrive.types import FileListing, OperationResult, Resource

logger = logging.getLogger(__name__)


def error_policy(policy: ErrorPolicy):
    """
    Declare how an operation reports remote failures.

    The wrapper obtains a validated client from the operation's provider and
    passes it to the wrapped method right after ``self``. Token problems
    (no token, failed refresh) always propagate; the policy only applies to
    failures raised by the method body.

    Args:
        policy (ErrorPolicy): Reporting policy of the decorated operation

    Note:
        The policy is exposed as the ``error_policy`` attribute of the wrapper.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            drive = self.client_provider.get()
            if policy is ErrorPolicy.PROPAGATE:
                return func(self, drive, *args, **kwargs)
            try:
                return func(self, drive, *args, **kwargs)
            except Exception as e:
                logger.error(f"Error in {func.__name__}: {e}")
                if policy is ErrorPolicy.COLLAPSE_TO_BOOL:
                    return False
                return OperationResult.failed(str(e))

        wrapper.error_policy = policy
        return wrapper

    return decorator


def _process_metadata(resource: Resource) -> dict:
    """
    Process a Drive file resource into standardized format.

    Returns:
        dict: Standardized metadata dictionary with keys:
            - id: Drive file id
            - name: File/folder name
            - type: 'file' or 'folder'
            - mime_type: Drive MIME type
            - size: Size in bytes (0 for folders and native documents)
            - modified: RFC 3339 modification time
            - starred / trashed: Drive flags
    """
    mime_type = resource.get("mimeType")
    return {
        "id": resource.get("id"),
        "name": resource.get("name"),
        "type": "folder" if mime_type == FOLDER_MIME_TYPE else "file",
        "mime_type": mime_type,
        "size": int(resource.get("size", 0)),
        "modified": resource.get("modifiedTime"),
        "starred": bool(resource.get("starred", False)),
        "trashed": bool(resource.get("trashed", False)),
    }


def listing_to_dataframe(listing: FileListing) -> pd.DataFrame:
    """
    Convert a raw Drive file listing to a DataFrame.

    Args:
        listing (FileListing): Response of ``files.list``

    Returns:
        pd.DataFrame: One row per file, columns as in ``_process_metadata``
    """
    entries: List[dict] = [_process_metadata(f) for f in listing.get("files", [])]
    return pd.DataFrame(
        entries,
        columns=["id", "name", "type", "mime_type", "size", "modified", "starred", "trashed"],
    )


class BaseOperations:
    """
    Base class for Google Drive operations.

    Provides core functionality for file operations including:
    - File listing and searching
    - File/folder manipulation (copy, rename, delete)
    - Token validation before every remote call

    Every public operation carries an ``ErrorPolicy``:
    ``list_files``, ``find`` and ``find_by_id`` propagate provider errors
    because their results are rich provider objects; ``delete_file`` and
    ``rename_resource`` collapse failures to ``False``; ``copy_file``
    reports failures in ``OperationResult.error``.

    Attributes:
        config (Config): Package configuration
        storage (TokenStorage): Token store
        token_manager (TokenManager): Validates and refreshes the stored token
        client_provider (ClientProvider): Source of the client used by operations
    """

    def __init__(
        self,
        drive_client=None,
        storage=None,
        config: Optional[Config] = None,
        client_provider: Optional[ClientProvider] = None,
    ):
        """
        Initialize BaseOperations.

        Args:
            drive_client (Optional[DriveClient]): Client to use as-is, skipping token checks.
                Defaults to None, in which case a client is built lazily from the stored token.
            storage (Optional[TokenStorage]): Token store. Defaults to a keyring/Fernet ``TokenStorage``.
            config (Optional[Config]): Configuration. Defaults to ``Config()``.
            client_provider (Optional[ClientProvider]): Explicit client provider, overrides the above.
        """
        self.config = config or Config()
        self.storage = storage if storage is not None else TokenStorage(self.config.SERVICE_NAME)

        if drive_client is not None:
            # Refreshes go through the injected client too
            def factory(token):
                return drive_client

        else:
            factory = self._build_client

        self.token_manager = TokenManager(
            self.storage, factory, margin=self.config.TOKEN_EXPIRY_MARGIN
        )
        if client_provider is not None:
            self.client_provider = client_provider
        elif drive_client is not None:
            self.client_provider = InjectedClient(drive_client)
        else:
            self.client_provider = LazyClient(self.token_manager, factory)

    def _build_client(self, token) -> DriveClient:
        return DriveClient.from_token(token, self.config)

    @error_policy(ErrorPolicy.PROPAGATE)
    def list_files(
        self,
        drive,
        parent_id: Optional[str] = None,
        include_trashed: bool = True,
        only_starred: bool = False,
        order_by: str = "folder,name",
        extra: Optional[dict] = None,
    ) -> FileListing:
        """
        List files, optionally filtered by parent, trash state and star.

        Args:
            parent_id (Optional[str]): Only list children of this folder
            include_trashed (bool): Include trashed files. Defaults to True.
            only_starred (bool): Only list starred files. Defaults to False.
            order_by (str): Drive ``orderBy`` expression. Defaults to "folder,name".
            extra (Optional[dict]): Additional request parameters; they win over the defaults

        Returns:
            FileListing: Raw ``files.list`` response

        Raises:
            googleapiclient.errors.HttpError: If the request fails

        Example:
            ```python
            listing = ops.list_files(parent_id="abc", include_trashed=False)
            names = [f["name"] for f in listing["files"]]
            ```
        """
        query = DriveQuery()
        if not include_trashed:
            query.not_trashed()
        if parent_id:
            query.in_parent(parent_id)
        if only_starred:
            query.starred()

        params = {
            "fields": "nextPageToken, files/*",
            "supportsAllDrives": True,
            "includeItemsFromAllDrives": True,
            "orderBy": order_by,
        }
        if query:
            params["q"] = str(query)
        params.update(extra or {})

        logger.debug(f"Listing files with {params}")
        return drive.list(**params)

    @error_policy(ErrorPolicy.PROPAGATE)
    def find(self, drive, name: str, parent_id: Optional[str] = None) -> FileListing:
        """
        Find files whose name matches exactly.

        Args:
            name (str): Exact file name
            parent_id (Optional[str]): Restrict the search to this folder

        Returns:
            FileListing: Raw ``files.list`` response

        Raises:
            googleapiclient.errors.HttpError: If the request fails
        """
        query = DriveQuery().name_equals(name)
        if parent_id:
            query.in_parent(parent_id)
        return drive.list(q=str(query), supportsAllDrives=True)

    @error_policy(ErrorPolicy.PROPAGATE)
    def find_by_id(self, drive, file_id: str) -> Resource:
        """
        Fetch every field of a file.

        Unlike the mutating operations this one does not normalize errors:
        callers get the provider exception and decide how to handle it.

        Raises:
            googleapiclient.errors.HttpError: If the file cannot be fetched
        """
        return drive.get(file_id, fields="*", supportsAllDrives=True)

    @error_policy(ErrorPolicy.COLLAPSE_TO_BOOL)
    def delete_file(self, drive, file_id: str) -> bool:
        """
        Permanently delete a file or folder, bypassing the trash.

        Returns:
            bool: True if deletion successful, False on any failure
        """
        drive.delete(file_id, supportsAllDrives=True)
        logger.info(f"Successfully deleted {file_id}")
        return True

    @error_policy(ErrorPolicy.COLLAPSE_TO_BOOL)
    def rename_resource(self, drive, file_id: str, new_name: str) -> bool:
        """
        Rename a file or folder.

        Returns:
            bool: True if the name was updated, False on any failure
        """
        drive.update(file_id, {"name": new_name}, supportsAllDrives=True)
        logger.info(f"Renamed {file_id} to {new_name}")
        return True

    @error_policy(ErrorPolicy.NORMALIZE)
    def copy_file(self, drive, file_id: str, parent_id: Optional[str] = None) -> OperationResult:
        """
        Copy a file, optionally into another folder.

        Args:
            file_id (str): File to copy
            parent_id (Optional[str]): Folder receiving the copy. Defaults to the source's folder.

        Returns:
            OperationResult: Id of the copy, or the error message
        """
        body = {"parents": [parent_id]} if parent_id else {}
        res = drive.copy(file_id, body, supportsAllDrives=True)
        return OperationResult.ok(res["id"])
