"""Folder operations module for nova-pydrive."""

import logging
from typing import Optional

from nova_pydrive.constants import FOLDER_MIME_TYPE, ErrorPolicy
from nova_pydrive.operations.base import BaseOperations, error_policy
from nova_pydrive.types import OperationResult

logger = logging.getLogger(__name__)


class FolderOperations(BaseOperations):
    """
    Class for handling Google Drive folder operations.

    Provides functionality for:
    - Nested folder creation from a '/'-delimited path
    - Folder existence checks

    Inherits from:
        BaseOperations: Core Google Drive operations functionality
    """

    @error_policy(ErrorPolicy.NORMALIZE)
    def create_folder(
        self, drive, path: str, parent_id: Optional[str] = None
    ) -> OperationResult:
        """
        Create one folder per segment of a '/'-delimited path.

        Each segment is created inside the folder created for the previous
        one; the first segment goes into ``parent_id``, or the Drive root.

        Args:
            path (str): For example "path/to/folder" creates path, to and folder
            parent_id (Optional[str]): Folder receiving the first segment

        Returns:
            OperationResult: Id of the last created folder, or the error of
            the first failing segment

        Note:
            - Creation stops at the first failing segment
            - Folders created before the failure are kept

        Example:
            ```python
            result = ops.create_folder("Reports/2024/Q1")
            if result.error:
                print(result.error)
            ```
        """
        resource_id = parent_id
        for folder_name in path.split("/"):
            body = {"name": folder_name, "mimeType": FOLDER_MIME_TYPE}
            if resource_id is not None:
                body["parents"] = [resource_id]

            res = drive.create(body, fields="id", supportsAllDrives=True)
            resource_id = res["id"]
            logger.info(f"Created folder {folder_name} ({resource_id})")

        return OperationResult.ok(resource_id)

    @error_policy(ErrorPolicy.COLLAPSE_TO_BOOL)
    def folder_exists(self, drive, file_id: Optional[str], in_trash: bool = True) -> bool:
        """
        Check whether a folder exists.

        Args:
            file_id (Optional[str]): Id of the folder
            in_trash (bool, optional): Treat a trashed folder as missing. Defaults to True.

        Returns:
            bool: True only if the folder could be fetched, has an id and
            (with ``in_trash``) is not trashed. Never raises.
        """
        if not file_id:
            return False

        res = drive.get(file_id, fields="id,trashed", supportsAllDrives=True)
        if in_trash and res.get("trashed"):
            return False
        return bool(res.get("id"))
