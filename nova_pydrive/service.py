"""Google Drive façade for nova-pydrive."""

import logging
from typing import MutableMapping, Optional

from nova_pydrive.operations.files import FileOperations
from nova_pydrive.operations.folders import FolderOperations

logger = logging.getLogger(__name__)


class DriveService(FileOperations, FolderOperations):
    """
    Every Google Drive operation behind one object.

    One instance corresponds to one logical session of one identity: the
    lazily built client is reused across calls until ``close()``.

    Example:
        ```python
        with DriveService(storage=TokenStorage()) as drive:
            if drive.is_token_expired():
                ...  # send the user through authorization
            result = drive.create_folder("Invoices/2024")
        ```
    """

    def __init__(
        self,
        drive_client=None,
        storage=None,
        config=None,
        client_provider=None,
        session: Optional[MutableMapping] = None,
    ):
        super().__init__(
            drive_client=drive_client,
            storage=storage,
            config=config,
            client_provider=client_provider,
        )
        self.session = session if session is not None else {}

    def is_token_expired(self) -> bool:
        """See ``TokenManager.is_expired``."""
        return self.token_manager.is_expired()

    def set_redirect_path_after_auth(self, path: str) -> None:
        """Remember where to send the user once authorization completes."""
        self.session[self.config.REDIRECT_PATH_SESSION_KEY] = path

    def close(self) -> None:
        self.client_provider.reset()
        logger.debug("Drive session closed")

    def __enter__(self) -> "DriveService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
