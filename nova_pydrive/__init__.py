from .auth.token_manager import TokenManager
from .auth.token_storage import TokenStorage
from .client import DriveClient, InjectedClient, LazyClient
from .config import Config
from .constants import EXPORT_FORMATS, ErrorPolicy, ExportFormat
from .exceptions import (
    AuthenticationError,
    ExportFormatError,
    NovaDriveError,
    OperationError,
    TokenStorageError,
)
from .operations.files import FileOperations
from .operations.folders import FolderOperations
from .service import DriveService
from .types import OperationResult, TokenRecord

__all__ = [
    "Config",
    "ErrorPolicy",
    "ExportFormat",
    "EXPORT_FORMATS",
    "NovaDriveError",
    "AuthenticationError",
    "ExportFormatError",
    "OperationError",
    "TokenStorageError",
    "OperationResult",
    "TokenRecord",
    "TokenManager",
    "TokenStorage",
    "DriveClient",
    "InjectedClient",
    "LazyClient",
    "DriveService",
    "FileOperations",
    "FolderOperations",
]
