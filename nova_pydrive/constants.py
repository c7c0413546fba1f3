"""
Constants module for nova-pydrive.

This module defines enumerations and constant values used throughout the package:
- Google Drive MIME types
- Per-operation error policies
- Export formats for native Google documents
- Standard log and CLI messages

Note:
    All enumerations inherit from Enum for type safety and consistency.
"""

from enum import Enum
from typing import Dict, NamedTuple

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
DEFAULT_MIME_TYPE = "application/octet-stream"


class ErrorPolicy(Enum):
    """
    How an operation reports failures of its remote calls.

    Attributes:
        NORMALIZE: Failure is captured into ``OperationResult.error``
        COLLAPSE_TO_BOOL: Failure is reported as ``False``, details are dropped
        PROPAGATE: The provider exception reaches the caller unchanged

    Example:
        ```python
        FolderOperations.create_folder.error_policy  # ErrorPolicy.NORMALIZE
        ```
    """

    NORMALIZE = "normalize"
    COLLAPSE_TO_BOOL = "collapse_to_bool"
    PROPAGATE = "propagate"


class ExportFormat(NamedTuple):
    """Target MIME type and file extension for a native document export."""

    mime_type: str
    extension: str


# https://developers.google.com/drive/api/guides/ref-export-formats
EXPORT_FORMATS: Dict[str, ExportFormat] = {
    "application/vnd.google-apps.document": ExportFormat(
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ".docx",
    ),
    "application/vnd.google-apps.spreadsheet": ExportFormat(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        ".xlsx",
    ),
    "application/vnd.google-apps.presentation": ExportFormat(
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        ".pptx",
    ),
    "application/vnd.google-apps.drawing": ExportFormat("image/png", ".png"),
}

# API response messages
API_MESSAGES: Dict[str, str] = {
    "token_missing": "No access token stored. Please authorize first.",
    "token_expired": "Access token expired and could not be refreshed.",
    "token_refreshed": "Access token refreshed and stored.",
    "token_valid": "Access token is valid.",
    "client_built": "Google Drive client built",
    "export_unsupported": "No export format for MIME type: {}",
}
