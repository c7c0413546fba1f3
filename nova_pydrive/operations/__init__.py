"""Operations module for nova-pydrive."""

from nova_pydrive.operations.base import BaseOperations, error_policy, listing_to_dataframe
from nova_pydrive.operations.files import FileOperations
from nova_pydrive.operations.folders import FolderOperations
from nova_pydrive.operations.query import DriveQuery

__all__ = [
    "BaseOperations",
    "DriveQuery",
    "FileOperations",
    "FolderOperations",
    "error_policy",
    "listing_to_dataframe",
]
