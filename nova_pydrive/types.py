from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, TypedDict, Union


class _TokenRecordBase(TypedDict):
    access_token: str
    created: int
    expires_in: int


class TokenRecord(_TokenRecordBase, total=False):
    """Type definition for a persisted OAuth2 token record"""

    refresh_token: str


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a normalized operation.

    Exactly one of ``resource_id`` and ``error`` is set. Instances are values:
    they are built once per call and never modified afterwards.
    """

    resource_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, resource_id: str) -> "OperationResult":
        return cls(resource_id=resource_id)

    @classmethod
    def failed(cls, error: str) -> "OperationResult":
        return cls(error=error)


# Raw Drive v3 JSON payloads
Resource = Dict[str, Any]
FileListing = Dict[str, Any]

# Type aliases for common types
PathLike = Union[str, Path]
FileSource = Union[str, Path, BinaryIO]
