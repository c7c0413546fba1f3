"""Authentication module for nova-pydrive."""

from nova_pydrive.auth.token_manager import TokenManager
from nova_pydrive.auth.token_storage import TokenStorage

__all__ = [
    "TokenManager",
    "TokenStorage",
]
