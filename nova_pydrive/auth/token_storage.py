import base64
import json
import logging
import platform
from pathlib import Path
from typing import Optional

import keyring
from cryptography.fernet import Fernet, InvalidToken

from nova_pydrive.exceptions import TokenStorageError
from nova_pydrive.types import TokenRecord

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"


class TokenStorage:
    """
    A class to handle secure storage of the Google Drive token record.

    This class provides two storage backends:
    1. System keyring (default on non-Windows systems)
    2. File-based storage with Fernet encryption (default on Windows)

    The whole record is serialized as one JSON document, so a write always
    replaces the previous record instead of patching individual fields.

    Attributes:
        service_name (str): Name of the service for keyring storage
        use_keyring (bool): Whether to use keyring backend or Fernet encryption

    Args:
        service_name (str, optional): Service name for keyring storage. Defaults to "nova-pydrive".
        force_fernet (bool, optional): Force use of Fernet encryption instead of keyring. Defaults to None.
    """

    def __init__(self, service_name: str = "nova-pydrive", force_fernet: bool = None):
        self.service_name = service_name
        # Allow force_fernet to override platform check for testing
        if force_fernet is not None:
            self.use_keyring = not force_fernet
        else:
            # Default behavior: Force Fernet encryption on Windows
            self.use_keyring = platform.system() != "Windows" and self._test_keyring()

        logger.info(
            f"Using {'keyring' if self.use_keyring else 'Fernet encryption'} backend for token storage"
        )

    def _test_keyring(self) -> bool:
        """
        Test if the system keyring is working correctly.

        Returns:
            bool: True if keyring is working, False otherwise
        """
        try:
            keyring.set_password(self.service_name, "test", "test")
            test_value = keyring.get_password(self.service_name, "test")
            keyring.delete_password(self.service_name, "test")
            return test_value == "test"
        except Exception as e:
            logger.warning(f"Keyring not available: {e}")
            return False

    def _get_config_dir(self) -> Path:
        """
        Get or create the configuration directory path.

        Returns:
            Path: Path to the configuration directory
        """
        config_dir = Path.home() / ".config" / self.service_name
        try:
            config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create config directory: {e}")
        return config_dir

    def _get_or_create_encryption_key(self) -> bytes:
        """
        Get existing or create new encryption key for Fernet.

        Returns:
            bytes: The encryption key
        """
        key_path = self._get_config_dir() / ".key"
        if key_path.exists():
            return key_path.read_bytes()
        key_path.parent.mkdir(parents=True, exist_ok=True)
        key = Fernet.generate_key()
        key_path.write_bytes(key)
        key_path.chmod(0o600)
        return key

    def _get_token_path(self) -> Path:
        return self._get_config_dir() / ".token.encrypted"

    @staticmethod
    def _is_valid_record(record) -> bool:
        return isinstance(record, dict) and bool(record.get("access_token"))

    def set_token(self, token: TokenRecord) -> None:
        """
        Store the token record, replacing any previous one.

        Args:
            token (TokenRecord): Complete token record to persist

        Raises:
            TokenStorageError: If neither backend could store the record

        Note:
            Falls back to Fernet encryption if the keyring write fails
        """
        payload = json.dumps(dict(token))
        if self.use_keyring:
            try:
                encoded = base64.b64encode(payload.encode()).decode()
                keyring.set_password(self.service_name, TOKEN_KEY, encoded)
                logger.info("Token saved successfully using keyring")
                return
            except Exception as e:
                logger.error(f"Failed to save token to keyring: {e}")
                logger.info("Falling back to Fernet encryption")

        try:
            self._fernet_save(payload)
        except Exception as e:
            logger.error(f"Fernet save failed: {e}")
            raise TokenStorageError(f"Could not store token: {e}") from e

    def get_token(self) -> Optional[TokenRecord]:
        """
        Retrieve the token record from the configured storage backend.

        Returns:
            Optional[TokenRecord]: The stored record, or None when nothing usable is stored
        """
        try:
            if self.use_keyring:
                encoded = keyring.get_password(self.service_name, TOKEN_KEY)
                if not encoded:
                    return None
                record = json.loads(base64.b64decode(encoded.encode()).decode())
            else:
                record = self._fernet_load()
        except Exception as e:
            logger.error(f"Error retrieving token: {e}")
            return None

        if not self._is_valid_record(record):
            logger.debug("Stored token record has no access token")
            return None
        return record

    def _fernet_save(self, payload: str) -> None:
        f = Fernet(self._get_or_create_encryption_key())
        token_path = self._get_token_path()
        token_path.parent.mkdir(parents=True, exist_ok=True)
        token_path.write_bytes(f.encrypt(payload.encode()))
        token_path.chmod(0o600)  # Secure file permissions
        logger.info("Token saved successfully using Fernet encryption")

    def _fernet_load(self) -> Optional[dict]:
        token_path = self._get_token_path()
        if not token_path.exists():
            logger.debug("Token file does not exist")
            return None

        f = Fernet(self._get_or_create_encryption_key())
        try:
            decrypted = f.decrypt(token_path.read_bytes())
        except InvalidToken:
            logger.error("Failed to decrypt token data - invalid token")
            return None
        try:
            return json.loads(decrypted.decode("utf-8"))
        except json.JSONDecodeError:
            logger.error("Failed to parse decrypted token data")
            return None

    def clear_token(self) -> bool:
        """
        Clear the stored token record from the active backend.

        Returns:
            bool: True if clearing successful, False otherwise
        """
        try:
            if self.use_keyring:
                try:
                    keyring.delete_password(self.service_name, TOKEN_KEY)
                except keyring.errors.PasswordDeleteError:
                    pass
            else:
                token_path = self._get_token_path()
                if token_path.exists():
                    token_path.unlink()
            logger.info("Token cleared successfully")
            return True
        except Exception as e:
            logger.error(f"Error clearing token: {e}")
            return False
