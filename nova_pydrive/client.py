"""Google Drive API client and client providers for nova-pydrive."""

import io
import json
import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, List, Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseDownload, MediaIoBaseUpload

from nova_pydrive.config import Config
from nova_pydrive.constants import API_MESSAGES, DEFAULT_MIME_TYPE
from nova_pydrive.exceptions import ConfigurationError
from nova_pydrive.types import FileListing, Resource, TokenRecord

logger = logging.getLogger(__name__)


def load_client_secrets(path: str) -> dict:
    """
    Read the OAuth client id and secret from a Google client-secrets file.

    Args:
        path (str): Path to the JSON file downloaded from the Cloud Console

    Returns:
        dict: The ``installed`` or ``web`` section of the file

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read credentials file {path}: {e}") from e

    section = data.get("installed") or data.get("web")
    if not section or "client_id" not in section or "client_secret" not in section:
        raise ConfigurationError(
            f"Credentials file {path} has no client_id/client_secret"
        )
    return section


class DriveClient:
    """
    Authenticated client for the Google Drive v3 API.

    Wraps a ``googleapiclient`` Drive resource built from a token record and
    exposes the handful of calls the operations need. Every method may raise
    ``googleapiclient.errors.HttpError`` or ``google.auth.exceptions.GoogleAuthError``.
    """

    def __init__(
        self,
        token: TokenRecord,
        client_id: str,
        client_secret: str,
        scopes: Optional[List[str]] = None,
        token_uri: str = Config.TOKEN_URI,
        chunk_size: int = Config.CHUNK_SIZE,
    ):
        self.token = token
        self.chunk_size = chunk_size
        self.credentials = Credentials(
            token=token.get("access_token"),
            refresh_token=token.get("refresh_token"),
            token_uri=token_uri,
            client_id=client_id,
            client_secret=client_secret,
            scopes=scopes,
        )
        self._service = None

    @classmethod
    def from_token(cls, token: TokenRecord, config: Optional[Config] = None) -> "DriveClient":
        """Build a client from a token record and the configured client secrets."""
        config = config or Config()
        secrets = load_client_secrets(config.CREDENTIALS_FILE)
        return cls(
            token,
            client_id=secrets["client_id"],
            client_secret=secrets["client_secret"],
            scopes=config.SCOPES,
            token_uri=secrets.get("token_uri", config.TOKEN_URI),
            chunk_size=config.CHUNK_SIZE,
        )

    @property
    def files(self):
        if self._service is None:
            self._service = build(
                "drive", "v3", credentials=self.credentials, cache_discovery=False
            )
            logger.debug(API_MESSAGES["client_built"])
        return self._service.files()

    def exchange_refresh_token(self) -> TokenRecord:
        """
        Exchange the refresh token for a new access token.

        Returns:
            TokenRecord: A complete new record, ``created`` set to now

        Raises:
            google.auth.exceptions.RefreshError: If the provider rejects the exchange
        """
        self.credentials.refresh(Request())
        created = int(time.time())
        expires_in = 0
        if self.credentials.expiry is not None:
            # google-auth reports expiry as a naive UTC datetime
            expiry = self.credentials.expiry.replace(tzinfo=timezone.utc)
            expires_in = int((expiry - datetime.now(timezone.utc)).total_seconds())

        record: TokenRecord = {
            "access_token": self.credentials.token,
            "created": created,
            "expires_in": expires_in,
        }
        refresh_token = self.credentials.refresh_token or self.token.get("refresh_token")
        if refresh_token:
            record["refresh_token"] = refresh_token
        return record

    def _download(self, request) -> bytes:
        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, request, chunksize=self.chunk_size)
        done = False
        while not done:
            _, done = downloader.next_chunk()
        return buffer.getvalue()

    def create(
        self,
        body: dict,
        content: Optional[bytes] = None,
        mime_type: Optional[str] = None,
        **params,
    ) -> Resource:
        media = None
        if content is not None:
            media = MediaIoBaseUpload(
                io.BytesIO(content),
                mimetype=mime_type or DEFAULT_MIME_TYPE,
                chunksize=self.chunk_size,
            )
        return self.files.create(body=body, media_body=media, **params).execute()

    def get(self, file_id: str, **params) -> Resource:
        return self.files.get(fileId=file_id, **params).execute()

    def get_media(self, file_id: str) -> bytes:
        return self._download(
            self.files.get_media(fileId=file_id, supportsAllDrives=True)
        )

    def export(self, file_id: str, mime_type: str) -> bytes:
        return self._download(self.files.export_media(fileId=file_id, mimeType=mime_type))

    def update(self, file_id: str, body: dict, **params) -> Resource:
        return self.files.update(fileId=file_id, body=body, **params).execute()

    def delete(self, file_id: str, **params) -> None:
        self.files.delete(fileId=file_id, **params).execute()

    def copy(self, file_id: str, body: dict, **params) -> Resource:
        return self.files.copy(fileId=file_id, body=body, **params).execute()

    def list(self, **params) -> FileListing:
        return self.files.list(**params).execute()


class ClientProvider(ABC):
    """Hands out the client every operation runs against."""

    @abstractmethod
    def get(self):
        """Return the client for the next remote call."""

    def reset(self) -> None:
        pass


class InjectedClient(ClientProvider):
    """Provider returning a client supplied by the caller, unchecked."""

    def __init__(self, client):
        self.client = client

    def get(self):
        return self.client


class LazyClient(ClientProvider):
    """
    Provider that builds a client on first use from a validated token.

    The token is checked through the token manager on every ``get()``; the
    client itself is built once per session and rebuilt only when the stored
    access token changed, i.e. after a refresh.

    Args:
        token_manager (TokenManager): Validates and refreshes the stored token
        factory (Callable): Builds a client from a token record
    """

    def __init__(self, token_manager, factory: Callable[[TokenRecord], DriveClient]):
        self.token_manager = token_manager
        self.factory = factory
        self._client = None
        self._access_token = None

    def get(self):
        token = self.token_manager.ensure_valid()
        if self._client is None or token["access_token"] != self._access_token:
            self._client = self.factory(token)
            self._access_token = token["access_token"]
            logger.info(API_MESSAGES["client_built"])
        return self._client

    def reset(self) -> None:
        self._client = None
        self._access_token = None
