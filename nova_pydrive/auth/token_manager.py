"""Access token lifecycle for nova-pydrive."""

import logging
import threading
import time
from typing import Callable, Optional

from nova_pydrive.config import Config
from nova_pydrive.constants import API_MESSAGES
from nova_pydrive.exceptions import AuthenticationError
from nova_pydrive.types import TokenRecord

logger = logging.getLogger(__name__)


class TokenManager:
    """
    Tracks expiry of the stored access token and refreshes it on demand.

    A token counts as expired once its nominal expiry (``created +
    expires_in``) lies at least ``margin`` seconds in the past. Expired
    tokens are refreshed inline, one attempt per check, and the refreshed
    record is written back to the store.

    Refreshes are serialized per manager instance; use one manager per
    authenticated identity.

    Attributes:
        storage: Token store exposing ``get_token()`` and ``set_token()``
        client_factory (Callable): Builds a client able to exchange the refresh token
        margin (int): Seconds past nominal expiry after which a token is considered expired
        clock (Callable): Returns the current unix time
    """

    def __init__(
        self,
        storage,
        client_factory: Callable[[TokenRecord], object],
        margin: int = Config.TOKEN_EXPIRY_MARGIN,
        clock: Callable[[], float] = time.time,
    ):
        self.storage = storage
        self.client_factory = client_factory
        self.margin = margin
        self.clock = clock
        self._lock = threading.Lock()

    def _check_expires_in(self, token: TokenRecord) -> bool:
        return token["created"] + token["expires_in"] <= self.clock() - self.margin

    @staticmethod
    def _is_present(token: Optional[TokenRecord]) -> bool:
        return bool(token) and bool(token.get("access_token"))

    def is_expired(self) -> bool:
        """
        Check the stored token, refreshing it once if it is expired.

        Returns:
            bool: True when no usable token is stored or the token is still
            expired after a refresh attempt, False otherwise

        Raises:
            Exception: Whatever the refresh raised; failures are not retried

        Note:
            A missing record or one without an access token is reported as
            expired without attempting a refresh.
        """
        token = self.storage.get_token()
        if not self._is_present(token):
            logger.info(API_MESSAGES["token_missing"])
            return True

        if not self._check_expires_in(token):
            return False

        logger.info("Access token expired, refreshing")
        with self._lock:
            current = self.storage.get_token()
            if not self._is_present(current):
                logger.info(API_MESSAGES["token_missing"])
                return True
            # Another caller may have refreshed while we waited for the lock
            if not self._check_expires_in(current):
                logger.debug("Token already refreshed by a concurrent caller")
                return False
            token = self._refresh_locked(current)
        return self._check_expires_in(token)

    def refresh(self) -> TokenRecord:
        """
        Exchange the refresh token for a new access token and store it.

        Returns:
            TokenRecord: The new record, as written to the store

        Raises:
            AuthenticationError: If no token is stored
            Exception: Any error from the client exchange or the store
        """
        with self._lock:
            return self._refresh_locked(self.storage.get_token())

    def _refresh_locked(self, token: Optional[TokenRecord]) -> TokenRecord:
        if not self._is_present(token):
            raise AuthenticationError(API_MESSAGES["token_missing"])

        client = self.client_factory(token)
        new_token = client.exchange_refresh_token()
        self.storage.set_token(new_token)
        logger.info(API_MESSAGES["token_refreshed"])
        return new_token

    def ensure_valid(self) -> TokenRecord:
        """
        Return the stored token, refreshing it first if needed.

        Raises:
            AuthenticationError: If no valid token can be obtained
        """
        if self.is_expired():
            raise AuthenticationError(API_MESSAGES["token_expired"])
        return self.storage.get_token()
