import logging
import threading
import time
from typing import Callable, Optional

import httpx

from jobsync.errors import AuthenticationError

logger = logging.getLogger(__name__)

EXPIRY_MARGIN_SECONDS = 5 * 60
DEFAULT_EXPIRES_IN = 3600


class ZohoTokenProvider:
    """Process-wide Zoho access token cache.

    Tokens come from the refresh_token grant and are reused until five
    minutes before they expire. Build one per process and hand it to every
    ZohoClient.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        accounts_url: str = "https://accounts.zoho.com",
        timeout: float = 30.0,
        clock: Callable[[], float] = time.time,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.token_url = f"{accounts_url.rstrip('/')}/oauth/v2/token"
        self.timeout = timeout
        self.clock = clock
        self._token: Optional[str] = None
        self._expires_at = 0.0
        self._lock = threading.Lock()

    @property
    def is_valid(self) -> bool:
        return self._token is not None and self.clock() < self._expires_at

    def get_token(self, force_refresh: bool = False) -> str:
        with self._lock:
            if not force_refresh and self.is_valid:
                return self._token
            return self._refresh()

    def invalidate(self):
        with self._lock:
            self._token = None
            self._expires_at = 0.0

    def _refresh(self) -> str:
        if not (self.client_id and self.client_secret and self.refresh_token):
            raise AuthenticationError("Zoho client id, client secret and refresh token are required")

        logger.info("Requesting new Zoho access token")
        data = {
            "refresh_token": self.refresh_token,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "refresh_token",
        }
        try:
            response = httpx.post(self.token_url, data=data, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise AuthenticationError(f"Zoho token request failed: {e}") from e

        token = body.get("access_token")
        if not token:
            raise AuthenticationError(f"Zoho token response has no access_token: {body.get('error', body)}")

        expires_in = body.get("expires_in") or DEFAULT_EXPIRES_IN
        self._token = token
        self._expires_at = self.clock() + expires_in - EXPIRY_MARGIN_SECONDS
        logger.info("Obtained Zoho access token %s..., expires in %ss", token[:6], expires_in)
        return token
