import logging
from typing import Optional

import httpx

from jobsync.errors import AuthenticationError
from jobsync.models import Registration
from jobsync.retry import send_with_retry

logger = logging.getLogger(__name__)


class BrazenClient:
    """Brazen event registration API (OAuth2 client credentials)"""

    def __init__(
        self,
        base_url: str,
        client_id: str,
        client_secret: str,
        timeout: float = 30.0,
        max_retries: int = 3,
    ):
        self.base_url = base_url.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.max_retries = max_retries
        self.client = httpx.Client(timeout=timeout)
        self.token: Optional[str] = None

    def close(self):
        self.client.close()

    def authenticate(self, client_id: Optional[str] = None, client_secret: Optional[str] = None) -> str:
        """Fetch an access token and keep it for later requests"""
        data = {
            "client_id": client_id or self.client_id,
            "client_secret": client_secret or self.client_secret,
            "grant_type": "client_credentials",
        }
        try:
            response = self.client.post(f"{self.base_url}/oauth2/token", json=data)
            response.raise_for_status()
            token = response.json().get("access_token")
        except (httpx.HTTPError, ValueError) as e:
            raise AuthenticationError(f"Brazen authentication failed: {e}") from e
        if not token:
            raise AuthenticationError("Brazen token response has no access_token")
        self.token = token
        return token

    def _attempt(self, method: str, url: str, **kwargs) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self.token}"}
        return send_with_retry(
            lambda: self.client.request(method, url, headers=headers, **kwargs),
            max_retries=self.max_retries,
        )

    def _send(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """Bearer-authenticated request; a 401 re-authenticates once and retries once"""
        if not self.token:
            self.authenticate()
        url = f"{self.base_url}/{endpoint}"
        response = self._attempt(method, url, **kwargs)

        if response.status_code == 401:
            logger.info("Brazen rejected the access token, re-authenticating for %s %s", method, endpoint)
            self.authenticate()
            response = self._attempt(method, url, **kwargs)
            if response.status_code == 401:
                raise AuthenticationError(f"Brazen rejected a fresh token for {method} {endpoint}")
        return response

    def _request(self, method: str, endpoint: str, **kwargs) -> dict:
        response = self._send(method, endpoint, **kwargs)
        response.raise_for_status()
        return response.json() if response.content else {}

    def create_registration(
        self,
        event_id: str,
        email: str,
        form_data: str,
        first_name: str = "",
        last_name: str = "",
    ) -> bool:
        """Register an email for the event.

        Returns False when Brazen reports the email as already registered (409).
        """
        response = self._send(
            "POST",
            f"events/{event_id}/registrations",
            json={
                "email": email,
                "event_code": event_id,
                "data": form_data,
                "first_name": first_name,
                "last_name": last_name,
            },
        )
        if response.status_code == 409:
            logger.info("%s already registered for event %s", email, event_id)
            return False
        response.raise_for_status()
        logger.info("Registered %s for event %s", email, event_id)
        return True

    def list_registrations(self, event_id: str) -> list[dict]:
        data = self._request("GET", f"events/{event_id}/registrations")
        if isinstance(data, list):
            return data
        return data.get("registrations") or data.get("data") or []

    def get_registration(self, registration_id) -> Registration:
        body = self._request("GET", f"registrations/{registration_id}")
        # detail may arrive wrapped in an envelope; the form answers are a string
        if isinstance(body.get("data"), dict):
            body = body["data"]
        return Registration(**body)
