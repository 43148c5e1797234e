import logging
from typing import Optional

import httpx

from jobsync.errors import AuthenticationError, UnexpectedResponseError
from jobsync.retry import send_with_retry
from jobsync.tokens import ZohoTokenProvider

logger = logging.getLogger(__name__)

TOKEN_ERROR_CODES = {"INVALID_TOKEN", "INVALID_OAUTH", "OAUTH_SCOPE_MISMATCH"}


def is_token_error(response: httpx.Response) -> bool:
    """401 caused by a stale or rejected access token"""
    if response.status_code != 401:
        return False
    try:
        body = response.json()
    except ValueError:
        return False
    if not isinstance(body, dict):
        return False
    message = str(body.get("message") or "")
    return body.get("code") in TOKEN_ERROR_CODES or "token" in message.lower()


class ZohoClient:
    """Zoho Recruit v2 API"""

    def __init__(
        self,
        tokens: ZohoTokenProvider,
        base_url: str = "https://recruit.zoho.com/recruit/v2",
        timeout: float = 30.0,
        max_retries: int = 3,
    ):
        self.tokens = tokens
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.client = httpx.Client(timeout=timeout)

    def close(self):
        self.client.close()

    def _send(self, method: str, endpoint: str, token: str, **kwargs) -> httpx.Response:
        url = f"{self.base_url}/{endpoint}"
        headers = {"Authorization": f"Zoho-oauthtoken {token}"}
        return send_with_retry(
            lambda: self.client.request(method, url, headers=headers, **kwargs),
            max_retries=self.max_retries,
        )

    def _request(self, method: str, endpoint: str, **kwargs) -> Optional[dict]:
        """Authenticated request; a token error gets one refresh and one retry.

        Returns None for 204 No Content, which Zoho uses for empty searches.
        """
        response = self._send(method, endpoint, self.tokens.get_token(), **kwargs)

        if is_token_error(response):
            logger.info("Zoho rejected the access token, refreshing and retrying %s %s", method, endpoint)
            response = self._send(method, endpoint, self.tokens.get_token(force_refresh=True), **kwargs)
            if response.status_code == 401:
                self.tokens.invalidate()
                raise AuthenticationError(f"Zoho rejected a freshly refreshed token for {method} {endpoint}")

        response.raise_for_status()
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _created_id(result: Optional[dict], entity: str) -> str:
        try:
            return str(result["data"][0]["details"]["id"])
        except (KeyError, IndexError, TypeError):
            raise UnexpectedResponseError(f"Unexpected Zoho response creating {entity}: {str(result)[:200]}")

    def _search(self, module: str, criteria: str) -> Optional[dict]:
        result = self._request("GET", f"{module}/search", params={"criteria": criteria})
        records = (result or {}).get("data") or []
        return records[0] if records else None

    def search_candidate_by_email(self, email: str) -> Optional[dict]:
        """Find candidate by exact email match"""
        return self._search("Candidates", f"(Email:equals:{email})")

    def create_candidate(self, payload: dict) -> str:
        """Create candidate, returns ID"""
        result = self._request("POST", "Candidates", json={"data": [payload]})
        return self._created_id(result, "candidate")

    def update_candidate(self, candidate_id: str, payload: dict):
        self._request("PUT", f"Candidates/{candidate_id}", json={"data": [payload]})

    def upload_attachment(self, candidate_id: str, data: bytes, filename: str, content_type: str):
        """Upload a file to the candidate's Resume attachments"""
        self._request(
            "POST",
            f"Candidates/{candidate_id}/Attachments",
            files={"file": (filename, data, content_type)},
            data={"attachments_category": "Resume"},
        )

    def attach_resume_url(self, candidate_id: str, url: str):
        """Let Zoho fetch the resume itself from a public URL"""
        self._request(
            "POST",
            f"Candidates/{candidate_id}/Attachments",
            params={"attachments_category": "Resume", "attachment_url": url},
        )

    def search_job_opening_by_external_id(self, external_id) -> Optional[dict]:
        """Find job opening by its SJB listing id"""
        return self._search("JobOpenings", f"(SJB_Job_ID:equals:{external_id})")

    def create_job_opening(self, payload: dict) -> str:
        """Create job opening, returns ID"""
        result = self._request("POST", "JobOpenings", json={"data": [payload]})
        return self._created_id(result, "job opening")

    def list_associations(self, candidate_id: str) -> list[str]:
        """Job opening ids the candidate is already associated with"""
        result = self._request("GET", f"Candidates/{candidate_id}/associatejob")
        records = (result or {}).get("data") or []
        return [str(record["Job_Opening_ID"]) for record in records if record.get("Job_Opening_ID")]

    def create_association(self, candidate_id: str, job_opening_id: str, metadata: dict):
        self._request("POST", "Associate_Candidates", json={"data": [metadata]})
        logger.info("Associated candidate %s with job opening %s", candidate_id, job_opening_id)
