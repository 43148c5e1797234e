import logging
import math
import re
from typing import Optional

import httpx

from jobsync.errors import UnexpectedResponseError
from jobsync.models import Application, JobListing, JobSeeker, Resume
from jobsync.retry import send_with_retry

logger = logging.getLogger(__name__)


class SJBClient:
    """Smart Job Board REST API. Authenticates with an api_key query parameter."""

    def __init__(
        self,
        board: str,
        api_key: str,
        job_id: Optional[str] = None,
        timeout: float = 30.0,
        max_retries: int = 3,
    ):
        self.base_url = f"https://{board}.mysmartjobboard.com/api"
        self.api_key = api_key
        self.job_id = job_id
        self.max_retries = max_retries
        self.client = httpx.Client(timeout=timeout)

    def close(self):
        self.client.close()

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        params = {"api_key": self.api_key, **kwargs.pop("params", {})}
        response = send_with_retry(
            lambda: self.client.request(method, url, params=params, **kwargs),
            max_retries=self.max_retries,
        )
        response.raise_for_status()
        return response

    def _request(self, method: str, endpoint: str, **kwargs) -> dict:
        return self._send(method, f"{self.base_url}/{endpoint}", **kwargs).json()

    def _applications_endpoint(self) -> str:
        if self.job_id:
            return f"jobs/{self.job_id}/applications"
        return "applications"

    def list_applications(self, page: int = 1, page_size: int = 100) -> tuple[list[Application], int]:
        """One page of applications plus the total count across all pages"""
        response = self._send(
            "GET",
            f"{self.base_url}/{self._applications_endpoint()}",
            params={"page": page, "limit": page_size},
        )
        body = response.json()
        if not isinstance(body, dict) or "applications" not in body:
            raise UnexpectedResponseError(f"Applications response has no 'applications' key: {str(body)[:200]}")

        items = [Application(**item) for item in body["applications"] or []]
        total = body.get("total")
        if total is None:
            total = response.headers.get("X-Total-Count", len(items))
        return items, int(total)

    def fetch_all_applications(self, page_size: int = 100) -> list[Application]:
        applications, total = self.list_applications(page=1, page_size=page_size)
        pages = math.ceil(total / page_size) if page_size else 1
        for page in range(2, pages + 1):
            page_items, _ = self.list_applications(page=page, page_size=page_size)
            logger.info("Retrieved %d more applications from page %d/%d", len(page_items), page, pages)
            applications.extend(page_items)
        logger.info("Retrieved %d applications (total reported: %d)", len(applications), total)
        return applications

    def get_job_seeker(self, jobseeker_id) -> Optional[JobSeeker]:
        """Job seeker profile, or None when SJB has no such id"""
        try:
            data = self._request("GET", f"jobseekers/{jobseeker_id}")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise
        return JobSeeker(**data)

    def get_job_listing(self, listing_id) -> JobListing:
        data = self._request("GET", f"jobs/{listing_id}")
        if data.get("id") is None:
            data["id"] = listing_id
        return JobListing(**data)

    def get_resume(self, resume_id) -> Resume:
        """Resume metadata, then the file it points to"""
        metadata = self._request("GET", f"resumes/{resume_id}")
        resume_url = metadata.get("resume")
        if not resume_url:
            raise UnexpectedResponseError(f"Resume {resume_id} has no file URL")

        response = self._send("GET", resume_url)
        content_type = response.headers.get("content-type", "application/pdf").split(";")[0].strip()
        if content_type == "application/json":
            raise UnexpectedResponseError(f"Received JSON instead of a file for resume {resume_id}: {response.text[:200]}")

        return Resume(
            data=response.content,
            content_type=content_type or "application/pdf",
            filename=_filename_from_disposition(response.headers.get("content-disposition"))
            or f"resume_{resume_id}.pdf",
            url=resume_url,
        )

    def find_job_seeker_by_email(self, email: str) -> Optional[JobSeeker]:
        data = self._request("GET", "jobseekers", params={"email": email, "order": "asc"})
        seekers = data.get("jobseekers") or []
        return JobSeeker(**seekers[0]) if seekers else None

    def create_job_seeker(self, payload: dict) -> str:
        """Create job seeker, returns ID"""
        data = self._request("POST", "jobseekers", json=payload)
        if data.get("id") is None:
            raise UnexpectedResponseError(f"Job seeker create returned no id: {str(data)[:200]}")
        return str(data["id"])


def _filename_from_disposition(header: Optional[str]) -> Optional[str]:
    if not header:
        return None
    match = re.search(r'filename="?([^";]+)"?', header)
    return match.group(1) if match else None
