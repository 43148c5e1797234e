from typing import Optional

from jobsync.destinations.base import Destination, UpsertDestination
from jobsync.zoho_client import ZohoClient


class ZohoCandidates(UpsertDestination):
    """Zoho candidates keyed by email"""

    def __init__(self, zoho: ZohoClient):
        self.zoho = zoho

    def find(self, key: str) -> Optional[dict]:
        return self.zoho.search_candidate_by_email(key)

    def create(self, payload: dict) -> str:
        return self.zoho.create_candidate(payload)

    def update(self, record_id: str, payload: dict):
        self.zoho.update_candidate(record_id, payload)


class ZohoJobOpenings(Destination):
    """Zoho job openings keyed by SJB listing id. Find-or-create only."""

    def __init__(self, zoho: ZohoClient):
        self.zoho = zoho

    def find(self, key: str) -> Optional[dict]:
        return self.zoho.search_job_opening_by_external_id(key)

    def create(self, payload: dict) -> str:
        return self.zoho.create_job_opening(payload)
