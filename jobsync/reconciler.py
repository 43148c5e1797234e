import logging
from datetime import date
from typing import Optional

from jobsync.destinations.base import Destination, UpsertDestination
from jobsync.destinations.zoho import ZohoCandidates, ZohoJobOpenings
from jobsync.mappers import build_association, build_job_opening
from jobsync.models import AssociationSummary, EnrichedApplication, JobListing, UpsertResult, ZohoCandidate
from jobsync.zoho_client import ZohoClient

logger = logging.getLogger(__name__)


def find_existing(destination: Destination, key: str) -> Optional[dict]:
    """Exact-match lookup; a miss is the create signal, not an error"""
    return destination.find(key)


def create_or_update(destination: UpsertDestination, key: str, payload: dict) -> UpsertResult:
    existing = find_existing(destination, key)
    if existing:
        record_id = str(existing["id"])
        destination.update(record_id, payload)
        logger.info("Updated %s (ID: %s)", key, record_id)
        return UpsertResult(id=record_id, was_created=False)

    record_id = str(destination.create(payload))
    logger.info("Created %s (ID: %s)", key, record_id)
    return UpsertResult(id=record_id, was_created=True)


class Reconciler:
    """Create-or-update and association dedup against Zoho Recruit"""

    def __init__(self, zoho: ZohoClient, today: Optional[date] = None):
        self.zoho = zoho
        self.candidates = ZohoCandidates(zoho)
        self.job_openings = ZohoJobOpenings(zoho)
        self.today = today

    def upsert_candidate(self, email: str, candidate: ZohoCandidate) -> UpsertResult:
        return create_or_update(self.candidates, email, candidate.to_payload())

    def resolve_job_opening(self, job_listing: JobListing) -> str:
        """Zoho job opening id for a listing, creating the opening on a miss.

        Two runs racing on a never-seen listing can both create an opening.
        """
        if job_listing.id is not None:
            existing = find_existing(self.job_openings, str(job_listing.id))
            if existing:
                return str(existing["id"])

        logger.info("Creating job opening for listing %s: %s", job_listing.id, job_listing.title)
        return str(self.job_openings.create(build_job_opening(job_listing, self.today)))

    def associate_applications(
        self, candidate_id: str, applications: list[EnrichedApplication]
    ) -> AssociationSummary:
        """Link the candidate to each application's job opening, at most once per opening"""
        summary = AssociationSummary(total=len(applications))
        associated = set(self.zoho.list_associations(candidate_id))

        for enriched in applications:
            job_opening_id = self.resolve_job_opening(enriched.job)
            if job_opening_id in associated:
                logger.info("Candidate %s already associated with job opening %s", candidate_id, job_opening_id)
                summary.skipped += 1
                continue

            metadata = build_association(candidate_id, job_opening_id, enriched.application, self.today)
            self.zoho.create_association(candidate_id, job_opening_id, metadata)
            associated.add(job_opening_id)
            summary.added += 1

        return summary
