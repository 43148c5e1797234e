import logging
import secrets
from typing import Optional

import httpx

from jobsync.brazen_client import BrazenClient
from jobsync.errors import SyncError
from jobsync.mappers import (
    JobSeekerCandidateMapper,
    RegistrationCandidateMapper,
    build_job_seeker_payload,
    build_registration_form,
    split_full_name,
)
from jobsync.models import (
    Application,
    BatchResult,
    CandidateGroup,
    EnrichedApplication,
    GroupOutcome,
    JobListing,
    Registration,
)
from jobsync.reconciler import Reconciler
from jobsync.resumes import transfer_resume
from jobsync.sjb_client import SJBClient
from jobsync.zoho_client import ZohoClient

logger = logging.getLogger(__name__)


class SyncPipeline:
    """One SJB -> Zoho (and optionally Brazen) sync run.

    Groups applications by job seeker email, enriches each group with job
    listings and one resume, then pushes the group. A failing group is
    recorded in the BatchResult and the run moves on.
    """

    def __init__(
        self,
        sjb: SJBClient,
        zoho: ZohoClient,
        reconciler: Optional[Reconciler] = None,
        mapper: Optional[JobSeekerCandidateMapper] = None,
        brazen: Optional[BrazenClient] = None,
        event_id: Optional[str] = None,
        page_size: int = 100,
    ):
        self.sjb = sjb
        self.zoho = zoho
        self.reconciler = reconciler or Reconciler(zoho)
        self.mapper = mapper or JobSeekerCandidateMapper()
        self.brazen = brazen
        self.event_id = event_id
        self.page_size = page_size

    def collect_groups(self, applications: list[Application], result: BatchResult) -> dict[str, CandidateGroup]:
        """Group applications by email and enrich them with listings and a resume"""
        groups: dict[str, CandidateGroup] = {}

        for application in applications:
            if application.jobseeker_id is None:
                continue

            try:
                job_seeker = self.sjb.get_job_seeker(application.jobseeker_id)
            except (httpx.HTTPError, ValueError) as e:
                # ValueError covers non-JSON bodies and profiles that fail validation
                logger.warning("Could not fetch job seeker %s: %s", application.jobseeker_id, e)
                result.skipped += 1
                continue
            if not job_seeker or not job_seeker.email:
                result.skipped += 1
                continue

            # first-seen profile wins for the whole group
            group = groups.get(job_seeker.email)
            if group is None:
                group = CandidateGroup(email=job_seeker.email, job_seeker=job_seeker)
                groups[job_seeker.email] = group

            group.applications.append(
                EnrichedApplication(application=application, job=self._fetch_listing(application.listing_id))
            )

            if application.resume_id is not None and not group.resume_attempted:
                group.resume_attempted = True
                try:
                    group.resume = self.sjb.get_resume(application.resume_id)
                    logger.info("Retrieved resume for %s", group.email)
                except (httpx.HTTPError, SyncError, ValueError) as e:
                    logger.warning("Failed to fetch resume %s for %s: %s", application.resume_id, group.email, e)

        return groups

    def _fetch_listing(self, listing_id) -> JobListing:
        if listing_id is None:
            return JobListing.placeholder(None)
        try:
            return self.sjb.get_job_listing(listing_id)
        except (httpx.HTTPError, SyncError, ValueError) as e:
            logger.warning("Could not fetch listing %s, using placeholder: %s", listing_id, e)
            return JobListing.placeholder(listing_id)

    def process_group(self, group: CandidateGroup, dry_run: bool = False) -> GroupOutcome:
        first = group.applications[0] if group.applications else None
        candidate = self.mapper.map(
            group.job_seeker,
            first.application if first else None,
            first.job if first else None,
            group.resume,
        )
        if dry_run:
            return GroupOutcome(email=group.email, status="mapped")

        try:
            upsert = self.reconciler.upsert_candidate(group.email, candidate)
            associations = self.reconciler.associate_applications(upsert.id, group.applications)
            resume_uploaded = transfer_resume(self.zoho, upsert.id, group.resume) if group.resume else False
            registered = self._register_for_event(group)
        except Exception as e:
            logger.error("Failed to sync %s: %s", group.email, e)
            return GroupOutcome(email=group.email, status="failed", error=str(e))

        logger.info(
            "%s %s (ID: %s): %d associations added, %d already present%s",
            "Created" if upsert.was_created else "Updated",
            group.email,
            upsert.id,
            associations.added,
            associations.skipped,
            ", resume uploaded" if resume_uploaded else "",
        )
        return GroupOutcome(
            email=group.email,
            status="created" if upsert.was_created else "updated",
            candidate_id=upsert.id,
            associations=associations,
            resume_uploaded=resume_uploaded,
            registered=registered,
        )

    def _register_for_event(self, group: CandidateGroup) -> bool:
        if not (self.brazen and self.event_id):
            return False
        first_name, last_name = split_full_name(group.job_seeker.full_name)
        return self.brazen.create_registration(
            self.event_id,
            group.email,
            build_registration_form(group.job_seeker, self.mapper.active_duty_answer),
            first_name=first_name,
            last_name=last_name,
        )

    def run_sync(self, dry_run: bool = False) -> BatchResult:
        """Pull every SJB application and push the grouped candidates"""
        result = BatchResult()
        try:
            # fail fast on credentials before touching any record
            if not dry_run:
                self.zoho.tokens.get_token()
            applications = self.sjb.fetch_all_applications(self.page_size)
        except Exception as e:
            logger.error("Sync run aborted: %s", e)
            return BatchResult.aborted(str(e))

        if not applications:
            logger.info("No applications found to sync")
            return result

        groups = self.collect_groups(applications, result)
        logger.info("Prepared %d candidate groups from %d applications", len(groups), len(applications))

        for group in groups.values():
            try:
                outcome = self.process_group(group, dry_run=dry_run)
            except Exception as e:
                logger.error("Failed to map %s: %s", group.email, e)
                outcome = GroupOutcome(email=group.email, status="failed", error=str(e))
            result.add(outcome)

        logger.info(
            "Sync completed: %d created, %d updated, %d failed, %d skipped",
            result.created,
            result.updated,
            result.failed,
            result.skipped,
        )
        return result


class RegistrationImporter:
    """Brings Brazen event registrants into SJB and Zoho.

    Registrants without an SJB profile get one; every registrant is
    create-or-updated in Zoho from their form answers.
    """

    def __init__(
        self,
        brazen: BrazenClient,
        sjb: SJBClient,
        zoho: ZohoClient,
        event_id: str,
        reconciler: Optional[Reconciler] = None,
        mapper: Optional[RegistrationCandidateMapper] = None,
    ):
        self.brazen = brazen
        self.sjb = sjb
        self.zoho = zoho
        self.event_id = event_id
        self.reconciler = reconciler or Reconciler(zoho)
        self.mapper = mapper or RegistrationCandidateMapper()

    def import_registration(self, registration: Registration) -> GroupOutcome:
        try:
            if self.sjb.find_job_seeker_by_email(registration.email) is None:
                payload = build_job_seeker_payload(registration, password=secrets.token_urlsafe(16))
                job_seeker_id = self.sjb.create_job_seeker(payload)
                logger.info("Created SJB job seeker %s for %s", job_seeker_id, registration.email)

            upsert = self.reconciler.upsert_candidate(registration.email, self.mapper.map(registration))
        except Exception as e:
            logger.error("Failed to import registration for %s: %s", registration.email, e)
            return GroupOutcome(email=registration.email, status="failed", error=str(e))

        return GroupOutcome(
            email=registration.email,
            status="created" if upsert.was_created else "updated",
            candidate_id=upsert.id,
        )

    def run(self) -> BatchResult:
        result = BatchResult()
        try:
            self.zoho.tokens.get_token()
            entries = self.brazen.list_registrations(self.event_id)
        except Exception as e:
            logger.error("Registration import aborted: %s", e)
            return BatchResult.aborted(str(e))

        seen = set()
        for entry in entries:
            summary = entry.get("data") if isinstance(entry.get("data"), dict) else entry
            email = summary.get("email")
            if not email or email in seen:
                result.skipped += 1
                continue
            seen.add(email)

            try:
                if summary.get("id"):
                    registration = self.brazen.get_registration(summary["id"])
                else:
                    registration = Registration(**summary)
            except (httpx.HTTPError, KeyError, ValueError) as e:
                result.add(GroupOutcome(email=email, status="failed", error=f"registration detail: {e}"))
                continue
            if not registration.email:
                registration.email = email

            result.add(self.import_registration(registration))

        logger.info(
            "Registration import completed: %d created, %d updated, %d failed",
            result.created,
            result.updated,
            result.failed,
        )
        return result
