import logging
import os

import httpx

from jobsync.errors import ResumeRejectedError
from jobsync.models import Resume
from jobsync.zoho_client import ZohoClient

logger = logging.getLogger(__name__)

MAX_RESUME_BYTES = 20 * 1024 * 1024
BLOCKED_EXTENSIONS = {".exe"}


def validate_resume(resume: Resume):
    """Raise ResumeRejectedError if the file is too large or an executable"""
    if resume.size > MAX_RESUME_BYTES:
        raise ResumeRejectedError(
            f"Resume size {resume.size / (1024 * 1024):.1f}MB exceeds the 20MB limit"
        )
    extension = os.path.splitext(resume.filename or "")[1].lower()
    if extension in BLOCKED_EXTENSIONS:
        raise ResumeRejectedError(f"Unsupported file type ({extension})")


def transfer_resume(zoho: ZohoClient, candidate_id: str, resume: Resume) -> bool:
    """Attach the resume to the Zoho candidate.

    Downloaded bytes are re-posted as multipart form data; a resume known only
    by URL is attached by reference. Rejections and upload failures are logged
    and reported as False so the candidate itself still counts as synced.
    """
    try:
        validate_resume(resume)
    except ResumeRejectedError as e:
        logger.warning("Skipping resume upload for candidate %s: %s", candidate_id, e)
        return False

    try:
        if resume.data:
            zoho.upload_attachment(
                candidate_id,
                resume.data,
                resume.filename or f"resume_{candidate_id}.pdf",
                resume.content_type or "application/pdf",
            )
        elif resume.url:
            zoho.attach_resume_url(candidate_id, resume.url)
        else:
            logger.warning("No resume data available for candidate %s", candidate_id)
            return False
    except httpx.HTTPError as e:
        logger.warning("Resume upload failed for candidate %s: %s", candidate_id, e)
        return False

    logger.info("Uploaded resume for candidate %s", candidate_id)
    return True
