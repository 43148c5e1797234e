import re
from datetime import date, datetime
from typing import Optional
from urllib.parse import urlencode

from jobsync.fields import extract_as_list, extract_field, extract_form_field, parse_form
from jobsync.models import (
    Application,
    JobListing,
    JobSeeker,
    Registration,
    Resume,
    ZohoCandidate,
)

EDUCATION_LEVELS = [
    "High School or GED",
    "Associates Degree",
    "Bachelors Degree or Higher",
    "Unspecified",
]

BRANCHES_OF_SERVICE = [
    "Army",
    "Navy",
    "Air Force",
    "Marine Corps",
    "Coast Guard",
    "Army Reserve",
    "Navy Reserve",
    "Air Force Reserve",
    "Army National Guard",
    "Marine Corps Reserve",
    "Coast Guard Reserve",
    "Air National Guard",
    "Other",
    "Unspecified",
]

SECURITY_CLEARANCES = ["Secret", "Top Secret", "None", "Unspecified"]

RELOCATION_ANSWERS = ["Yes", "No"]

DATE_FORMATS = ["%m/%d/%Y", "%Y-%m-%d"]

SOURCE_LABEL = "Imported using Resume Extractor"

# Brazen form key -> SJB custom field name
REGISTRATION_FORM_FIELDS = [
    ("Branch of service", "Branch of service"),
    ("End of Active Duty Service Date", "End of Active Duty Service Date"),
    ("Military Rank (at discharge)", "Military Rank (at discharge)"),
    ("Highest Education Level", "Education Level"),
    ("Security Clearance", "Security Clearance"),
    ("City", "City"),
    ("State or Province", "State"),
    ("Zip Code", "Zip Code"),
    ("U.S Citizen", "U.S Citizen"),
    ("Gender", "Gender"),
    ("Ethnicity", "Ethnicity"),
    ("LinkedIn Profile link", "LinkedIn Handle"),
    ("Are you willing to relocate?", "Willing to Relocate"),
    ("Geographic Preference", "Geographic Preference"),
    ("Occupational Preference", "Occupational Preference"),
    ("Mobile Number", "Phone"),
]


def normalize_choice(value, allowed: list[str], default: str) -> str:
    """Keep value if it is on the whitelist, else fall back to the default"""
    return value if value in allowed else default


def normalize_date(value) -> Optional[str]:
    """Parse a source date into YYYY-MM-DD; anything unparseable becomes None"""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return None


def split_full_name(full_name: Optional[str]) -> tuple[str, str]:
    """Split on the first whitespace run into (first, last)"""
    parts = re.split(r"\s+", (full_name or "").strip(), maxsplit=1)
    first = parts[0] if parts else ""
    last = parts[1] if len(parts) > 1 else ""
    return first, last


class JobSeekerCandidateMapper:
    """Maps an SJB job seeker with its application and listing to a Zoho candidate.

    Reads profile data from the SJB custom_fields list. Candidates from this
    channel are always recorded as having served on active duty.
    """

    active_duty_answer = "Yes"

    def map(
        self,
        job_seeker: JobSeeker,
        application: Optional[Application] = None,
        job_listing: Optional[JobListing] = None,
        resume: Optional[Resume] = None,
    ) -> ZohoCandidate:
        fields = job_seeker.custom_fields
        first_name, last_name = split_full_name(job_seeker.full_name)

        return ZohoCandidate(
            first_name=first_name,
            last_name=extract_field(fields, "Last Name") or last_name,
            middle_name=extract_field(fields, "Middle Name"),
            email=job_seeker.email,
            phone=extract_field(fields, "Phone") or job_seeker.phone or "",
            resume=(resume.url or "") if resume else "",
            gender=extract_field(fields, "Gender"),
            ethnicity=extract_field(fields, "Ethnicity"),
            branch_of_service=normalize_choice(
                extract_field(fields, "Branch of service"), BRANCHES_OF_SERVICE, "Unspecified"
            ),
            highest_qualification_held=normalize_choice(
                extract_field(fields, "Education Level"), EDUCATION_LEVELS, "Unspecified"
            ),
            occupational_preference=extract_field(fields, "Occupational Preference"),
            security_clearance=normalize_choice(
                extract_field(fields, "Security Clearance"), SECURITY_CLEARANCES, "Unspecified"
            ),
            willing_to_relocate=normalize_choice(
                extract_field(fields, "Willing to Relocate"), RELOCATION_ANSWERS, "Yes"
            ),
            geographic_preference=extract_field(fields, "Geographic Preference"),
            us_citizen=extract_field(fields, "U.S Citizen"),
            end_of_active_duty_service_date=normalize_date(
                extract_field(fields, "End of Active Duty Service Date")
            ),
            military_rank_at_discharge=extract_as_list(fields, "Military Rank (at discharge)"),
            linkedin_handle=extract_field(fields, "LinkedIn Handle"),
            country=job_seeker.country or None,
            city=extract_field(fields, "City") or job_seeker.city,
            state=extract_field(fields, "State") or job_seeker.state,
            zip_code=extract_field(fields, "Zip Code") or job_seeker.zip_code,
            availability_date=normalize_date(extract_field(fields, "Availability Date")),
            source=SOURCE_LABEL,
            skill_set=", ".join(job_listing.categories) if job_listing else "",
            current_job_title=job_listing.title if job_listing else None,
            have_you_served_on_active_duty=self.active_duty_answer,
            is_attachment_present=resume is not None,
        )


class RegistrationCandidateMapper:
    """Maps a Brazen registration (URL-encoded form answers) to a Zoho candidate.

    Unlike JobSeekerCandidateMapper, the active duty answer comes from the
    form and is "No" when the registrant left it out.
    """

    active_duty_default = "No"

    def map(self, registration: Registration) -> ZohoCandidate:
        form = parse_form(registration.data)
        rank = extract_form_field(form, "Military Rank (at discharge)")
        relocate = extract_form_field(form, "Are you willing to relocate?") or extract_form_field(
            form, "Willing to Relocate"
        )

        return ZohoCandidate(
            first_name=registration.first_name or "",
            last_name=registration.last_name or "",
            email=registration.email,
            phone=extract_form_field(form, "Mobile Number") or "",
            gender=extract_form_field(form, "Gender"),
            ethnicity=extract_form_field(form, "Ethnicity"),
            branch_of_service=normalize_choice(
                extract_form_field(form, "Branch of service"), BRANCHES_OF_SERVICE, "Unspecified"
            ),
            highest_qualification_held=normalize_choice(
                extract_form_field(form, "Highest Education Level"), EDUCATION_LEVELS, "Unspecified"
            ),
            occupational_preference=extract_form_field(form, "Occupational Preference"),
            security_clearance=normalize_choice(
                extract_form_field(form, "Security Clearance"), SECURITY_CLEARANCES, "Unspecified"
            ),
            willing_to_relocate=normalize_choice(relocate, RELOCATION_ANSWERS, "Yes"),
            geographic_preference=extract_form_field(form, "Geographic Preference"),
            us_citizen=extract_form_field(form, "U.S Citizen"),
            end_of_active_duty_service_date=normalize_date(
                extract_form_field(form, "End of Active Duty Service Date")
            ),
            military_rank_at_discharge=[rank] if rank else [],
            linkedin_handle=extract_form_field(form, "LinkedIn Profile link"),
            country=extract_form_field(form, "Country"),
            city=extract_form_field(form, "City"),
            state=extract_form_field(form, "State or Province"),
            zip_code=extract_form_field(form, "Zip Code"),
            availability_date=normalize_date(extract_form_field(form, "Availability Date")),
            source=SOURCE_LABEL,
            skill_set=extract_form_field(form, "Certifications/Licenses") or "",
            current_job_title=extract_form_field(form, "Job Title"),
            have_you_served_on_active_duty=(
                extract_form_field(form, "Have You Served on Active Duty?") or self.active_duty_default
            ),
        )


def build_job_seeker_payload(registration: Registration, password: str) -> dict:
    """SJB create-job-seeker body for a Brazen registrant"""
    form = parse_form(registration.data)

    def answer(key):
        return extract_form_field(form, key)

    phone = answer("Mobile Number")
    full_name = f"{registration.first_name or ''} {registration.last_name or ''}".strip()
    custom_fields = [
        ("Military Rank (at discharge)", answer("Military Rank (at discharge)")),
        ("Activated At", None),
        ("First Name", registration.first_name or None),
        ("Last Name", registration.last_name or None),
        ("Gender", answer("Gender")),
        ("Ethnicity", answer("Ethnicity")),
        ("Phone", phone),
        ("Branch of service", normalize_choice(answer("Branch of service"), BRANCHES_OF_SERVICE, "Unspecified")),
        ("Education Level", normalize_choice(answer("Highest Education Level"), EDUCATION_LEVELS, "Unspecified")),
        ("Occupational Preference", answer("Occupational Preference")),
        ("Security Clearance", normalize_choice(answer("Security Clearance"), SECURITY_CLEARANCES, "Unspecified")),
        (
            "Willing to Relocate",
            normalize_choice(
                answer("Are you willing to relocate?") or answer("Willing to Relocate"), RELOCATION_ANSWERS, "Yes"
            ),
        ),
        ("State", answer("State or Province")),
        ("City", answer("City")),
        ("Zip Code", answer("Zip Code")),
        ("Geographic Preference", answer("Geographic Preference/Relocation Notes")),
        ("U.S Citizen", answer("U.S Citizen")),
        ("End of Active Duty Service Date", normalize_date(answer("End of Active Duty Service Date"))),
        ("Discharge Type", None),
        ("LinkedIn Handle", answer("LinkedIn Profile link")),
        ("Middle Name", None),
    ]

    return {
        "registration_date": registration.registered_on,
        "active": 1,
        "phone": phone,
        "email": registration.email,
        "password": password,
        "full_name": full_name,
        "custom_fields": [{"name": name, "value": value} for name, value in custom_fields],
    }


def build_registration_form(job_seeker: JobSeeker, active_duty_answer: str = "Yes") -> str:
    """URL-encoded Brazen registration answers from SJB custom fields"""
    fields = job_seeker.custom_fields
    pairs = [("Have You Served on Active Duty?", active_duty_answer)]
    for form_key, field_name in REGISTRATION_FORM_FIELDS:
        value = extract_field(fields, field_name)
        if value is not None:
            pairs.append((form_key, str(value)))
    if job_seeker.country:
        pairs.append(("Country", job_seeker.country))
    return urlencode(pairs)


def build_job_opening(job_listing: JobListing, today: Optional[date] = None) -> dict:
    """Zoho JobOpenings body for an SJB listing with no Zoho counterpart yet"""
    today = today or date.today()
    data = {
        "Job_Opening_Name": job_listing.title,
        "Client_Name": "Smart Job Board",
        "Job_Description": job_listing.description,
        "Job_Opening_Status": "Open",
        "Number_of_Positions": 1,
        "Date_Opened": today.isoformat(),
    }
    if job_listing.id is not None:
        data["SJB_Job_ID"] = str(job_listing.id)
    return data


def build_association(
    candidate_id: str, job_opening_id: str, application: Application, today: Optional[date] = None
) -> dict:
    """Zoho Associate_Candidates body linking a candidate to a job opening"""
    today = today or date.today()
    data = {
        "Candidate_ID": candidate_id,
        "Job_Opening_ID": job_opening_id,
        "Associate_Status": "Applied",
        "Submission_Date": normalize_date(application.application_date) or today.isoformat(),
        "Submission_Comment": application.cover_letter
        or application.comments
        or "Applied through Smart Job Board",
    }
    if application.id is not None:
        data["SJB_Application_ID"] = str(application.id)
    return data
