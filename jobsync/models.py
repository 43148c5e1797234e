from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Literal, Optional


class CustomField(BaseModel):
    """Name/value pair from an SJB custom_fields list"""

    name: str
    value: Any = None


class JobSeeker(BaseModel):
    """SJB job seeker profile"""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: Optional[int | str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    registration_date: Optional[str] = None
    custom_fields: list[CustomField] = []

    @field_validator("custom_fields", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return value or []


class Application(BaseModel):
    """SJB job application"""

    model_config = ConfigDict(extra="ignore")

    id: Optional[int | str] = None
    jobseeker_id: Optional[int | str] = None
    listing_id: Optional[int | str] = None
    resume_id: Optional[int | str] = None
    application_date: Optional[str] = None
    cover_letter: Optional[str] = None
    comments: Optional[str] = None


class JobListing(BaseModel):
    """SJB job posting, used as mapping context only"""

    model_config = ConfigDict(extra="ignore")

    id: Optional[int | str] = None
    title: str = "Unknown Job"
    description: str = "No description available"
    categories: list[str] = []

    @field_validator("title", mode="before")
    @classmethod
    def _blank_title(cls, value):
        return value or "Unknown Job"

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description(cls, value):
        return value or "No description available"

    @field_validator("categories", mode="before")
    @classmethod
    def _flatten_categories(cls, value):
        if not value:
            return []
        names = []
        for item in value:
            if isinstance(item, dict):
                item = item.get("name") or item.get("title")
            if item:
                names.append(str(item))
        return names

    @classmethod
    def placeholder(cls, listing_id) -> "JobListing":
        return cls(id=listing_id)


class Resume(BaseModel):
    """Resume file, either downloaded bytes or a remote URL"""

    data: Optional[bytes] = None
    content_type: str = "application/pdf"
    filename: Optional[str] = None
    url: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data) if self.data else 0


class EnrichedApplication(BaseModel):
    application: Application
    job: JobListing


class CandidateGroup(BaseModel):
    """All applications of one job seeker within a run, keyed by email"""

    email: str
    job_seeker: JobSeeker
    applications: list[EnrichedApplication] = []
    resume: Optional[Resume] = None
    resume_attempted: bool = False


class Registration(BaseModel):
    """Brazen event registration detail"""

    model_config = ConfigDict(extra="ignore")

    id: Optional[int | str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    registered_on: Optional[str] = None
    data: str = ""

    @field_validator("data", mode="before")
    @classmethod
    def _none_to_blank(cls, value):
        return value or ""


class ZohoCandidate(BaseModel):
    """Maps to Zoho Recruit Candidate"""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    origin: str = Field("Sourced", alias="Origin")
    first_name: str = Field("", alias="First_Name")
    last_name: str = Field("", alias="Last_Name")
    middle_name: Optional[str] = Field(None, alias="Middle_Name")
    email: Optional[str] = Field(None, alias="Email")
    phone: str = Field("", alias="Phone")
    resume: str = Field("", alias="Resume")
    gender: Optional[str] = Field(None, alias="Gender")
    ethnicity: Optional[str] = Field(None, alias="Ethnicity")
    branch_of_service: str = Field("Unspecified", alias="Branch_of_service")
    highest_qualification_held: str = Field("Unspecified", alias="Highest_Qualification_Held")
    occupational_preference: Optional[str] = Field(None, alias="Occupational_Preference")
    security_clearance: str = Field("Unspecified", alias="Security_Clearance")
    willing_to_relocate: str = Field("Yes", alias="Willing_to_relocate")
    geographic_preference: Optional[str] = Field(None, alias="Geographic_Preference")
    us_citizen: Optional[str] = Field(None, alias="U_S_Citizen")
    end_of_active_duty_service_date: Optional[str] = Field(None, alias="End_of_Active_Duty_Service_Date")
    military_rank_at_discharge: list[str] = Field([], alias="Military_Rank_at_discharge")
    linkedin_handle: Optional[str] = Field(None, alias="LinkedIn_Handle")
    country: Optional[str] = Field(None, alias="Country")
    city: Optional[str] = Field(None, alias="City")
    state: Optional[str] = Field(None, alias="State")
    zip_code: Optional[str] = Field(None, alias="Zip_Code")
    availability_date: Optional[str] = Field(None, alias="Availability_Date")
    candidate_status: str = Field("New", alias="Candidate_Status")
    candidate_stage: str = Field("New", alias="Candidate_Stage")
    fresh_candidate: bool = Field(True, alias="Fresh_Candidate")
    source: str = Field("Imported using Resume Extractor", alias="Source")
    skill_set: str = Field("", alias="Skill_Set")
    current_employer: Optional[str] = Field(None, alias="Current_Employer")
    current_job_title: Optional[str] = Field(None, alias="Current_Job_Title")
    have_you_served_on_active_duty: str = Field("Yes", alias="Have_You_Served_on_Active_Duty")
    email_opt_out: bool = Field(False, alias="Email_Opt_Out")
    is_locked: bool = Field(False, alias="Is_Locked")
    is_unqualified: bool = Field(False, alias="Is_Unqualified")
    is_attachment_present: bool = Field(False, alias="Is_Attachment_Present")
    associated_any_social_profiles: bool = Field(False, alias="Associated_any_Social_Profiles")
    career_page_invite_status: str = Field("To-be-invited", alias="Career_Page_Invite_Status")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class UpsertResult(BaseModel):
    id: str
    was_created: bool


class AssociationSummary(BaseModel):
    total: int = 0
    added: int = 0
    skipped: int = 0


class GroupOutcome(BaseModel):
    """Result of processing one candidate group"""

    email: str
    status: Literal["created", "updated", "failed", "mapped"]
    candidate_id: Optional[str] = None
    error: Optional[str] = None
    associations: AssociationSummary = Field(default_factory=AssociationSummary)
    resume_uploaded: bool = False
    registered: bool = False


class RecordError(BaseModel):
    identifier: str
    error: str


class BatchResult(BaseModel):
    """Aggregate outcome of one scheduled run"""

    success: bool = True
    error: Optional[str] = None
    total: int = 0
    created: int = 0
    updated: int = 0
    failed: int = 0
    skipped: int = 0
    registered: int = 0
    errors: list[RecordError] = []
    outcomes: list[GroupOutcome] = []

    def add(self, outcome: GroupOutcome):
        self.total += 1
        self.outcomes.append(outcome)
        if outcome.status == "created":
            self.created += 1
        elif outcome.status == "updated":
            self.updated += 1
        elif outcome.status == "failed":
            self.failed += 1
            self.errors.append(RecordError(identifier=outcome.email, error=outcome.error or "unknown error"))
        if outcome.registered:
            self.registered += 1

    @classmethod
    def aborted(cls, error: str) -> "BatchResult":
        return cls(success=False, error=error)
