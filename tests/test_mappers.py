import pytest
from datetime import date


@pytest.fixture
def job_seeker(sample_job_seeker_data):
    from jobsync.models import JobSeeker

    return JobSeeker(**sample_job_seeker_data)


@pytest.fixture
def listing(sample_job_listing_data):
    from jobsync.models import JobListing

    return JobListing(**sample_job_listing_data)


@pytest.fixture
def application(sample_application_data):
    from jobsync.models import Application

    return Application(**sample_application_data)


class TestNormalizers:
    def test_branch_whitelist(self):
        from jobsync.mappers import BRANCHES_OF_SERVICE, normalize_choice

        assert normalize_choice("Army", BRANCHES_OF_SERVICE, "Unspecified") == "Army"
        assert (
            normalize_choice("Quantum Underwater Basket Weaving", BRANCHES_OF_SERVICE, "Unspecified")
            == "Unspecified"
        )

    def test_relocation_defaults_to_yes(self):
        from jobsync.mappers import RELOCATION_ANSWERS, normalize_choice

        assert normalize_choice("Maybe", RELOCATION_ANSWERS, "Yes") == "Yes"
        assert normalize_choice(None, RELOCATION_ANSWERS, "Yes") == "Yes"
        assert normalize_choice("No", RELOCATION_ANSWERS, "Yes") == "No"

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("06/16/2025", "2025-06-16"),
            ("6/01/2010", "2010-06-01"),
            ("2025-06-16", "2025-06-16"),
            ("2025-06-16T10:30:00Z", "2025-06-16"),
            ("not-a-date", None),
            ("02/30/2025", None),
            ("", None),
            (None, None),
        ],
    )
    def test_normalize_date(self, raw, expected):
        from jobsync.mappers import normalize_date

        assert normalize_date(raw) == expected

    @pytest.mark.parametrize(
        "full_name,expected",
        [
            ("Jane Doe", ("Jane", "Doe")),
            ("Mary Ann  Smith", ("Mary", "Ann  Smith")),
            ("Cher", ("Cher", "")),
            ("", ("", "")),
            (None, ("", "")),
        ],
    )
    def test_split_full_name(self, full_name, expected):
        from jobsync.mappers import split_full_name

        assert split_full_name(full_name) == expected


class TestJobSeekerCandidateMapper:
    def test_maps_profile_fields(self, job_seeker, application, listing):
        from jobsync.mappers import JobSeekerCandidateMapper

        candidate = JobSeekerCandidateMapper().map(job_seeker, application, listing)

        assert candidate.first_name == "Jane"
        assert candidate.last_name == "Doe"
        assert candidate.email == "jane.doe@example.com"
        assert candidate.phone == "+18505550100"
        assert candidate.branch_of_service == "Army"
        assert candidate.highest_qualification_held == "Bachelors Degree or Higher"
        assert candidate.security_clearance == "Top Secret"
        assert candidate.willing_to_relocate == "No"
        assert candidate.military_rank_at_discharge == ["O-4"]
        assert candidate.end_of_active_duty_service_date == "2010-06-01"
        assert candidate.city == "Tampa"
        assert candidate.state == "FL"
        assert candidate.zip_code == "33601"

    def test_listing_context(self, job_seeker, application, listing):
        from jobsync.mappers import JobSeekerCandidateMapper

        candidate = JobSeekerCandidateMapper().map(job_seeker, application, listing)

        assert candidate.skill_set == "Information Technology, Management"
        assert candidate.current_job_title == "IT Project Manager"

    def test_constant_policy_fields(self, job_seeker, application, listing):
        from jobsync.mappers import JobSeekerCandidateMapper

        payload = JobSeekerCandidateMapper().map(job_seeker, application, listing).to_payload()

        assert payload["Origin"] == "Sourced"
        assert payload["Candidate_Status"] == "New"
        assert payload["Candidate_Stage"] == "New"
        assert payload["Source"] == "Imported using Resume Extractor"
        assert payload["Have_You_Served_on_Active_Duty"] == "Yes"

    def test_last_name_field_overrides_full_name(self, job_seeker):
        from jobsync.mappers import JobSeekerCandidateMapper
        from jobsync.models import CustomField

        job_seeker.custom_fields.append(CustomField(name="Last Name", value="Doe-Smith"))
        candidate = JobSeekerCandidateMapper().map(job_seeker)

        assert candidate.last_name == "Doe-Smith"

    def test_empty_custom_fields_produce_full_shape(self):
        from jobsync.mappers import JobSeekerCandidateMapper
        from jobsync.models import JobSeeker, ZohoCandidate

        candidate = JobSeekerCandidateMapper().map(JobSeeker(email="x@example.com"))
        payload = candidate.to_payload()

        assert set(payload) == {field.alias for field in ZohoCandidate.model_fields.values()}
        assert payload["Phone"] == ""
        assert payload["Resume"] == ""
        assert payload["Gender"] is None
        assert payload["Branch_of_service"] == "Unspecified"
        assert payload["Willing_to_relocate"] == "Yes"
        assert payload["Military_Rank_at_discharge"] == []
        assert payload["Current_Job_Title"] is None

    def test_out_of_whitelist_values(self):
        from jobsync.mappers import JobSeekerCandidateMapper
        from jobsync.models import JobSeeker

        job_seeker = JobSeeker(
            email="x@example.com",
            custom_fields=[
                {"name": "Branch of service", "value": "Quantum Underwater Basket Weaving"},
                {"name": "Security Clearance", "value": "Cosmic"},
                {"name": "End of Active Duty Service Date", "value": "not-a-date"},
            ],
        )
        candidate = JobSeekerCandidateMapper().map(job_seeker)

        assert candidate.branch_of_service == "Unspecified"
        assert candidate.security_clearance == "Unspecified"
        assert candidate.end_of_active_duty_service_date is None

    def test_non_string_field_values_still_map(self):
        from jobsync.mappers import JobSeekerCandidateMapper
        from jobsync.models import JobSeeker

        job_seeker = JobSeeker(
            email="x@example.com",
            custom_fields=[
                {"name": "U.S Citizen", "value": True},
                {"name": "Willing to Relocate", "value": False},
                {"name": "Gender", "value": {"value": "Male"}},
                {"name": "LinkedIn Handle", "value": {}},
                {"name": "Military Rank (at discharge)", "value": [{"name": "E-5"}]},
            ],
        )
        candidate = JobSeekerCandidateMapper().map(job_seeker)

        assert candidate.us_citizen == "Yes"
        assert candidate.willing_to_relocate == "No"
        assert candidate.gender == "Male"
        assert candidate.linkedin_handle is None
        assert candidate.military_rank_at_discharge == ["E-5"]

    def test_resume_url_and_attachment_flag(self, job_seeker):
        from jobsync.mappers import JobSeekerCandidateMapper
        from jobsync.models import Resume

        resume = Resume(data=b"%PDF", url="https://files.example.com/r.pdf")
        candidate = JobSeekerCandidateMapper().map(job_seeker, resume=resume)

        assert candidate.resume == "https://files.example.com/r.pdf"
        assert candidate.is_attachment_present is True

    def test_is_deterministic(self, job_seeker, application, listing):
        from jobsync.mappers import JobSeekerCandidateMapper

        mapper = JobSeekerCandidateMapper()
        assert mapper.map(job_seeker, application, listing) == mapper.map(job_seeker, application, listing)


class TestRegistrationCandidateMapper:
    def test_maps_form_answers(self, sample_registration_data):
        from jobsync.mappers import RegistrationCandidateMapper
        from jobsync.models import Registration

        candidate = RegistrationCandidateMapper().map(Registration(**sample_registration_data))

        assert candidate.first_name == "Sam"
        assert candidate.last_name == "Smith"
        assert candidate.phone == "+18503574400"
        assert candidate.branch_of_service == "Air Force"
        assert candidate.highest_qualification_held == "Unspecified"
        assert candidate.security_clearance == "Top Secret"
        assert candidate.willing_to_relocate == "Yes"
        assert candidate.availability_date == "2025-06-16"
        assert candidate.end_of_active_duty_service_date == "2010-06-01"
        assert candidate.state == "FL"
        assert candidate.zip_code == "32444"
        assert candidate.current_job_title == "IT PM/Cyber Manager"
        assert candidate.military_rank_at_discharge == ["O-4"]

    def test_active_duty_defaults_to_no(self, sample_registration_data):
        from jobsync.mappers import RegistrationCandidateMapper
        from jobsync.models import Registration

        candidate = RegistrationCandidateMapper().map(Registration(**sample_registration_data))
        assert candidate.have_you_served_on_active_duty == "No"

    def test_active_duty_answer_is_used(self, sample_registration_data):
        from jobsync.mappers import RegistrationCandidateMapper
        from jobsync.models import Registration

        sample_registration_data["data"] += "&Have+You+Served+on+Active+Duty%3F=Yes"
        candidate = RegistrationCandidateMapper().map(Registration(**sample_registration_data))
        assert candidate.have_you_served_on_active_duty == "Yes"

    def test_empty_form(self):
        from jobsync.mappers import RegistrationCandidateMapper
        from jobsync.models import Registration

        candidate = RegistrationCandidateMapper().map(Registration(email="a@example.com", data=None))
        assert candidate.phone == ""
        assert candidate.branch_of_service == "Unspecified"
        assert candidate.have_you_served_on_active_duty == "No"


class TestPayloadBuilders:
    def test_job_seeker_payload(self, sample_registration_data):
        from jobsync.fields import extract_field
        from jobsync.mappers import build_job_seeker_payload
        from jobsync.models import Registration

        payload = build_job_seeker_payload(Registration(**sample_registration_data), password="pw")

        assert payload["email"] == "sam.smith@example.com"
        assert payload["full_name"] == "Sam Smith"
        assert payload["password"] == "pw"
        fields = payload["custom_fields"]
        assert extract_field(fields, "Branch of service") == "Air Force"
        assert extract_field(fields, "Education Level") == "Unspecified"
        assert extract_field(fields, "State") == "FL"
        assert extract_field(fields, "Discharge Type") is None

    def test_registration_form_round_trips_through_form_mapper(self, job_seeker):
        from jobsync.fields import parse_form
        from jobsync.mappers import build_registration_form

        form = parse_form(build_registration_form(job_seeker))

        assert form["Have You Served on Active Duty?"] == "Yes"
        assert form["Branch of service"] == "Army"
        assert form["Mobile Number"] == "+18505550100"
        assert form["State or Province"] == "FL"
        assert form["Country"] == "US"

    def test_job_opening(self, listing):
        from jobsync.mappers import build_job_opening

        payload = build_job_opening(listing, today=date(2025, 6, 16))

        assert payload["Job_Opening_Name"] == "IT Project Manager"
        assert payload["Client_Name"] == "Smart Job Board"
        assert payload["Date_Opened"] == "2025-06-16"
        assert payload["SJB_Job_ID"] == "108270"

    def test_association_comment_fallbacks(self, application):
        from jobsync.mappers import build_association

        payload = build_association("c1", "j1", application, today=date(2025, 7, 1))
        assert payload["Associate_Status"] == "Applied"
        assert payload["Submission_Date"] == "2025-06-16"
        assert payload["Submission_Comment"] == "Applied through Smart Job Board"
        assert payload["SJB_Application_ID"] == "9001"

        application.comments = "Referred"
        assert build_association("c1", "j1", application)["Submission_Comment"] == "Referred"
        application.cover_letter = "Dear team"
        assert build_association("c1", "j1", application)["Submission_Comment"] == "Dear team"

    def test_association_without_application_date_uses_today(self):
        from jobsync.mappers import build_association
        from jobsync.models import Application

        payload = build_association("c1", "j1", Application(), today=date(2025, 7, 1))
        assert payload["Submission_Date"] == "2025-07-01"
        assert "SJB_Application_ID" not in payload
