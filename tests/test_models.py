import pytest


def test_job_seeker_coerces_numbers(sample_job_seeker_data):
    from jobsync.models import JobSeeker

    job_seeker = JobSeeker(**sample_job_seeker_data)
    assert job_seeker.zip_code == "33601"
    assert job_seeker.custom_fields[1].value == ["Army"]


def test_job_seeker_null_custom_fields():
    from jobsync.models import JobSeeker

    assert JobSeeker(email="a@example.com", custom_fields=None).custom_fields == []


def test_job_listing_defaults_and_categories():
    from jobsync.models import JobListing

    listing = JobListing(id=1, title="", description=None, categories=[{"name": "IT"}, {"title": "Ops"}, "Sales"])

    assert listing.title == "Unknown Job"
    assert listing.description == "No description available"
    assert listing.categories == ["IT", "Ops", "Sales"]


def test_placeholder_listing():
    from jobsync.models import JobListing

    listing = JobListing.placeholder(42)
    assert listing.id == 42
    assert listing.title == "Unknown Job"


def test_zoho_payload_uses_aliases():
    from jobsync.models import ZohoCandidate

    payload = ZohoCandidate(first_name="Jane", email="a@example.com", zip_code=33601).to_payload()

    assert payload["First_Name"] == "Jane"
    assert payload["Zip_Code"] == "33601"
    assert payload["Origin"] == "Sourced"


class TestBatchResult:
    def test_add_counts_by_status(self):
        from jobsync.models import BatchResult, GroupOutcome

        result = BatchResult()
        result.add(GroupOutcome(email="a@example.com", status="created", registered=True))
        result.add(GroupOutcome(email="b@example.com", status="updated"))
        result.add(GroupOutcome(email="c@example.com", status="failed", error="boom"))

        assert (result.total, result.created, result.updated, result.failed) == (3, 1, 1, 1)
        assert result.registered == 1
        assert result.success is True
        assert result.errors[0].identifier == "c@example.com"
        assert result.errors[0].error == "boom"

    def test_aborted(self):
        from jobsync.models import BatchResult

        result = BatchResult.aborted("token refresh failed")

        assert result.success is False
        assert result.error == "token refresh failed"
        assert result.total == 0

    def test_results_do_not_share_lists(self):
        from jobsync.models import BatchResult, GroupOutcome

        first = BatchResult()
        first.add(GroupOutcome(email="a@example.com", status="created"))

        assert BatchResult().outcomes == []

    def test_unknown_status_rejected(self):
        from jobsync.models import GroupOutcome

        with pytest.raises(Exception):
            GroupOutcome(email="a@example.com", status="deleted")
