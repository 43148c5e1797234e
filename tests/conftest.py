import pytest


@pytest.fixture
def sample_job_seeker_data():
    return {
        "id": 501,
        "email": "jane.doe@example.com",
        "full_name": "Jane Doe",
        "phone": "5550100",
        "country": "US",
        "city": "Tampa",
        "zip_code": 33601,
        "custom_fields": [
            {"name": "Phone", "value": "+18505550100"},
            {"name": "Branch of service", "value": ["Army"]},
            {"name": "Education Level", "value": "Bachelors Degree or Higher"},
            {"name": "Security Clearance", "value": "Top Secret"},
            {"name": "Willing to Relocate", "value": "No"},
            {"name": "State", "value": "FL"},
            {"name": "Military Rank (at discharge)", "value": "O-4"},
            {"name": "End of Active Duty Service Date", "value": "06/01/2010"},
            {"name": "LinkedIn Handle", "value": "https://www.linkedin.com/in/janedoe/"},
        ],
    }


@pytest.fixture
def sample_application_data():
    return {
        "id": 9001,
        "jobseeker_id": 501,
        "listing_id": 108270,
        "resume_id": 77,
        "application_date": "2025-06-16",
        "cover_letter": None,
    }


@pytest.fixture
def sample_job_listing_data():
    return {
        "id": 108270,
        "title": "IT Project Manager",
        "description": "Lead cyber programs",
        "categories": ["Information Technology", "Management"],
    }


@pytest.fixture
def sample_registration_data():
    return {
        "id": "reg-1",
        "email": "sam.smith@example.com",
        "first_name": "Sam",
        "last_name": "Smith",
        "registered_on": "2025-06-01",
        "data": (
            "Branch+of+service=Air+Force&End+of+Active+Duty+Service+Date=6%2F01%2F2010"
            "&Military+Rank+%28at+discharge%29=O-4&Highest+Education+Level=Masters+Degree"
            "&Security+Clearance=Top+Secret&Country=US&City=Panama+City+Beach"
            "&State+or+Province=FL&Zip+Code=32444&U.S+Citizen=Yes&Gender=Male"
            "&Availability+Date=6%2F16%2F2025&Are+you+willing+to+relocate%3F=Yes"
            "&Occupational+Preference=Information+Technology&Mobile+Number=%2B18503574400"
            "&Job+Title=IT+PM%2FCyber+Manager"
        ),
    }


@pytest.fixture
def zoho_config():
    return {
        "client_id": "zoho-client",
        "client_secret": "zoho-secret",
        "refresh_token": "zoho-refresh",
    }
