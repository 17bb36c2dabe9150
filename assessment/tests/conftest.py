"""
Shared fixtures for the assessment engine tests.

The base profile is a strong 189/190 applicant evaluated at NOW:
35 years old, positive ACS assessment, IELTS 7.5, 80 points, all documents held.
"""

import copy
from datetime import datetime

import pytest

from assessment.logic.policy import create_189_ruleset, create_190_ruleset

NOW = datetime(2025, 6, 1)

POLICY_SNAPSHOT_ID = "policy-2025-07"

BASE_PROFILE = {
    "id": "profile-001",
    "tenant_id": "tenant-001",
    "profile_version": 1,
    "collected_at": "2025-01-01T00:00:00+00:00",
    "data": {
        "person": {
            "date_of_birth": "1990-01-01",
            "nationality": "AUS",
            "marital_status": "married",
        },
        "location": {
            "current_country": "AUS",
            "current_state": "NSW",
            "regional_postcode": "2000",
        },
        "visa_history": {
            "current_visa_subclass": "500",
            "visa_expiry_date": "2025-12-01",
            "previous_refusals": False,
            "previous_cancellations": False,
            "compliance_issues": False,
            "notes": "",
        },
        "occupation": {
            "anzsco_code": "261313",
            "occupation_title": "Software Engineer",
            "skills_assessment": {
                "status": "positive",
                "assessing_authority": "ACS",
                "issue_date": "2024-01-01",
                "expiry_date": "2027-01-01",
                "notes": "",
            },
        },
        "english": {
            "test_type": "IELTS",
            "overall": 7.5,
            "listening": 7.5,
            "reading": 7.5,
            "writing": 7.0,
            "speaking": 7.5,
            "test_date": "2024-06-01",
        },
        "education": [
            {
                "level": "bachelor",
                "field": "Computer Science",
                "country": "AUS",
                "completed_date": "2015-12-01",
            }
        ],
        "employment": [
            {
                "employer": "ABC Pty Ltd",
                "country": "AUS",
                "start_date": "2018-01-01",
                "end_date": None,
                "hours_per_week": 38,
                "employment_type": "full_time",
                "role_title": "Software Engineer",
                "duties_alignment": "high",
                "evidence_strength": "strong",
            }
        ],
        "points_claim": {
            "total_points_claimed": 80,
            "age_points": 30,
            "english_points": 10,
            "education_points": 15,
            "australian_experience_points": 10,
            "overseas_experience_points": 0,
            "partner_points": 0,
            "naati_points": 0,
            "professional_year_points": 0,
            "regional_study_points": 0,
            "state_nomination_points": 0,
        },
        "state_nomination": {
            "seeking_nomination": False,
            "state": "NSW",
            "occupation_list_status": "on_list",
            "notes": "",
        },
        "documents": {
            "passport": True,
            "skills_assessment": True,
            "english_test": True,
            "employment_reference_letters": True,
            "employment_contracts": True,
            "payslips": True,
            "bank_statements": True,
            "cv": True,
        },
    },
}


def _deep_merge(base: dict, overrides: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def build_profile(**sections) -> dict:
    """
    Base profile with per-section overrides.

    Keyword names are sections of ``data``; dicts are merged, lists replaced.
    ``id`` and ``tenant_id`` override the top-level fields.
    """
    top_level = {key: sections.pop(key) for key in ("id", "tenant_id", "profile_version") if key in sections}
    profile = _deep_merge(BASE_PROFILE, {"data": sections})
    profile.update(top_level)
    return profile


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def policy_snapshot_id():
    return POLICY_SNAPSHOT_ID


@pytest.fixture
def make_profile():
    return build_profile


@pytest.fixture
def base_profile():
    return build_profile()


@pytest.fixture
def ruleset_189():
    return create_189_ruleset("2025.07", policy_snapshot_id=POLICY_SNAPSHOT_ID)


@pytest.fixture
def ruleset_190():
    return create_190_ruleset("2025.07", policy_snapshot_id=POLICY_SNAPSHOT_ID)


@pytest.fixture
def make_employment():
    """Employment entry built on the base profile's current role."""
    def _make_employment(**fields) -> dict:
        return dict(copy.deepcopy(BASE_PROFILE["data"]["employment"][0]), **fields)
    return _make_employment
