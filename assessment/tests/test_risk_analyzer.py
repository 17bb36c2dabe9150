"""
Tests for the risk analyzer and its check battery.
"""

import pytest

from assessment.config import RiskSettings
from assessment.logic.constants import RiskLevel
from assessment.logic.contracts import RiskFactor
from assessment.logic.risk_analyzer import aggregate_risk_level, assess


def _codes(assessment):
    return [factor.code for factor in assessment.risk_factors]


def _factor(level):
    return RiskFactor(code=f"TEST_{level.upper()}", level=level, detail="")


@pytest.fixture
def clean_profile(make_profile):
    # Occupation outside the volatile/ceiling lists
    return make_profile(occupation={"anzsco_code": "261111"})


# =============================================================================
# AGGREGATION
# =============================================================================

@pytest.mark.parametrize("levels, expected", [
    ([], RiskLevel.LOW),
    (["Low", "Low", "Low", "Low"], RiskLevel.LOW),
    (["Medium"], RiskLevel.LOW),
    (["Medium", "Low"], RiskLevel.LOW),
    (["Medium", "Low", "Low"], RiskLevel.MEDIUM),
    (["Medium", "Medium"], RiskLevel.MEDIUM),
    (["High"], RiskLevel.HIGH),
    (["Low", "High", "Medium"], RiskLevel.HIGH),
])
def test_aggregate_risk_level(levels, expected):
    assert aggregate_risk_level([_factor(level) for level in levels]) == expected


# =============================================================================
# BATTERY
# =============================================================================

def test_clean_profile_is_low_risk(clean_profile, now):
    result = assess(clean_profile, now)

    assert result.risk_level == "Low"
    assert result.risk_factors == []
    assert result.evidence_gaps == []
    assert result.mitigating_factors == [
        "Positive skills assessment held",
        "Strong English test results",
        "High points score provides competitive advantage",
    ]


def test_volatile_occupation_alone_is_medium(base_profile, now):
    result = assess(base_profile, now)

    assert _codes(result) == ["OCCUPATION_VOLATILE", "OCCUPATION_CEILING_RISK"]
    assert result.risk_level == "Medium"


def test_points_below_trends(make_profile, now):
    result = assess(make_profile(
        occupation={"anzsco_code": "261111"},
        points_claim={"total_points_claimed": 68},
    ), now)

    assert _codes(result) == ["POINTS_MARGIN_LOW", "POINTS_BELOW_RECENT_TRENDS"]
    assert result.risk_level == "High"
    assert "High points score provides competitive advantage" not in result.mitigating_factors


def test_factors_keep_battery_order(make_profile, now):
    profile = make_profile(
        occupation={"anzsco_code": "261111"},
        points_claim={"total_points_claimed": 70},
        visa_history={"previous_refusals": True},
        documents={"passport": False, "bank_statements": False},
    )

    result = assess(profile, now)

    assert _codes(result) == [
        "POINTS_BELOW_RECENT_TRENDS",
        "PRIOR_REFUSAL_FLAG",
        "CORE_DOCS_MISSING",
        "FINANCIAL_EVIDENCE_GAP",
    ]
    assert "passport" in result.risk_factors[2].detail


def test_age_near_threshold(make_profile, now):
    result = assess(make_profile(
        occupation={"anzsco_code": "261111"},
        person={"date_of_birth": "1982-01-01"},
    ), now)

    assert _codes(result) == ["AGE_NEAR_THRESHOLD"]


def test_unknown_duties_alignment(clean_profile, make_profile, now):
    employment = [dict(clean_profile["data"]["employment"][0], duties_alignment="unknown")]

    result = assess(make_profile(occupation={"anzsco_code": "261111"}, employment=employment), now)

    assert _codes(result) == ["ANZSCO_MISMATCH_RISK"]
    assert result.risk_level == "High"


def test_skills_assessment_expiring_soon(make_profile, now):
    result = assess(make_profile(occupation={
        "anzsco_code": "261111",
        "skills_assessment": {"expiry_date": "2025-10-01"},
    }), now)

    assert _codes(result) == ["SKILLS_ASSESSMENT_EXPIRING_SOON"]
    assert [gap.item for gap in result.evidence_gaps] == ["Skills assessment renewal"]


def test_pending_skills_assessment(make_profile, now):
    result = assess(make_profile(occupation={
        "anzsco_code": "261111",
        "skills_assessment": {"status": "pending", "expiry_date": None},
    }), now)

    assert _codes(result) == ["SKILLS_ASSESSMENT_PENDING"]
    assert "Positive skills assessment held" not in result.mitigating_factors


def test_weak_evidence_and_gaps_lower_defensibility(make_profile, make_employment, now):
    employment = [
        make_employment(start_date="2012-01-01", end_date="2013-01-01", evidence_strength="weak"),
        make_employment(start_date="2013-06-01", end_date="2017-12-01"),
        make_employment(start_date="2018-01-01", end_date=None),
    ]

    result = assess(make_profile(occupation={"anzsco_code": "261111"}, employment=employment), now)

    assert _codes(result) == [
        "EMPLOYMENT_EVIDENCE_WEAK",
        "INCONSISTENT_EMPLOYMENT_HISTORY",
        "LOW_AUDIT_DEFENSIBILITY",
    ]
    assert result.risk_factors[0].detail.startswith("1 employment periods")
    assert [gap.item for gap in result.evidence_gaps] == ["Employment verification documents"]


def test_short_gap_is_not_flagged(make_profile, make_employment, now):
    employment = [
        make_employment(start_date="2012-01-01", end_date="2015-01-01"),
        make_employment(start_date="2015-02-15", end_date="2017-12-01"),
    ]

    result = assess(make_profile(occupation={"anzsco_code": "261111"}, employment=employment), now)

    assert "INCONSISTENT_EMPLOYMENT_HISTORY" not in _codes(result)


def test_defensibility_signal_count_is_configurable(make_profile, make_employment, now):
    employment = [
        make_employment(start_date="2012-01-01", end_date="2013-01-01", evidence_strength="weak"),
        make_employment(start_date="2013-06-01", end_date=None),
    ]
    profile = make_profile(occupation={"anzsco_code": "261111"}, employment=employment)

    result = assess(profile, now, RiskSettings(audit_defensibility_min_signals=3))

    assert "LOW_AUDIT_DEFENSIBILITY" not in _codes(result)
    assert "LOW_AUDIT_DEFENSIBILITY" in _codes(assess(profile, now))


def test_missing_reference_letters(make_profile, now):
    result = assess(make_profile(
        occupation={"anzsco_code": "261111"},
        documents={"employment_reference_letters": False},
    ), now)

    assert _codes(result) == ["DUTY_STATEMENTS_MISSING"]
    assert result.risk_level == "Low"


def test_old_english_test(make_profile, now):
    result = assess(make_profile(
        occupation={"anzsco_code": "261111"},
        english={"test_date": "2022-06-01"},
    ), now)

    assert _codes(result) == ["ENGLISH_TEST_OLD"]
    assert "3 years old" in result.risk_factors[0].detail


def test_borderline_english(make_profile, now):
    result = assess(make_profile(
        occupation={"anzsco_code": "261111"},
        english={"writing": 6.5},
    ), now)

    assert _codes(result) == ["ENGLISH_SCORE_BORDERLINE"]


def test_no_english_test_is_not_borderline(make_profile, now):
    result = assess(make_profile(
        occupation={"anzsco_code": "261111"},
        english={"test_type": "NA", "overall": 0, "listening": 0, "reading": 0,
                 "writing": 0, "speaking": 0, "test_date": None},
    ), now)

    assert "ENGLISH_SCORE_BORDERLINE" not in _codes(result)
    assert "Strong English test results" not in result.mitigating_factors


def test_visa_history_flags(make_profile, now):
    result = assess(make_profile(
        occupation={"anzsco_code": "261111"},
        visa_history={"previous_refusals": True, "previous_cancellations": True, "compliance_issues": True},
    ), now)

    assert _codes(result) == ["PRIOR_REFUSAL_FLAG", "PRIOR_CANCELLATION_FLAG", "COMPLIANCE_ISSUES_FLAG"]


def test_seeking_nomination_in_volatile_state(make_profile, now):
    result = assess(make_profile(
        occupation={"anzsco_code": "261111"},
        state_nomination={"seeking_nomination": True, "state": "NSW", "occupation_list_status": "unknown"},
    ), now)

    assert _codes(result) == ["STATE_POLICY_VOLATILE", "STATE_NOMINATION_UNKNOWN"]
    assert result.risk_level == "Medium"


def test_off_list_nomination(make_profile, now):
    result = assess(make_profile(
        occupation={"anzsco_code": "261111"},
        state_nomination={"seeking_nomination": True, "state": "SA", "occupation_list_status": "off_list"},
    ), now)

    assert _codes(result) == ["STATE_NOMINATION_LOW_CERTAINTY"]


def test_regional_study_points(make_profile, now):
    result = assess(make_profile(
        occupation={"anzsco_code": "261111"},
        points_claim={"regional_study_points": 5},
    ), now)

    assert _codes(result) == ["REGIONAL_REQUIREMENTS_UNCLEAR"]


def test_visa_expiring_soon_and_status_change(make_profile, now):
    result = assess(make_profile(
        occupation={"anzsco_code": "261111"},
        visa_history={"current_visa_subclass": "485", "visa_expiry_date": "2025-08-01"},
    ), now)

    assert _codes(result) == ["VISA_EXPIRY_SOON", "STATUS_CHANGE_RISK"]
    assert result.risk_factors[0].detail == "Current visa expires in 3 months"


def test_settings_override_thresholds(clean_profile, now):
    result = assess(clean_profile, now, RiskSettings(points_recent_trend_threshold=85))

    assert _codes(result) == ["POINTS_BELOW_RECENT_TRENDS"]


def test_model_and_dict_inputs_agree(clean_profile, now):
    from assessment.logic.adapter import load_profile

    assert assess(load_profile(clean_profile), now) == assess(clean_profile, now)
