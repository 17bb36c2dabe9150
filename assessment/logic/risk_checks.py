"""
Risk Checks

Individual, independent checks run by the risk analyzer. Each check takes
(profile, now, settings) and returns the risk factors it raises, possibly
none. All logic is deterministic; ``now`` is always supplied by the caller.
"""

from typing import List

from ..config import RiskSettings
from .constants import (
    CEILING_OCCUPATIONS,
    CORE_DOCUMENTS,
    ENGLISH_COMPONENTS,
    STATUS_CHANGE_SUBCLASSES,
    VOLATILE_OCCUPATIONS,
    VOLATILE_STATE_POLICIES,
    RiskLevel,
)
from .contracts import ApplicantProfile, DocumentChecklist, Employment, EnglishTest, RiskFactor
from .dates import Instant, calculate_age, months_between, months_since, months_until
from .rule_evaluators import english_threshold


# =============================================================================
# SHARED PREDICATES
# =============================================================================

def weak_evidence_entries(employment: List[Employment]) -> List[Employment]:
    return [e for e in employment if e.evidence_strength in ("weak", "unknown")]


def has_employment_gaps(employment: List[Employment], max_gap_months: float) -> bool:
    """
    True if two consecutive ended periods are separated by more than
    ``max_gap_months``. Ongoing roles (no end date) are not considered.
    """
    if len(employment) < 2:
        return False

    ended = sorted(
        (e for e in employment if e.end_date is not None),
        key=lambda e: e.start_date,
    )
    for previous, current in zip(ended, ended[1:]):
        if months_between(previous.end_date, current.start_date) > max_gap_months:
            return True
    return False


def missing_core_documents(documents: DocumentChecklist) -> List[str]:
    return [name for name in CORE_DOCUMENTS if not getattr(documents, name)]


def is_english_borderline(english: EnglishTest, margin: float) -> bool:
    """Any component at or below the competent threshold plus ``margin``."""
    competent = english_threshold("competent", english.test_type)
    if competent is None:
        return False
    return any(getattr(english, c) <= competent + margin for c in ENGLISH_COMPONENTS)


# =============================================================================
# CHECKS (in battery order)
# =============================================================================

def check_points(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    points = profile.data.points_claim.total_points_claimed
    risks: List[RiskFactor] = []

    if points < settings.points_competitive_threshold:
        risks.append(RiskFactor(
            code="POINTS_MARGIN_LOW",
            level=RiskLevel.MEDIUM,
            detail=f"Points score of {points} provides minimal margin above minimum thresholds",
        ))

    if points < settings.points_recent_trend_threshold:
        risks.append(RiskFactor(
            code="POINTS_BELOW_RECENT_TRENDS",
            level=RiskLevel.HIGH,
            detail="Points score below recent invitation trends for competitive selection",
        ))

    return risks


def check_age(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    age = calculate_age(profile.data.person.date_of_birth, now)
    if age >= settings.upper_age_bound - settings.age_margin_years:
        return [RiskFactor(
            code="AGE_NEAR_THRESHOLD",
            level=RiskLevel.MEDIUM,
            detail=f"Age {age} approaching {settings.upper_age_bound}-year eligibility limit",
        )]
    return []


def check_duties_alignment(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    if any(e.duties_alignment in ("low", "unknown") for e in profile.data.employment):
        return [RiskFactor(
            code="ANZSCO_MISMATCH_RISK",
            level=RiskLevel.HIGH,
            detail="Employment duties may not align with nominated ANZSCO code",
        )]
    return []


def check_skills_assessment(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    assessment = profile.data.occupation.skills_assessment
    risks: List[RiskFactor] = []

    if assessment.expiry_date is not None:
        months_left = months_until(assessment.expiry_date, now)
        if months_left <= settings.skills_expiry_window_months:
            risks.append(RiskFactor(
                code="SKILLS_ASSESSMENT_EXPIRING_SOON",
                level=RiskLevel.MEDIUM,
                detail=f"Skills assessment expires in {months_left} months",
            ))

    if assessment.status == "pending":
        risks.append(RiskFactor(
            code="SKILLS_ASSESSMENT_PENDING",
            level=RiskLevel.HIGH,
            detail="Skills assessment outcome still pending",
        ))

    return risks


def check_employment_evidence(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    weak = weak_evidence_entries(profile.data.employment)
    if weak:
        return [RiskFactor(
            code="EMPLOYMENT_EVIDENCE_WEAK",
            level=RiskLevel.HIGH,
            detail=f"{len(weak)} employment periods have weak supporting evidence",
        )]
    return []


def check_employment_gaps(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    if has_employment_gaps(profile.data.employment, settings.employment_gap_months):
        return [RiskFactor(
            code="INCONSISTENT_EMPLOYMENT_HISTORY",
            level=RiskLevel.MEDIUM,
            detail="Employment history contains unexplained gaps or inconsistencies",
        )]
    return []


def check_duty_statements(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    if not profile.data.documents.employment_reference_letters:
        return [RiskFactor(
            code="DUTY_STATEMENTS_MISSING",
            level=RiskLevel.MEDIUM,
            detail="Employment reference letters with duty statements not confirmed",
        )]
    return []


def check_english_test_age(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    test_date = profile.data.english.test_date
    if test_date is None:
        return []
    age_months = months_since(test_date, now)
    if age_months >= settings.english_max_age_months:
        return [RiskFactor(
            code="ENGLISH_TEST_OLD",
            level=RiskLevel.MEDIUM,
            detail=f"English test is {age_months // 12} years old, approaching expiry",
        )]
    return []


def check_english_borderline(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    if is_english_borderline(profile.data.english, settings.english_borderline_margin):
        return [RiskFactor(
            code="ENGLISH_SCORE_BORDERLINE",
            level=RiskLevel.MEDIUM,
            detail="English test scores are close to minimum requirements",
        )]
    return []


def check_visa_history_flags(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    history = profile.data.visa_history
    risks: List[RiskFactor] = []

    if history.previous_refusals:
        risks.append(RiskFactor(
            code="PRIOR_REFUSAL_FLAG",
            level=RiskLevel.HIGH,
            detail="Previous visa refusals on record require careful consideration",
        ))
    if history.previous_cancellations:
        risks.append(RiskFactor(
            code="PRIOR_CANCELLATION_FLAG",
            level=RiskLevel.HIGH,
            detail="Previous visa cancellations on record",
        ))
    if history.compliance_issues:
        risks.append(RiskFactor(
            code="COMPLIANCE_ISSUES_FLAG",
            level=RiskLevel.HIGH,
            detail="Previous compliance issues noted in visa history",
        ))

    return risks


def check_policy_volatility(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    data = profile.data
    risks: List[RiskFactor] = []

    if data.occupation.anzsco_code in VOLATILE_OCCUPATIONS:
        risks.append(RiskFactor(
            code="OCCUPATION_VOLATILE",
            level=RiskLevel.MEDIUM,
            detail="Nominated occupation subject to frequent policy changes",
        ))

    nomination = data.state_nomination
    if nomination.seeking_nomination and nomination.state in VOLATILE_STATE_POLICIES:
        risks.append(RiskFactor(
            code="STATE_POLICY_VOLATILE",
            level=RiskLevel.MEDIUM,
            detail=f"{nomination.state} nomination policies subject to frequent changes",
        ))

    if data.occupation.anzsco_code in CEILING_OCCUPATIONS:
        risks.append(RiskFactor(
            code="OCCUPATION_CEILING_RISK",
            level=RiskLevel.MEDIUM,
            detail="Occupation may be subject to invitation ceiling limitations",
        ))

    return risks


def check_state_nomination(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    nomination = profile.data.state_nomination
    if not nomination.seeking_nomination:
        return []

    if nomination.occupation_list_status == "unknown":
        return [RiskFactor(
            code="STATE_NOMINATION_UNKNOWN",
            level=RiskLevel.MEDIUM,
            detail="State nomination eligibility not confirmed",
        )]
    if nomination.occupation_list_status == "off_list":
        return [RiskFactor(
            code="STATE_NOMINATION_LOW_CERTAINTY",
            level=RiskLevel.HIGH,
            detail="Low certainty of obtaining state nomination",
        )]
    return []


def check_regional_study(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    if profile.data.points_claim.regional_study_points > 0:
        return [RiskFactor(
            code="REGIONAL_REQUIREMENTS_UNCLEAR",
            level=RiskLevel.MEDIUM,
            detail="Regional study requirements may need additional verification",
        )]
    return []


def check_visa_status(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    history = profile.data.visa_history
    risks: List[RiskFactor] = []

    if history.visa_expiry_date is not None:
        months_left = months_until(history.visa_expiry_date, now)
        if months_left <= settings.visa_expiry_window_months:
            risks.append(RiskFactor(
                code="VISA_EXPIRY_SOON",
                level=RiskLevel.HIGH,
                detail=f"Current visa expires in {months_left} months",
            ))

    if history.current_visa_subclass in STATUS_CHANGE_SUBCLASSES:
        risks.append(RiskFactor(
            code="STATUS_CHANGE_RISK",
            level=RiskLevel.MEDIUM,
            detail=f"Subclass {history.current_visa_subclass} holder requires status change consideration",
        ))

    return risks


def check_documents(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    documents = profile.data.documents
    risks: List[RiskFactor] = []

    missing = missing_core_documents(documents)
    if missing:
        risks.append(RiskFactor(
            code="CORE_DOCS_MISSING",
            level=RiskLevel.HIGH,
            detail=f"Core application documents not confirmed available: {', '.join(missing)}",
        ))

    if not documents.bank_statements:
        risks.append(RiskFactor(
            code="FINANCIAL_EVIDENCE_GAP",
            level=RiskLevel.MEDIUM,
            detail="Financial capacity evidence not confirmed",
        ))

    return risks


def check_audit_defensibility(profile: ApplicantProfile, now: Instant, settings: RiskSettings) -> List[RiskFactor]:
    """Composite: co-occurrence of weak evidence, history gaps and missing core docs."""
    data = profile.data
    signals = [
        bool(weak_evidence_entries(data.employment)),
        has_employment_gaps(data.employment, settings.employment_gap_months),
        bool(missing_core_documents(data.documents)),
    ]
    if sum(signals) >= settings.audit_defensibility_min_signals:
        return [RiskFactor(
            code="LOW_AUDIT_DEFENSIBILITY",
            level=RiskLevel.HIGH,
            detail="Application may not withstand detailed departmental scrutiny",
        )]
    return []
