"""
Risk Analyzer

Runs the fixed battery of risk checks over a profile and aggregates the
resulting factors into an overall risk level.

Aggregation is a priority vote, not a score:
- High if any factor is High
- Medium if >= 2 Medium factors, or >= 1 Medium together with >= 2 Low
- Low otherwise
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..config import DEFAULT_SETTINGS, RiskSettings
from .adapter import load_profile
from .constants import INLINE_RISK_GAPS, NO_ENGLISH_TEST, STRONG_ENGLISH_OVERALL, RiskLevel
from .contracts import ApplicantProfile, EvidenceGap, RiskAssessment, RiskFactor
from .dates import Instant
from .risk_checks import (
    check_age,
    check_audit_defensibility,
    check_documents,
    check_duties_alignment,
    check_duty_statements,
    check_employment_evidence,
    check_employment_gaps,
    check_english_borderline,
    check_english_test_age,
    check_points,
    check_policy_volatility,
    check_regional_study,
    check_skills_assessment,
    check_state_nomination,
    check_visa_history_flags,
    check_visa_status,
)

logger = logging.getLogger(__name__)

RiskCheck = Callable[[ApplicantProfile, Instant, RiskSettings], List[RiskFactor]]

# Order is part of the output contract: snapshots compare factor lists verbatim
RISK_CHECKS: List[RiskCheck] = [
    check_points,
    check_age,
    check_duties_alignment,
    check_skills_assessment,
    check_employment_evidence,
    check_employment_gaps,
    check_duty_statements,
    check_english_test_age,
    check_english_borderline,
    check_visa_history_flags,
    check_policy_volatility,
    check_state_nomination,
    check_regional_study,
    check_visa_status,
    check_documents,
    check_audit_defensibility,
]


def run_checks(
    profile: ApplicantProfile,
    now: Instant,
    settings: RiskSettings
) -> List[RiskFactor]:
    factors: List[RiskFactor] = []
    for check in RISK_CHECKS:
        raised = check(profile, now, settings)
        if raised:
            logger.debug(f"{check.__name__} raised {[f.code for f in raised]}")
        factors.extend(raised)
    return factors


def count_by_level(factors: List[RiskFactor]) -> Dict[RiskLevel, int]:
    counts = {level: 0 for level in RiskLevel}
    for factor in factors:
        counts[RiskLevel(factor.level)] += 1
    return counts


def aggregate_risk_level(factors: List[RiskFactor]) -> RiskLevel:
    """Severity dominates count; see module docstring."""
    counts = count_by_level(factors)

    if counts[RiskLevel.HIGH] > 0:
        return RiskLevel.HIGH

    medium, low = counts[RiskLevel.MEDIUM], counts[RiskLevel.LOW]
    if medium >= 2 or (medium >= 1 and low >= 2):
        return RiskLevel.MEDIUM

    return RiskLevel.LOW


def mitigating_factors(profile: ApplicantProfile, settings: RiskSettings) -> List[str]:
    """Informational only; never affects the aggregated level."""
    data = profile.data
    factors: List[str] = []

    if data.occupation.skills_assessment.status == "positive":
        factors.append("Positive skills assessment held")

    if data.english.test_type != NO_ENGLISH_TEST and data.english.overall >= STRONG_ENGLISH_OVERALL:
        factors.append("Strong English test results")

    if data.points_claim.total_points_claimed >= settings.high_points_margin:
        factors.append("High points score provides competitive advantage")

    return factors


def inline_evidence_gaps(factors: List[RiskFactor]) -> List[EvidenceGap]:
    codes = {factor.code for factor in factors}
    return [
        EvidenceGap(priority=priority, item=item, rationale=rationale)
        for code, (priority, item, rationale) in INLINE_RISK_GAPS.items()
        if code in codes
    ]


def assess(
    profile: Union[ApplicantProfile, Mapping[str, Any]],
    now: Instant,
    settings: Optional[RiskSettings] = None
) -> RiskAssessment:
    """
    Assess risk for a profile at an explicit instant.

    Args:
        profile: Applicant profile (model or plain dict)
        now: Evaluation instant
        settings: Thresholds; defaults are used when omitted

    Returns:
        RiskAssessment with factors in battery order
    """
    profile = load_profile(profile)
    settings = settings or DEFAULT_SETTINGS

    factors = run_checks(profile, now, settings)

    return RiskAssessment(
        risk_level=aggregate_risk_level(factors),
        risk_factors=factors,
        mitigating_factors=mitigating_factors(profile, settings),
        evidence_gaps=inline_evidence_gaps(factors),
    )
