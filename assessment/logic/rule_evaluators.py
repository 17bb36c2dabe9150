"""
Rule Evaluators

One function per criterion kind. Each returns True when the profile meets the
criterion at the given instant. Evaluators never raise for missing thresholds;
inability to prove a requirement is met counts as a failure.
"""

from typing import Callable, Dict, Optional

from .constants import (
    ENGLISH_COMPONENTS,
    ENGLISH_THRESHOLDS,
    NO_ENGLISH_TEST,
    EvaluatorKind,
)
from .contracts import (
    AgeBetweenCriterion,
    ApplicantProfile,
    EnglishMinimumCriterion,
    EnglishTest,
    PointsMinimumCriterion,
    SkillsAssessmentValidCriterion,
)
from .dates import Instant, as_datetime, calculate_age


def age_between(
    profile: ApplicantProfile,
    criterion: AgeBetweenCriterion,
    now: Instant
) -> bool:
    """Inclusive lower bound, exclusive upper bound."""
    age = calculate_age(profile.data.person.date_of_birth, now)
    return criterion.params.min <= age < criterion.params.max


def skills_assessment_valid(
    profile: ApplicantProfile,
    criterion: SkillsAssessmentValidCriterion,
    now: Instant
) -> bool:
    """Positive outcome and an expiry strictly after ``now``."""
    assessment = profile.data.occupation.skills_assessment
    if assessment.status != "positive" or assessment.expiry_date is None:
        return False
    return as_datetime(assessment.expiry_date, now) > as_datetime(now, now)


def english_threshold(level: str, test_type: str) -> Optional[float]:
    """Per-component minimum for (level, test type), or None if not tabled."""
    if test_type == NO_ENGLISH_TEST:
        return None
    return ENGLISH_THRESHOLDS.get(level, {}).get(test_type)


def english_minimum(
    profile: ApplicantProfile,
    criterion: EnglishMinimumCriterion,
    now: Instant
) -> bool:
    english: EnglishTest = profile.data.english
    threshold = english_threshold(criterion.params.level, english.test_type)
    if threshold is None:
        return False
    return all(getattr(english, component) >= threshold for component in ENGLISH_COMPONENTS)


def points_minimum(
    profile: ApplicantProfile,
    criterion: PointsMinimumCriterion,
    now: Instant
) -> bool:
    return profile.data.points_claim.total_points_claimed >= criterion.params.minimum


EVALUATORS: Dict[EvaluatorKind, Callable[..., bool]] = {
    EvaluatorKind.AGE_BETWEEN: age_between,
    EvaluatorKind.SKILLS_ASSESSMENT_VALID: skills_assessment_valid,
    EvaluatorKind.ENGLISH_MINIMUM: english_minimum,
    EvaluatorKind.POINTS_MINIMUM: points_minimum,
}


def failure_message(profile: ApplicantProfile, criterion) -> str:
    """Message recorded for a failed criterion."""
    if isinstance(criterion, PointsMinimumCriterion):
        current = profile.data.points_claim.total_points_claimed
        return f"Must score at least {criterion.params.minimum} points (current: {current})"
    return criterion.description
