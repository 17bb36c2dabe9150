"""
Eligibility Evaluator

Applies every criterion of a ruleset to a profile and aggregates the
outcomes into an eligibility verdict:
- any hard failure -> NotEligible
- otherwise any soft failure -> Borderline
- otherwise -> Eligible
"""

import logging
from typing import Any, List, Mapping, Union

from .adapter import load_profile, load_ruleset
from .constants import EligibilityStatus, Severity
from .contracts import ApplicantProfile, EligibilityReason, EligibilityResult, Ruleset
from .dates import Instant
from .errors import UnknownEvaluatorError
from .rule_evaluators import EVALUATORS, failure_message

logger = logging.getLogger(__name__)


def evaluate_criterion(profile: ApplicantProfile, criterion, now: Instant) -> bool:
    """Dispatch a single criterion to its evaluator."""
    evaluator = EVALUATORS.get(criterion.kind)
    if evaluator is None:
        # Unreachable for validated rulesets; never skip silently
        raise UnknownEvaluatorError(criterion.evaluate, criterion_code=criterion.code)
    return evaluator(profile, criterion, now)


def aggregate_status(reasons: List[EligibilityReason]) -> EligibilityStatus:
    """Severity dominates: one hard failure outweighs any number of passes."""
    if any(reason.severity == Severity.HARD for reason in reasons):
        return EligibilityStatus.NOT_ELIGIBLE
    if any(reason.severity == Severity.SOFT for reason in reasons):
        return EligibilityStatus.BORDERLINE
    return EligibilityStatus.ELIGIBLE


def evaluate(
    profile: Union[ApplicantProfile, Mapping[str, Any]],
    ruleset: Union[Ruleset, Mapping[str, Any]],
    now: Instant
) -> EligibilityResult:
    """
    Evaluate a profile against a ruleset at an explicit instant.

    Args:
        profile: Applicant profile (model or plain dict)
        ruleset: Published ruleset (model or plain dict)
        now: Evaluation instant; never sampled from a clock

    Returns:
        EligibilityResult with failure reasons and hard-failure codes

    Raises:
        ProfileValidationError: malformed profile
        RulesetConfigurationError: invalid ruleset (incl. unknown evaluator)
    """
    profile = load_profile(profile)
    ruleset = load_ruleset(ruleset)

    reasons: List[EligibilityReason] = []
    missing: List[str] = []

    for criterion in ruleset.criteria:
        passed = evaluate_criterion(profile, criterion, now)
        logger.debug(f"Criterion {criterion.code} ({criterion.evaluate}) passed={passed}")
        if passed:
            continue

        reasons.append(EligibilityReason(
            code=criterion.code,
            message=failure_message(profile, criterion),
            severity=criterion.severity,
        ))
        if criterion.severity == Severity.HARD:
            missing.append(criterion.code)

    return EligibilityResult(
        eligibility_status=aggregate_status(reasons),
        eligibility_reasons=reasons,
        missing_criteria=missing,
        points_score=profile.data.points_claim.total_points_claimed,
    )
