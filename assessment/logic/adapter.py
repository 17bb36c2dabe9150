"""
Input Adapter

Turns plain nested dicts from callers into validated engine contracts.
This is a pure VALIDATE + TRANSFORM layer:
- NO evaluation logic
- NO I/O

Pydantic validation failures are translated into the engine's own error
hierarchy so callers can tell a bad ruleset from bad applicant data.
"""

import logging
from typing import Any, Mapping, Union

from pydantic import ValidationError

from .contracts import ApplicantProfile, EligibilityResult, RiskAssessment, Ruleset
from .errors import ProfileValidationError, RulesetConfigurationError

logger = logging.getLogger(__name__)


def _summarize(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location or '<root>'}: {error.get('msg')}")
    return "; ".join(parts)


def load_profile(profile: Union[ApplicantProfile, Mapping[str, Any]]) -> ApplicantProfile:
    """
    Validate a profile.

    Raises:
        ProfileValidationError: a required section is missing or a value is invalid
    """
    if isinstance(profile, ApplicantProfile):
        return profile
    if not isinstance(profile, Mapping):
        raise ProfileValidationError(
            f"Profile must be a mapping or ApplicantProfile, got {type(profile).__name__}"
        )
    try:
        return ApplicantProfile.model_validate(dict(profile))
    except ValidationError as exc:
        profile_id = profile.get("id")
        logger.warning(f"Rejected malformed profile {profile_id}: {_summarize(exc)}")
        raise ProfileValidationError(
            f"Malformed applicant profile: {_summarize(exc)}",
            profile_id=profile_id,
        ) from exc


def load_ruleset(ruleset: Union[Ruleset, Mapping[str, Any]]) -> Ruleset:
    """
    Validate a ruleset at load/publish time.

    Raises:
        UnknownEvaluatorError: a criterion names an evaluator the engine lacks
        RulesetConfigurationError: any other structural problem
    """
    if isinstance(ruleset, Ruleset):
        return ruleset
    if not isinstance(ruleset, Mapping):
        raise RulesetConfigurationError(
            f"Ruleset must be a mapping or Ruleset, got {type(ruleset).__name__}"
        )
    try:
        return Ruleset.model_validate(dict(ruleset))
    except RulesetConfigurationError as exc:
        logger.warning(f"Rejected ruleset {ruleset.get('id') or ruleset.get('visa')}: {exc}")
        raise
    except ValidationError as exc:
        ruleset_id = ruleset.get("id")
        logger.warning(f"Rejected ruleset {ruleset_id or ruleset.get('visa')}: {_summarize(exc)}")
        raise RulesetConfigurationError(
            f"Invalid ruleset: {_summarize(exc)}",
            ruleset_id=ruleset_id,
        ) from exc


def load_eligibility_result(result: Union[EligibilityResult, Mapping[str, Any]]) -> EligibilityResult:
    """Accept an eligibility result as a model or as its serialized dict."""
    if isinstance(result, EligibilityResult):
        return result
    return EligibilityResult.model_validate(result)


def load_risk_assessment(assessment: Union[RiskAssessment, Mapping[str, Any]]) -> RiskAssessment:
    """Accept a risk assessment as a model or as its serialized dict."""
    if isinstance(assessment, RiskAssessment):
        return assessment
    return RiskAssessment.model_validate(assessment)
