"""
Engine exceptions.

Configuration errors (a bad ruleset) and applicant-data errors (a malformed
profile) are separate branches so operators can tell them apart.
"""

from typing import Optional


class AssessmentError(Exception):
    """Base class for all engine errors."""


class RulesetConfigurationError(AssessmentError):
    """Ruleset failed validation (duplicate codes, bad params, ...)."""

    def __init__(self, message: str, ruleset_id: Optional[str] = None):
        super().__init__(message)
        self.ruleset_id = ruleset_id


class UnknownEvaluatorError(RulesetConfigurationError):
    """A criterion names an evaluator the engine does not implement."""

    def __init__(self, evaluator: str, criterion_code: Optional[str] = None,
                 ruleset_id: Optional[str] = None):
        where = f" (criterion {criterion_code})" if criterion_code else ""
        super().__init__(f"Unknown evaluator: {evaluator}{where}", ruleset_id=ruleset_id)
        self.evaluator = evaluator
        self.criterion_code = criterion_code


class ProfileValidationError(AssessmentError):
    """Applicant profile is missing required sections or has invalid values."""

    def __init__(self, message: str, profile_id: Optional[str] = None):
        super().__init__(message)
        self.profile_id = profile_id


class AuditError(AssessmentError):
    """Base class for audit ledger errors."""

    def __init__(self, message: str, assessment_id: str):
        super().__init__(message)
        self.assessment_id = assessment_id


class AuditRecordNotFoundError(AuditError):
    def __init__(self, assessment_id: str):
        super().__init__(f"No audit record for assessment {assessment_id}", assessment_id)


class AuditRecordExistsError(AuditError):
    def __init__(self, assessment_id: str):
        super().__init__(f"Audit record already exists for assessment {assessment_id}", assessment_id)


class AuditRecordImmutableError(AuditError):
    """Attempt to overwrite an append-only audit field."""

    def __init__(self, assessment_id: str, field: str):
        super().__init__(
            f"Audit record for assessment {assessment_id} already has {field}; "
            "appended fields cannot be overwritten",
            assessment_id,
        )
        self.field = field
