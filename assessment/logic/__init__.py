"""
Assessment Logic Module

Provides the deterministic eligibility, risk, evidence-gap and audit engine
for skilled migration assessments.
"""

from .contracts import (
    ApplicantProfile,
    Ruleset,
    EligibilityResult,
    EligibilityReason,
    RiskAssessment,
    RiskFactor,
    EvidenceGap,
    AuditRecord,
    PolicySnapshot,
    AssessmentOutcome,
)
from .engine import AssessmentEngine, run_assessment
from .eligibility import evaluate
from .risk_analyzer import assess
from .evidence_gaps import derive, merge_gaps
from .audit import AuditLedger, bind, compute_profile_checksum
from .policy import create_policy_snapshot, create_189_ruleset, create_190_ruleset, load_ruleset
from .constants import EligibilityStatus, RiskLevel, Priority, Severity
from .errors import (
    AssessmentError,
    RulesetConfigurationError,
    UnknownEvaluatorError,
    ProfileValidationError,
    AuditError,
    AuditRecordNotFoundError,
    AuditRecordExistsError,
    AuditRecordImmutableError,
)

__all__ = [
    # Main engine
    "AssessmentEngine",
    "run_assessment",

    # Components
    "evaluate",
    "assess",
    "derive",
    "merge_gaps",
    "bind",
    "compute_profile_checksum",
    "AuditLedger",

    # Policy
    "create_policy_snapshot",
    "create_189_ruleset",
    "create_190_ruleset",
    "load_ruleset",

    # Contracts
    "ApplicantProfile",
    "Ruleset",
    "EligibilityResult",
    "EligibilityReason",
    "RiskAssessment",
    "RiskFactor",
    "EvidenceGap",
    "AuditRecord",
    "PolicySnapshot",
    "AssessmentOutcome",

    # Enums
    "EligibilityStatus",
    "RiskLevel",
    "Priority",
    "Severity",

    # Errors
    "AssessmentError",
    "RulesetConfigurationError",
    "UnknownEvaluatorError",
    "ProfileValidationError",
    "AuditError",
    "AuditRecordNotFoundError",
    "AuditRecordExistsError",
    "AuditRecordImmutableError",
]
