"""
Assessment Engine Constants

Defines enums, threshold tables, static policy lists and remediation maps
used by the eligibility, risk and evidence-gap components.
All values are deterministic with no AI/ML components.
"""

from enum import Enum
from typing import Dict, List, Tuple

# =============================================================================
# ENUMS
# =============================================================================

class Severity(str, Enum):
    """Criterion severity. Hard failures block eligibility."""
    HARD = "hard"
    SOFT = "soft"


class EligibilityStatus(str, Enum):
    ELIGIBLE = "Eligible"
    BORDERLINE = "Borderline"
    NOT_ELIGIBLE = "NotEligible"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Priority(str, Enum):
    """Evidence gap priority."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class EvaluatorKind(str, Enum):
    """Closed set of criterion evaluators understood by the engine."""
    AGE_BETWEEN = "age_between"
    SKILLS_ASSESSMENT_VALID = "skills_assessment_valid"
    ENGLISH_MINIMUM = "english_minimum"
    POINTS_MINIMUM = "points_minimum"


# Older rulesets name two evaluators differently
EVALUATOR_ALIASES: Dict[str, str] = {
    "skills_assessment_positive_and_not_expired": EvaluatorKind.SKILLS_ASSESSMENT_VALID.value,
    "points_at_least": EvaluatorKind.POINTS_MINIMUM.value,
}

# =============================================================================
# ENGLISH THRESHOLDS
# =============================================================================

ENGLISH_COMPONENTS: Tuple[str, ...] = ("listening", "reading", "writing", "speaking")

# (level, test type) -> minimum score per component
ENGLISH_THRESHOLDS: Dict[str, Dict[str, float]] = {
    "competent": {"IELTS": 6.0, "PTE": 50, "TOEFL": 60},
    "proficient": {"IELTS": 7.0, "PTE": 65, "TOEFL": 79},
    "superior": {"IELTS": 8.0, "PTE": 79, "TOEFL": 94},
}

NO_ENGLISH_TEST = "NA"

# =============================================================================
# RISK POLICY LISTS
# =============================================================================

# ANZSCO codes whose settings change frequently
VOLATILE_OCCUPATIONS: List[str] = ["261313", "261312", "233211"]

# ANZSCO codes subject to invitation ceilings
CEILING_OCCUPATIONS: List[str] = ["261313", "261312", "261311", "221111", "224711"]

# States whose nomination programs change frequently
VOLATILE_STATE_POLICIES: List[str] = ["NSW", "VIC", "QLD"]

# Temporary subclasses where a move to permanent residence needs planning
STATUS_CHANGE_SUBCLASSES: List[str] = ["485", "482"]

STRONG_ENGLISH_OVERALL = 7.0

# Days in a "month" for window arithmetic
DAYS_PER_MONTH = 30

# =============================================================================
# PRIORITY ORDER
# =============================================================================

PRIORITY_ORDER: Dict[Priority, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}

# =============================================================================
# REMEDIATION MAPS
# =============================================================================

# Hard-failure criterion code -> (priority, item, rationale)
CRITERION_REMEDIATION: Dict[str, Tuple[Priority, str, str]] = {
    "AGE_RANGE": (
        Priority.HIGH,
        "Birth certificate verification",
        "Age eligibility must be verified with official documentation",
    ),
    "SKILLS_ASSESSMENT_VALID": (
        Priority.HIGH,
        "Valid skills assessment",
        "Positive, unexpired skills assessment from the relevant authority required",
    ),
    "ENGLISH_MINIMUM": (
        Priority.HIGH,
        "Updated English test results",
        "Minimum English requirement not met",
    ),
    "POINTS_MINIMUM": (
        Priority.HIGH,
        "Points optimization review",
        "Current points below minimum threshold",
    ),
    "STATE_NOMINATION": (
        Priority.HIGH,
        "State nomination application",
        "State nomination required for subclass 190",
    ),
}

# Legacy criterion codes used by earlier rulesets
CRITERION_CODE_ALIASES: Dict[str, str] = {
    "AGE_REQUIREMENT": "AGE_RANGE",
    "SKILLS_ASSESSMENT": "SKILLS_ASSESSMENT_VALID",
    "ENGLISH_COMPETENT": "ENGLISH_MINIMUM",
    "POINTS_THRESHOLD": "POINTS_MINIMUM",
}

# Risk factor code -> (priority, item, rationale). Dict order is derivation order.
RISK_REMEDIATION: Dict[str, Tuple[Priority, str, str]] = {
    "EMPLOYMENT_EVIDENCE_WEAK": (
        Priority.HIGH,
        "Employment verification package",
        "Strengthen employment claims with contracts, payslips, and detailed references",
    ),
    "CORE_DOCS_MISSING": (
        Priority.HIGH,
        "Core application documents",
        "Essential documents (passport, skills assessment, English test) must be available",
    ),
    "DUTY_STATEMENTS_MISSING": (
        Priority.MEDIUM,
        "Employment reference letters with duty statements",
        "Detailed duty statements required to demonstrate ANZSCO alignment",
    ),
    "SKILLS_ASSESSMENT_EXPIRING_SOON": (
        Priority.HIGH,
        "Skills assessment renewal",
        "Current assessment expires soon, renewal required before application",
    ),
    "ENGLISH_TEST_OLD": (
        Priority.MEDIUM,
        "Updated English test results",
        "Current test results approaching 3-year validity limit",
    ),
    "VISA_EXPIRY_SOON": (
        Priority.HIGH,
        "Urgent application lodgement",
        "Current visa expires soon, immediate action required",
    ),
    "PRIOR_REFUSAL_FLAG": (
        Priority.HIGH,
        "Previous refusal response documentation",
        "Must address reasons for previous refusal with comprehensive evidence",
    ),
    "STATE_NOMINATION_UNKNOWN": (
        Priority.HIGH,
        "State nomination eligibility confirmation",
        "Verify occupation on state list and meet state-specific requirements",
    ),
    "FINANCIAL_EVIDENCE_GAP": (
        Priority.MEDIUM,
        "Financial capacity documentation",
        "Bank statements and asset evidence may be required",
    ),
}

# Subset computed inline by the risk analyzer
INLINE_RISK_GAPS: Dict[str, Tuple[Priority, str, str]] = {
    "EMPLOYMENT_EVIDENCE_WEAK": (
        Priority.HIGH,
        "Employment verification documents",
        "Strengthen employment evidence with detailed references and contracts",
    ),
    "CORE_DOCS_MISSING": (
        Priority.HIGH,
        "Core application documents",
        "Passport, skills assessment, and English test results required",
    ),
    "SKILLS_ASSESSMENT_EXPIRING_SOON": (
        Priority.HIGH,
        "Skills assessment renewal",
        "Current assessment expires soon, renewal may be required",
    ),
}

# Document checklist field -> (priority, item, rationale)
DOCUMENT_REMEDIATION: Dict[str, Tuple[Priority, str, str]] = {
    "passport": (
        Priority.HIGH,
        "Current passport",
        "Valid passport required for identity verification",
    ),
    "skills_assessment": (
        Priority.HIGH,
        "Skills assessment documentation",
        "Skills assessment letter and supporting documents required",
    ),
    "english_test": (
        Priority.HIGH,
        "English test results",
        "Official English test results required for points claim",
    ),
    "employment_reference_letters": (
        Priority.HIGH,
        "Employment reference letters",
        "Reference letters required to verify employment claims",
    ),
    "employment_contracts": (
        Priority.MEDIUM,
        "Employment contracts",
        "Contracts strengthen employment verification",
    ),
    "payslips": (
        Priority.MEDIUM,
        "Payslips",
        "Recent payslips support employment and salary claims",
    ),
    "cv": (
        Priority.LOW,
        "Current CV/Resume",
        "Updated CV provides employment history overview",
    ),
    "bank_statements": (
        Priority.LOW,
        "Bank statements",
        "Financial evidence may be requested by the Department",
    ),
}

CORE_DOCUMENTS: Tuple[str, ...] = ("passport", "skills_assessment", "english_test")

# =============================================================================
# POLICY REFERENCES
# =============================================================================

STANDARD_POLICY_REFERENCES: List[Dict[str, str]] = [
    {"type": "regulation", "label": "Migration Regulations 1994", "ref": "Schedule 2"},
    {"type": "regulation", "label": "Points Test", "ref": "Schedule 6D"},
]

ENGINE_VERSION = "1.0.0"
