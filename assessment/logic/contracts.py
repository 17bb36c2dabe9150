"""
Data Contracts for the Assessment Engine

Defines Pydantic models for ApplicantProfile and Ruleset (inputs) and
EligibilityResult, RiskAssessment, EvidenceGap and AuditRecord (outputs).
These contracts are the boundary between the engine and its callers.
"""

from datetime import date, datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from .constants import (
    EVALUATOR_ALIASES,
    ENGINE_VERSION,
    EligibilityStatus,
    EvaluatorKind,
    Priority,
    RiskLevel,
    Severity,
)
from .errors import RulesetConfigurationError, UnknownEvaluatorError


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class _Output(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True)


# =============================================================================
# INPUT CONTRACTS - APPLICANT PROFILE
# =============================================================================
# Every field is required. Dates typed Optional must still be present and
# may be null. Nothing is defaulted.

class Person(_Frozen):
    date_of_birth: date
    nationality: str
    marital_status: Literal["single", "married", "de_facto", "divorced", "widowed"]


class Location(_Frozen):
    current_country: str
    current_state: str
    regional_postcode: str


class VisaHistory(_Frozen):
    current_visa_subclass: str
    visa_expiry_date: Optional[date]
    previous_refusals: bool
    previous_cancellations: bool
    compliance_issues: bool
    notes: str


class SkillsAssessment(_Frozen):
    status: Literal["positive", "pending", "not_held", "expired"]
    assessing_authority: str
    issue_date: Optional[date]
    expiry_date: Optional[date]
    notes: str


class Occupation(_Frozen):
    anzsco_code: str
    occupation_title: str
    skills_assessment: SkillsAssessment


class EnglishTest(_Frozen):
    test_type: Literal["IELTS", "PTE", "TOEFL", "OET", "Cambridge", "NA"]
    overall: float
    listening: float
    reading: float
    writing: float
    speaking: float
    test_date: Optional[date]


class Education(_Frozen):
    level: Literal["bachelor", "master", "phd", "diploma", "other"]
    field: str
    country: str
    completed_date: Optional[date]


class Employment(_Frozen):
    employer: str
    country: str
    start_date: date
    end_date: Optional[date]  # None while the role is current
    hours_per_week: float
    employment_type: Literal["full_time", "part_time", "contract"]
    role_title: str
    duties_alignment: Literal["high", "medium", "low", "unknown"]
    evidence_strength: Literal["strong", "medium", "weak", "unknown"]


class PointsClaim(_Frozen):
    total_points_claimed: int
    age_points: int
    english_points: int
    education_points: int
    australian_experience_points: int
    overseas_experience_points: int
    partner_points: int
    naati_points: int
    professional_year_points: int
    regional_study_points: int
    state_nomination_points: int


class StateNomination(_Frozen):
    seeking_nomination: bool
    state: str
    occupation_list_status: Literal["unknown", "on_list", "off_list"]
    notes: str


class DocumentChecklist(_Frozen):
    passport: bool
    skills_assessment: bool
    english_test: bool
    employment_reference_letters: bool
    employment_contracts: bool
    payslips: bool
    bank_statements: bool
    cv: bool


class ApplicantProfileData(_Frozen):
    """Every section is required; a missing one makes the profile malformed."""
    person: Person
    location: Location
    visa_history: VisaHistory
    occupation: Occupation
    english: EnglishTest
    education: List[Education]
    employment: List[Employment]
    points_claim: PointsClaim
    state_nomination: StateNomination
    documents: DocumentChecklist


class ApplicantProfile(_Frozen):
    """
    Input contract for the engine.
    One immutable snapshot of an applicant; a new version is a new profile.
    """
    id: str
    tenant_id: str
    profile_version: int = Field(ge=1)
    collected_at: Optional[datetime]
    data: ApplicantProfileData


# =============================================================================
# INPUT CONTRACTS - RULESET
# =============================================================================

class PolicyReference(_Frozen):
    type: Literal["regulation", "policy"]
    label: str
    ref: str


class AgeBetweenParams(_Frozen):
    min: int = Field(ge=0)
    max: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        return self


class NoParams(_Frozen):
    pass


class EnglishMinimumParams(_Frozen):
    # Unknown levels are allowed here and simply fail at evaluation time
    level: str


class PointsMinimumParams(_Frozen):
    minimum: int = Field(ge=0)


class _CriterionBase(_Frozen):
    code: str = Field(min_length=1)
    description: str = ""
    severity: Severity

    @property
    def kind(self) -> EvaluatorKind:
        return EvaluatorKind(self.evaluate)


class AgeBetweenCriterion(_CriterionBase):
    evaluate: Literal["age_between"]
    params: AgeBetweenParams


class SkillsAssessmentValidCriterion(_CriterionBase):
    evaluate: Literal["skills_assessment_valid"]
    params: NoParams = Field(default_factory=NoParams)


class EnglishMinimumCriterion(_CriterionBase):
    evaluate: Literal["english_minimum"]
    params: EnglishMinimumParams


class PointsMinimumCriterion(_CriterionBase):
    evaluate: Literal["points_minimum"]
    params: PointsMinimumParams


Criterion = Annotated[
    Union[
        AgeBetweenCriterion,
        SkillsAssessmentValidCriterion,
        EnglishMinimumCriterion,
        PointsMinimumCriterion,
    ],
    Field(discriminator="evaluate"),
]


class Ruleset(_Frozen):
    """
    Versioned, published set of criteria for one visa category.
    Unknown evaluators and duplicate codes are rejected at load time.
    """
    id: str = ""
    policy_snapshot_id: str = ""
    visa: str
    version: str
    criteria: List[Criterion] = Field(default_factory=list)
    policy_references: List[PolicyReference] = Field(default_factory=list)

    @field_validator("criteria", mode="before")
    @classmethod
    def _resolve_evaluators(cls, value: Any, info: ValidationInfo) -> Any:
        if not isinstance(value, list):
            return value
        known = {kind.value for kind in EvaluatorKind}
        resolved = []
        for raw in value:
            if isinstance(raw, dict) and "evaluate" in raw:
                name = EVALUATOR_ALIASES.get(raw["evaluate"], raw["evaluate"])
                if name not in known:
                    raise UnknownEvaluatorError(
                        str(name),
                        criterion_code=raw.get("code"),
                        ruleset_id=info.data.get("id"),
                    )
                raw = {**raw, "evaluate": name}
            resolved.append(raw)
        return resolved

    @model_validator(mode="after")
    def _check_unique_codes(self):
        seen = set()
        for criterion in self.criteria:
            if criterion.code in seen:
                raise RulesetConfigurationError(
                    f"Duplicate criterion code {criterion.code} in ruleset {self.id or self.visa}",
                    ruleset_id=self.id,
                )
            seen.add(criterion.code)
        return self


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class EligibilityReason(_Output):
    code: str
    message: str
    severity: Severity


class EligibilityResult(_Output):
    eligibility_status: EligibilityStatus
    eligibility_reasons: List[EligibilityReason] = Field(default_factory=list)
    missing_criteria: List[str] = Field(default_factory=list)  # hard failures only
    points_score: Optional[int] = None


class RiskFactor(_Output):
    code: str
    level: RiskLevel
    detail: str


class EvidenceGap(_Output):
    priority: Priority
    item: str
    rationale: str


class RiskAssessment(_Output):
    risk_level: RiskLevel
    risk_factors: List[RiskFactor] = Field(default_factory=list)
    mitigating_factors: List[str] = Field(default_factory=list)
    evidence_gaps: List[EvidenceGap] = Field(default_factory=list)


class ReportPaths(_Output):
    html: Optional[str] = None
    pdf: Optional[str] = None


class ReviewerSignoff(_Output):
    reviewer_name: str = Field(min_length=1)
    mara_number: str = Field(min_length=1)  # registration/licence number
    signed_at: datetime
    comments: Optional[str] = None


class AuditRecord(_Output):
    """
    Tamper-evident link between one profile snapshot and the decisions made
    from it. Core fields are write-once; report paths and signoff are appended
    by the ledger.
    """
    audit_id: str
    assessment_id: str
    tenant_id: str
    profile_checksum: str
    policy_snapshot_id: str
    ruleset_versions: Dict[str, str] = Field(default_factory=dict)
    eligibility_outputs: Dict[str, EligibilityResult] = Field(default_factory=dict)
    risk_outputs: Dict[str, RiskAssessment] = Field(default_factory=dict)
    evidence_gaps: List[EvidenceGap] = Field(default_factory=list)
    report_paths: ReportPaths = Field(default_factory=ReportPaths)
    reviewer_signoff: Optional[ReviewerSignoff] = None
    created_at: Optional[datetime] = None
    engine_version: str = ENGINE_VERSION


class PolicySnapshot(_Frozen):
    id: str
    effective_date: date
    references: List[PolicyReference] = Field(default_factory=list)


class AssessmentOutcome(_Output):
    """Everything produced for one assessment run."""
    assessment_id: str
    eligibility: Dict[str, EligibilityResult] = Field(default_factory=dict)
    risk: RiskAssessment
    evidence_gaps: List[EvidenceGap] = Field(default_factory=list)
    audit_record: AuditRecord
