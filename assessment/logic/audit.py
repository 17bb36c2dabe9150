"""
Audit Binder

Binds a specific profile snapshot to the decisions computed from it.

Provides:
1. Canonical checksum - SHA-256 over JSON with recursively sorted keys
2. bind() - builds the write-once AuditRecord
3. AuditLedger - keyed by assessment id; report paths and reviewer signoff
   are appended later, never recomputed

Design Principles:
- Core fields are written once and never modified
- Appended fields can be set, not overwritten
- Same inputs produce the same record (the audit id is derived, not random)
"""

import hashlib
import json
import logging
import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from pydantic import BaseModel

from .adapter import load_profile
from .contracts import (
    ApplicantProfile,
    AuditRecord,
    EligibilityResult,
    EvidenceGap,
    ReportPaths,
    ReviewerSignoff,
    RiskAssessment,
)
from .errors import (
    AuditRecordExistsError,
    AuditRecordImmutableError,
    AuditRecordNotFoundError,
    ProfileValidationError,
)

logger = logging.getLogger(__name__)

# Namespace for deriving audit ids from (assessment id, checksum)
AUDIT_NAMESPACE = uuid.UUID("6f1c7f0e-5a52-4c1e-9a3d-2f7b8c4e9d10")


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def canonical_json(data: Any) -> str:
    """Deterministic serialization: sorted keys at every level, compact separators."""
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=_json_default,
    )


def canonical_checksum(data: Any) -> str:
    return hashlib.sha256(canonical_json(data).encode("utf-8")).hexdigest()


def compute_profile_checksum(profile: Union[ApplicantProfile, Mapping[str, Any]]) -> str:
    """
    Checksum of the canonicalized profile.

    Dicts are validated first so a dict and the equivalent model hash the same.
    """
    return canonical_checksum(load_profile(profile).model_dump(mode="json"))


def derive_audit_id(assessment_id: str, profile_checksum: str) -> str:
    return str(uuid.uuid5(AUDIT_NAMESPACE, f"{assessment_id}:{profile_checksum}"))


def bind(
    assessment_id: str,
    tenant_id: str,
    profile: Union[ApplicantProfile, Mapping[str, Any]],
    policy_snapshot_id: str,
    ruleset_versions: Mapping[str, str],
    eligibility_outputs: Mapping[str, Union[EligibilityResult, Mapping[str, Any]]],
    risk_outputs: Mapping[str, Union[RiskAssessment, Mapping[str, Any]]],
    evidence_gaps: Iterable[Union[EvidenceGap, Mapping[str, Any]]],
    created_at: Optional[datetime] = None,
) -> AuditRecord:
    """
    Build the immutable audit record for a completed assessment.

    Raises:
        ProfileValidationError: malformed profile, or profile belongs to another tenant
    """
    profile = load_profile(profile)
    if profile.tenant_id != tenant_id:
        raise ProfileValidationError(
            f"Profile {profile.id} belongs to tenant {profile.tenant_id}, not {tenant_id}",
            profile_id=profile.id,
        )

    checksum = compute_profile_checksum(profile)

    # Nested results are copied so the record shares no state with the caller
    record = AuditRecord(
        audit_id=derive_audit_id(assessment_id, checksum),
        assessment_id=assessment_id,
        tenant_id=tenant_id,
        profile_checksum=checksum,
        policy_snapshot_id=policy_snapshot_id,
        ruleset_versions=dict(ruleset_versions),
        eligibility_outputs=dict(eligibility_outputs),
        risk_outputs=dict(risk_outputs),
        evidence_gaps=list(evidence_gaps),
        created_at=created_at,
    )
    return record.model_copy(deep=True)


class AuditLedger:
    """
    Audit records keyed by assessment id.

    Stands in for the storage collaborator: callers persist what it returns.
    The ledger holds its own deep copies and hands out deep copies, so a
    caller mutating a returned record never reaches the stored one.
    Records are replaced only by appending report paths or a signoff.
    """

    def __init__(self):
        self._records: Dict[str, AuditRecord] = {}

    def __contains__(self, assessment_id: str) -> bool:
        return assessment_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def _store(self, audit_record: AuditRecord) -> AuditRecord:
        self._records[audit_record.assessment_id] = audit_record.model_copy(deep=True)
        return audit_record.model_copy(deep=True)

    def _stored(self, assessment_id: str) -> AuditRecord:
        record = self._records.get(assessment_id)
        if record is None:
            raise AuditRecordNotFoundError(assessment_id)
        return record

    def record(self, audit_record: AuditRecord) -> AuditRecord:
        """Store a freshly bound record. Each assessment is recorded once."""
        if audit_record.assessment_id in self._records:
            raise AuditRecordExistsError(audit_record.assessment_id)
        stored = self._store(audit_record)
        logger.info(f"Recorded audit {audit_record.audit_id} for assessment {audit_record.assessment_id}")
        return stored

    def find(self, assessment_id: str) -> Optional[AuditRecord]:
        record = self._records.get(assessment_id)
        return record.model_copy(deep=True) if record is not None else None

    def get(self, assessment_id: str) -> AuditRecord:
        return self._stored(assessment_id).model_copy(deep=True)

    def attach_report_paths(
        self,
        assessment_id: str,
        html: Optional[str] = None,
        pdf: Optional[str] = None
    ) -> AuditRecord:
        """
        Append report file locations.

        A path already present may be re-sent unchanged but not replaced.
        """
        if html is None and pdf is None:
            raise ValueError("At least one report path is required")

        record = self._stored(assessment_id)
        current = record.report_paths
        for name, value in (("html", html), ("pdf", pdf)):
            existing = getattr(current, name)
            if value is not None and existing is not None and existing != value:
                raise AuditRecordImmutableError(assessment_id, f"report_paths.{name}")

        paths = ReportPaths(html=html or current.html, pdf=pdf or current.pdf)
        updated = self._store(record.model_copy(update={"report_paths": paths}))
        logger.info(f"Attached report paths to assessment {assessment_id}")
        return updated

    def attach_signoff(
        self,
        assessment_id: str,
        reviewer_name: str,
        mara_number: str,
        signed_at: datetime,
        comments: Optional[str] = None
    ) -> AuditRecord:
        """Append the reviewer signoff. A record is signed once."""
        record = self._stored(assessment_id)
        if record.reviewer_signoff is not None:
            raise AuditRecordImmutableError(assessment_id, "reviewer_signoff")

        signoff = ReviewerSignoff(
            reviewer_name=reviewer_name,
            mara_number=mara_number,
            signed_at=signed_at,
            comments=comments,
        )
        updated = self._store(record.model_copy(update={"reviewer_signoff": signoff}))
        logger.info(f"Reviewer {reviewer_name} signed off assessment {assessment_id}")
        return updated

    def verify(self, assessment_id: str, profile: Union[ApplicantProfile, Mapping[str, Any]]) -> bool:
        """True if ``profile`` is the snapshot the record was bound to."""
        return self._stored(assessment_id).profile_checksum == compute_profile_checksum(profile)
