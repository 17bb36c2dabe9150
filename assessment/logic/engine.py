"""
Assessment Engine

Main orchestrator that combines the eligibility evaluator, risk analyzer,
evidence gap deriver and audit binder into a single pipeline.
This is the primary entry point for running an assessment.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..config import DEFAULT_SETTINGS, RiskSettings
from . import eligibility as eligibility_evaluator
from . import evidence_gaps as evidence_gap_deriver
from . import risk_analyzer
from .adapter import load_profile, load_ruleset
from .audit import AuditLedger, bind
from .contracts import ApplicantProfile, AssessmentOutcome, EligibilityResult, EvidenceGap, Ruleset
from .dates import Instant
from .errors import RulesetConfigurationError

logger = logging.getLogger(__name__)


class AssessmentEngine:
    """
    Runs one assessment over one or more visa rulesets.

    Pipeline flow:
    1. Validation - Load profile and rulesets, check they share one policy snapshot
    2. Eligibility - Evaluate each ruleset independently
    3. Risk - Run the risk battery once for the profile
    4. Evidence Gaps - Derive per visa, then merge
    5. Audit - Bind the record and hand it to the ledger
    """

    def __init__(self, settings: Optional[RiskSettings] = None, ledger: Optional[AuditLedger] = None):
        """
        Initialize the assessment engine.

        Args:
            settings: Risk thresholds. Defaults apply when omitted.
            ledger: Optional ledger that receives every bound audit record
        """
        self.settings = settings or DEFAULT_SETTINGS
        self.ledger = ledger

    def _load_rulesets(
        self,
        rulesets: Sequence[Union[Ruleset, Mapping[str, Any]]],
        policy_snapshot_id: str
    ) -> List[Ruleset]:
        if not rulesets:
            raise RulesetConfigurationError("At least one ruleset is required")

        loaded: List[Ruleset] = []
        visas = set()
        for raw in rulesets:
            ruleset = load_ruleset(raw)
            if ruleset.visa in visas:
                raise RulesetConfigurationError(
                    f"Ruleset for visa {ruleset.visa} supplied more than once",
                    ruleset_id=ruleset.id,
                )
            # An unpinned ruleset inherits the assessment's snapshot
            if ruleset.policy_snapshot_id and ruleset.policy_snapshot_id != policy_snapshot_id:
                raise RulesetConfigurationError(
                    f"Ruleset {ruleset.id or ruleset.visa} is pinned to policy snapshot "
                    f"{ruleset.policy_snapshot_id}, not {policy_snapshot_id}",
                    ruleset_id=ruleset.id,
                )
            visas.add(ruleset.visa)
            loaded.append(ruleset)
        return loaded

    def run(
        self,
        assessment_id: str,
        profile: Union[ApplicantProfile, Mapping[str, Any]],
        rulesets: Sequence[Union[Ruleset, Mapping[str, Any]]],
        policy_snapshot_id: str,
        now: Instant
    ) -> AssessmentOutcome:
        """
        Run a full assessment.

        Args:
            assessment_id: Caller-assigned id, also the audit ledger key
            profile: Applicant profile snapshot
            rulesets: One ruleset per visa being considered
            policy_snapshot_id: Snapshot all rulesets must be pinned to
            now: Evaluation instant

        Returns:
            AssessmentOutcome with per-visa eligibility, risk, merged gaps
            and the bound audit record

        Raises:
            ProfileValidationError: malformed profile
            RulesetConfigurationError: invalid, duplicated or mismatched rulesets
            AuditRecordExistsError: assessment id already recorded in the ledger
        """
        profile = load_profile(profile)
        logger.info(f"🚀 Starting assessment {assessment_id} for profile {profile.id} (v{profile.profile_version})")

        loaded = self._load_rulesets(rulesets, policy_snapshot_id)
        logger.info(f"📋 Rulesets: {[f'{r.visa}@{r.version}' for r in loaded]}")

        eligibility: Dict[str, EligibilityResult] = {}
        for ruleset in loaded:
            result = eligibility_evaluator.evaluate(profile, ruleset, now)
            eligibility[ruleset.visa] = result
            logger.info(f"✅ Subclass {ruleset.visa}: {result.eligibility_status}")

        risk = risk_analyzer.assess(profile, now, self.settings)
        logger.info(f"📊 Risk level {risk.risk_level} ({len(risk.risk_factors)} factors)")

        per_visa_gaps: List[List[EvidenceGap]] = [
            evidence_gap_deriver.derive(profile, eligibility[ruleset.visa], risk)
            for ruleset in loaded
        ]
        gaps = evidence_gap_deriver.merge_gaps(*per_visa_gaps)
        logger.info(f"📎 Evidence gaps: {len(gaps)}")

        record = bind(
            assessment_id=assessment_id,
            tenant_id=profile.tenant_id,
            profile=profile,
            policy_snapshot_id=policy_snapshot_id,
            ruleset_versions={r.visa: r.version for r in loaded},
            eligibility_outputs=eligibility,
            risk_outputs={r.visa: risk for r in loaded},
            evidence_gaps=gaps,
            created_at=now if isinstance(now, datetime) else None,
        )
        if self.ledger is not None:
            self.ledger.record(record)

        logger.info(f"✨ Assessment {assessment_id} complete (audit {record.audit_id})")

        return AssessmentOutcome(
            assessment_id=assessment_id,
            eligibility=eligibility,
            risk=risk,
            evidence_gaps=gaps,
            audit_record=record,
        )


# Convenience function for simple usage
def run_assessment(
    assessment_id: str,
    profile: Union[ApplicantProfile, Mapping[str, Any]],
    rulesets: Sequence[Union[Ruleset, Mapping[str, Any]]],
    policy_snapshot_id: str,
    now: Instant,
    settings: Optional[RiskSettings] = None,
    ledger: Optional[AuditLedger] = None
) -> AssessmentOutcome:
    """
    Convenience function to run an assessment.

    Returns:
        AssessmentOutcome
    """
    engine = AssessmentEngine(settings=settings, ledger=ledger)
    return engine.run(assessment_id, profile, rulesets, policy_snapshot_id, now)
