"""
Policy Rulesets

Factory functions for the published skilled-visa rulesets (subclass 189 and
190) and the policy snapshot they are pinned to. Rulesets are data: callers
may also load their own from dicts via ``load_ruleset``.
"""

from datetime import date
from typing import List, Optional

from .adapter import load_ruleset
from .constants import STANDARD_POLICY_REFERENCES, Severity
from .contracts import (
    AgeBetweenCriterion,
    AgeBetweenParams,
    EnglishMinimumCriterion,
    EnglishMinimumParams,
    PointsMinimumCriterion,
    PointsMinimumParams,
    PolicyReference,
    PolicySnapshot,
    Ruleset,
    SkillsAssessmentValidCriterion,
)

__all__ = [
    "create_policy_snapshot",
    "create_189_ruleset",
    "create_190_ruleset",
    "load_ruleset",
]


def create_policy_snapshot(snapshot_id: str, effective_date: date) -> PolicySnapshot:
    """Snapshot carrying the standard regulation references."""
    return PolicySnapshot(
        id=snapshot_id,
        effective_date=effective_date,
        references=[PolicyReference(**ref) for ref in STANDARD_POLICY_REFERENCES],
    )


def _common_criteria() -> List:
    # Shared by 189 and 190; only the points floor differs
    return [
        AgeBetweenCriterion(
            code="AGE_RANGE",
            description="Must be at least 18 and under 45 years old",
            evaluate="age_between",
            params=AgeBetweenParams(min=18, max=45),
            severity=Severity.HARD,
        ),
        SkillsAssessmentValidCriterion(
            code="SKILLS_ASSESSMENT_VALID",
            description="Must have a positive skills assessment that has not expired",
            evaluate="skills_assessment_valid",
            severity=Severity.HARD,
        ),
        EnglishMinimumCriterion(
            code="ENGLISH_MINIMUM",
            description="Must have at least competent English",
            evaluate="english_minimum",
            params=EnglishMinimumParams(level="competent"),
            severity=Severity.HARD,
        ),
    ]


def create_189_ruleset(version: str, policy_snapshot_id: str = "", ruleset_id: Optional[str] = None) -> Ruleset:
    """Skilled Independent visa."""
    return Ruleset(
        id=ruleset_id or f"189-{version}",
        policy_snapshot_id=policy_snapshot_id,
        visa="189",
        version=version,
        criteria=_common_criteria() + [
            PointsMinimumCriterion(
                code="POINTS_MINIMUM",
                description="Must score at least 65 points",
                evaluate="points_minimum",
                params=PointsMinimumParams(minimum=65),
                severity=Severity.HARD,
            ),
        ],
        policy_references=[
            PolicyReference(type="regulation", label="Subclass 189", ref="Schedule 2, Part 189"),
        ],
    )


def create_190_ruleset(version: str, policy_snapshot_id: str = "", ruleset_id: Optional[str] = None) -> Ruleset:
    """Skilled Nominated visa. The points floor includes nomination points."""
    return Ruleset(
        id=ruleset_id or f"190-{version}",
        policy_snapshot_id=policy_snapshot_id,
        visa="190",
        version=version,
        criteria=_common_criteria() + [
            PointsMinimumCriterion(
                code="POINTS_MINIMUM",
                description="Must score at least 60 points (including nomination)",
                evaluate="points_minimum",
                params=PointsMinimumParams(minimum=60),
                severity=Severity.HARD,
            ),
        ],
        policy_references=[
            PolicyReference(type="regulation", label="Subclass 190", ref="Schedule 2, Part 190"),
        ],
    )
