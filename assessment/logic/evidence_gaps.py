"""
Evidence Gap Deriver

Builds the prioritized remediation list for an assessment from three sources,
in derivation order:
1. Hard eligibility failures (missing_criteria)
2. Selected risk factors
3. The profile's document checklist

The list is then deduplicated by item label (first occurrence wins) and
stably sorted by priority, so gaps of equal priority keep derivation order.
"""

from typing import Any, Iterable, List, Mapping, Union

from .adapter import load_eligibility_result, load_profile, load_risk_assessment
from .constants import (
    CRITERION_CODE_ALIASES,
    CRITERION_REMEDIATION,
    DOCUMENT_REMEDIATION,
    PRIORITY_ORDER,
    RISK_REMEDIATION,
    Priority,
)
from .contracts import ApplicantProfile, EligibilityResult, EvidenceGap, RiskAssessment


def _gap(entry) -> EvidenceGap:
    priority, item, rationale = entry
    return EvidenceGap(priority=priority, item=item, rationale=rationale)


def gaps_from_eligibility(eligibility: EligibilityResult) -> List[EvidenceGap]:
    gaps: List[EvidenceGap] = []
    for code in eligibility.missing_criteria:
        code = CRITERION_CODE_ALIASES.get(code, code)
        if code in CRITERION_REMEDIATION:
            gaps.append(_gap(CRITERION_REMEDIATION[code]))
    return gaps


def gaps_from_risk(risk: RiskAssessment) -> List[EvidenceGap]:
    codes = {factor.code for factor in risk.risk_factors}
    return [_gap(entry) for code, entry in RISK_REMEDIATION.items() if code in codes]


def gaps_from_documents(profile: ApplicantProfile) -> List[EvidenceGap]:
    documents = profile.data.documents
    return [
        _gap(entry)
        for name, entry in DOCUMENT_REMEDIATION.items()
        if not getattr(documents, name)
    ]


def dedupe_by_item(gaps: Iterable[EvidenceGap]) -> List[EvidenceGap]:
    """Keep the first gap for each item label."""
    seen = set()
    unique: List[EvidenceGap] = []
    for gap in gaps:
        if gap.item in seen:
            continue
        seen.add(gap.item)
        unique.append(gap)
    return unique


def sort_by_priority(gaps: List[EvidenceGap]) -> List[EvidenceGap]:
    """High before Medium before Low. sorted() is stable, so ties keep their order."""
    return sorted(gaps, key=lambda gap: PRIORITY_ORDER[Priority(gap.priority)], reverse=True)


def merge_gaps(*gap_lists: Iterable[EvidenceGap]) -> List[EvidenceGap]:
    """Combine several gap lists under the same dedupe + sort rules."""
    combined: List[EvidenceGap] = []
    for gaps in gap_lists:
        combined.extend(gaps)
    return sort_by_priority(dedupe_by_item(combined))


def derive(
    profile: Union[ApplicantProfile, Mapping[str, Any]],
    eligibility: Union[EligibilityResult, Mapping[str, Any]],
    risk: Union[RiskAssessment, Mapping[str, Any]]
) -> List[EvidenceGap]:
    """
    Derive the remediation list for one eligibility/risk pair.

    Returns:
        Unique-by-item gaps sorted High -> Medium -> Low
    """
    profile = load_profile(profile)
    return merge_gaps(
        gaps_from_eligibility(load_eligibility_result(eligibility)),
        gaps_from_risk(load_risk_assessment(risk)),
        gaps_from_documents(profile),
    )
