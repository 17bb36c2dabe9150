"""
Tests for published rulesets, policy snapshots and ruleset loading.
"""

from datetime import date

import pytest

from assessment.logic.errors import RulesetConfigurationError, UnknownEvaluatorError
from assessment.logic.policy import (
    create_189_ruleset,
    create_190_ruleset,
    create_policy_snapshot,
    load_ruleset,
)


def test_189_ruleset():
    ruleset = create_189_ruleset("2025.07")

    assert ruleset.id == "189-2025.07"
    assert ruleset.visa == "189"
    assert [c.code for c in ruleset.criteria] == [
        "AGE_RANGE",
        "SKILLS_ASSESSMENT_VALID",
        "ENGLISH_MINIMUM",
        "POINTS_MINIMUM",
    ]
    assert all(c.severity == "hard" for c in ruleset.criteria)
    assert ruleset.criteria[0].params.min == 18
    assert ruleset.criteria[0].params.max == 45
    assert ruleset.criteria[-1].params.minimum == 65
    assert ruleset.policy_references[0].ref == "Schedule 2, Part 189"


def test_190_ruleset_points_floor():
    ruleset = create_190_ruleset("2025.07", policy_snapshot_id="policy-2025-07")

    assert ruleset.policy_snapshot_id == "policy-2025-07"
    assert ruleset.criteria[-1].params.minimum == 60
    assert ruleset.criteria[-1].description == "Must score at least 60 points (including nomination)"


def test_policy_snapshot_references():
    snapshot = create_policy_snapshot("policy-2025-07", date(2025, 7, 1))

    assert snapshot.effective_date == date(2025, 7, 1)
    assert [ref.label for ref in snapshot.references] == ["Migration Regulations 1994", "Points Test"]


def test_load_ruleset_round_trips_published_ruleset():
    published = create_189_ruleset("2025.07")

    assert load_ruleset(published.model_dump()) == published


def test_load_ruleset_resolves_legacy_evaluators():
    ruleset = load_ruleset({
        "visa": "189",
        "version": "2024.07",
        "criteria": [
            {"code": "SKILLS_ASSESSMENT", "evaluate": "skills_assessment_positive_and_not_expired",
             "severity": "hard"},
            {"code": "POINTS_THRESHOLD", "evaluate": "points_at_least",
             "params": {"minimum": 65}, "severity": "hard"},
        ],
    })

    assert [c.evaluate for c in ruleset.criteria] == ["skills_assessment_valid", "points_minimum"]


def test_load_ruleset_rejects_unknown_evaluator():
    with pytest.raises(UnknownEvaluatorError) as exc_info:
        load_ruleset({
            "id": "189-bad",
            "visa": "189",
            "version": "bad",
            "criteria": [{"code": "X", "evaluate": "nationality_in", "severity": "hard"}],
        })

    assert exc_info.value.ruleset_id == "189-bad"
    assert str(exc_info.value) == "Unknown evaluator: nationality_in (criterion X)"


@pytest.mark.parametrize("criterion", [
    {"code": "AGE_RANGE", "evaluate": "age_between", "params": {"min": 45, "max": 18}, "severity": "hard"},
    {"code": "POINTS_MINIMUM", "evaluate": "points_minimum", "params": {}, "severity": "hard"},
    {"code": "POINTS_MINIMUM", "evaluate": "points_minimum", "params": {"minimum": 65}, "severity": "fatal"},
    {"code": "", "evaluate": "points_minimum", "params": {"minimum": 65}, "severity": "hard"},
])
def test_load_ruleset_rejects_bad_criteria(criterion):
    with pytest.raises(RulesetConfigurationError) as exc_info:
        load_ruleset({"visa": "189", "version": "bad", "criteria": [criterion]})

    assert not isinstance(exc_info.value, UnknownEvaluatorError)


def test_load_ruleset_rejects_non_mapping():
    with pytest.raises(RulesetConfigurationError):
        load_ruleset(["not", "a", "ruleset"])
