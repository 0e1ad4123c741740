"""Tests for stage baselines and the question/objection augmenter."""

import pytest

from compass.contexts.discovery.augmenter import augment_stage, build_overlay, merge, Overlay
from compass.contexts.discovery.exceptions import InvalidStageStructureError, StageNotFoundError
from compass.contexts.discovery.overlay_tables import (
    COMBINED_QUESTIONS,
    LOB_CATEGORIES,
    LOB_QUESTIONS,
    PROJECT_TYPE_QUESTIONS,
    SPECIALIZED_CATEGORY,
    TECHNOLOGY_CATEGORY,
)
from compass.contexts.discovery.stages import Objection, Stage, StageLibrary
from compass.contexts.targeting.selection_context import SelectionContext


def _baseline():
    return Stage.from_dict(
        "discovery",
        {
            "title": "Discovery",
            "questions": {
                "Pain & Impact": ["Where does work pile up?"],
                "Tech & Data": ["Which systems are involved?"],
            },
            "objections": [{"challenge": "We're not ready.", "response": "Start small."}],
        },
    )


@pytest.mark.unit
def test_empty_context_returns_baseline():
    """Test an empty context adds nothing."""
    baseline = _baseline()
    augmented = augment_stage(baseline, SelectionContext())

    assert augmented.questions == baseline.questions
    assert augmented.objections == baseline.objections
    assert augmented.augmented_categories == []
    assert augmented.augmented_objection_count == 0
    assert not augmented.is_augmented


@pytest.mark.unit
def test_finance_rpa_adds_lob_and_technology_categories():
    """Test lob=finance with rpa adds the finance and technology categories once each."""
    context = SelectionContext(lob="finance", project_types=("rpa",))
    augmented = augment_stage(_baseline(), context)

    finance_category = LOB_CATEGORIES["finance"]
    assert augmented.augmented_categories.count(finance_category) == 1
    assert augmented.augmented_categories.count(TECHNOLOGY_CATEGORY) == 1
    assert augmented.questions[finance_category] == LOB_QUESTIONS["finance"]
    assert augmented.questions[TECHNOLOGY_CATEGORY] == PROJECT_TYPE_QUESTIONS["rpa"]
    assert augmented.questions[SPECIALIZED_CATEGORY] == COMBINED_QUESTIONS["finance-rpa"]

    # Baseline categories come first, overlay categories after
    assert list(augmented.questions)[:2] == ["Pain & Impact", "Tech & Data"]


@pytest.mark.unit
def test_project_type_questions_follow_selection_order():
    """Test technology questions are grouped by project type in selection order."""
    context = SelectionContext(project_types=("idp", "rpa"))
    questions = build_overlay(context).questions[TECHNOLOGY_CATEGORY]
    assert questions == PROJECT_TYPE_QUESTIONS["idp"] + PROJECT_TYPE_QUESTIONS["rpa"]


@pytest.mark.unit
def test_missing_combination_contributes_nothing():
    """Test a LOB/type pair without combined questions has no specialized category."""
    context = SelectionContext(lob="legal", project_types=("maestro",))
    overlay = build_overlay(context)
    assert SPECIALIZED_CATEGORY not in overlay.questions
    assert LOB_CATEGORIES["legal"] in overlay.questions


@pytest.mark.unit
def test_unknown_lob_and_type_contribute_nothing():
    """Test values absent from every table leave the baseline unchanged."""
    context = SelectionContext(lob="capital-markets", project_types=("quantum",))
    overlay = build_overlay(context)
    assert overlay.is_empty

    augmented = augment_stage(_baseline(), context)
    assert augmented.questions == _baseline().questions


@pytest.mark.unit
def test_augmentation_is_idempotent():
    """Test repeated calls with the same context give the same output."""
    baseline = _baseline()
    context = SelectionContext(lob="hr", project_types=("rpa", "idp"))
    first = augment_stage(baseline, context)
    second = augment_stage(baseline, context)
    assert first.to_dict() == second.to_dict()


@pytest.mark.unit
def test_baseline_is_not_mutated():
    """Test augmentation never changes the baseline stage."""
    baseline = _baseline()
    before = baseline.to_dict()
    augment_stage(baseline, SelectionContext(lob="finance", project_types=("rpa",)))
    assert baseline.to_dict() == before


@pytest.mark.unit
def test_objections_appended_without_repeats():
    """Test LOB then project-type objections follow the baseline, deduplicated by challenge."""
    context = SelectionContext(lob="finance", project_types=("rpa",))
    overlay = build_overlay(context)
    duplicate = Objection("We're not ready.", "A different answer.")
    overlay.objections.append(duplicate)

    augmented = merge(_baseline(), overlay)
    challenges = [objection.challenge for objection in augmented.objections]
    assert challenges[0] == "We're not ready."
    assert challenges.count("We're not ready.") == 1
    assert augmented.augmented_objection_count == 2


@pytest.mark.unit
def test_colliding_category_extends_baseline():
    """Test an overlay category named like a baseline category only adds new questions."""
    overlay = Overlay(questions={"Tech & Data": ["Which systems are involved?", "Any APIs?"]})
    augmented = merge(_baseline(), overlay)
    assert augmented.questions["Tech & Data"] == ["Which systems are involved?", "Any APIs?"]
    assert augmented.augmented_categories == ["Tech & Data"]


@pytest.mark.unit
def test_objection_requires_response():
    """Test an objection without a response is rejected."""
    with pytest.raises(InvalidStageStructureError):
        Objection("Too expensive.", "")
    with pytest.raises(InvalidStageStructureError):
        Stage.from_dict(
            "proposal", {"title": "Proposal", "objections": [{"challenge": "Too expensive."}]}
        )


@pytest.mark.unit
def test_objection_accepts_short_keys():
    """Test objections read the q/a spelling."""
    objection = Objection.from_dict({"q": "Why now?", "a": "Costs grow every quarter."})
    assert objection.to_dict() == {"challenge": "Why now?", "response": "Costs grow every quarter."}


@pytest.mark.unit
def test_stage_library_navigation():
    """Test stage order, next/previous, and unknown ids."""
    library = StageLibrary.from_dict(
        {
            "stages": {
                "discovery": {"title": "Discovery"},
                "proposal": {"title": "Proposal"},
            }
        }
    )
    assert library.ids() == ["discovery", "proposal"]
    assert library.first_id() == "discovery"
    assert library.next_id("discovery") == "proposal"
    assert library.next_id("proposal") is None
    assert library.previous_id("discovery") is None

    with pytest.raises(StageNotFoundError):
        library.get("negotiation")


@pytest.mark.unit
def test_stage_library_hands_out_copies():
    """Test edits to a returned stage don't reach the stored baseline."""
    library = StageLibrary([_baseline()])
    stage = library.get("discovery")
    stage.questions["Pain & Impact"].append("Injected?")
    assert library.get("discovery").questions["Pain & Impact"] == ["Where does work pile up?"]


@pytest.mark.unit
def test_stage_library_rejects_duplicate_ids():
    """Test duplicate stage ids are rejected."""
    with pytest.raises(InvalidStageStructureError):
        StageLibrary.from_dict([{"id": "a", "title": "A"}, {"id": "a", "title": "A again"}])
