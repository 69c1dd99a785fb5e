"""Tests for question visibility, answer validation and progress."""
from __future__ import annotations

import pytest

from services.evaluation_service import (
    compute_progress,
    evaluate,
    is_question_visible,
    validate_answer,
    validate_responses,
    visible_questions,
)


def question(qid: str, qtype: str = "short-text", required: bool = False, **extra) -> dict:
    return {"id": qid, "type": qtype, "question": f"Question {qid}", "required": required, **extra}


def assessment_with(*questions: dict) -> dict:
    return {"id": "a1", "job_id": "1", "sections": [{"id": "s1", "title": "Main", "questions": list(questions)}]}


REMOTE = assessment_with(
    question("q1", "single-choice", required=True, options=["Yes", "No"]),
    question(
        "q2",
        conditional_logic={"depends_on": "q1", "condition": "equals", "value": "Yes"},
    ),
)


def test_conditional_question_follows_dependency() -> None:
    dependent = REMOTE["sections"][0]["questions"][1]

    assert not is_question_visible(dependent, {})
    assert not is_question_visible(dependent, {"q1": ""})
    assert not is_question_visible(dependent, {"q1": "No"})
    assert is_question_visible(dependent, {"q1": "Yes"})


def test_toggling_dependency_updates_progress() -> None:
    responses = {"q1": "Yes"}
    assert [q["id"] for q in visible_questions(REMOTE, responses)] == ["q1", "q2"]
    assert compute_progress(REMOTE, responses) == pytest.approx(0.5)

    responses["q2"] = "Home office"
    assert compute_progress(REMOTE, responses) == pytest.approx(1.0)

    responses["q1"] = "No"
    assert [q["id"] for q in visible_questions(REMOTE, responses)] == ["q1"]
    assert compute_progress(REMOTE, responses) == pytest.approx(1.0)


def test_not_equals_and_unknown_conditions() -> None:
    not_yes = question("q2", conditional_logic={"depends_on": "q1", "condition": "not_equals", "value": "Yes"})
    unknown = question("q3", conditional_logic={"depends_on": "q1", "condition": "contains", "value": "Y"})

    assert is_question_visible(not_yes, {"q1": "No"})
    assert not is_question_visible(not_yes, {"q1": "Yes"})
    assert not is_question_visible(not_yes, {})
    assert is_question_visible(unknown, {"q1": "anything"})
    assert not is_question_visible(unknown, {})


def test_numeric_range_and_format() -> None:
    rating = question("q5", "numeric", required=True, validation={"min": 1, "max": 10})

    assert validate_answer(rating, "11").code == "max"
    assert validate_answer(rating, "0").code == "min"
    assert validate_answer(rating, "abc").code == "format"
    assert validate_answer(rating, "nan").code == "format"
    assert validate_answer(rating, "5") is None
    assert validate_answer(rating, " 7.5 ") is None
    assert validate_answer(rating, "").code == "required"


def test_text_length_rules() -> None:
    story = question("q3", "long-text", validation={"min_length": 5, "max_length": 10})

    assert validate_answer(story, "abc").code == "min_length"
    assert validate_answer(story, "a" * 11).code == "max_length"
    assert validate_answer(story, "just right") is None
    # Optional and empty: nothing to check
    assert validate_answer(story, "") is None


def test_choice_questions_only_check_presence() -> None:
    techs = question("q2", "multi-choice", required=True, options=["Python", "Java"])

    assert validate_answer(techs, []).code == "required"
    assert validate_answer(techs, ["Python", "Java"]) is None


def test_hidden_questions_are_not_validated() -> None:
    schema = assessment_with(
        question("q1", "single-choice", required=True, options=["Yes", "No"]),
        question(
            "q2", required=True,
            conditional_logic={"depends_on": "q1", "condition": "equals", "value": "Yes"},
        ),
    )

    assert validate_responses(schema, {"q1": "No"}) == {}
    assert set(validate_responses(schema, {"q1": "Yes"})) == {"q2"}


def test_evaluate_reports_every_error() -> None:
    schema = assessment_with(
        question("q1", "short-text", required=True),
        question("q2", "numeric", validation={"max": 3}),
        question("q3", "long-text", validation={"min_length": 10}),
    )

    result = evaluate(schema, {"q2": "4", "q3": "short"})

    assert result.visible == ["q1", "q2", "q3"]
    assert {qid: issue.code for qid, issue in result.errors.items()} == {
        "q1": "required",
        "q2": "max",
        "q3": "min_length",
    }
    assert result.progress == pytest.approx(2 / 3)
    assert not result.is_valid


def test_progress_with_nothing_visible() -> None:
    assert compute_progress({"sections": []}, {}) == 0.0


def test_file_upload_only_checks_presence() -> None:
    upload = question("cv", "file-upload", required=True, validation={"min_length": 500})
    schema = assessment_with(upload, question("q2"))

    assert validate_answer(upload, None).code == "required"
    assert validate_answer(upload, "").code == "required"
    assert validate_answer(upload, "cv.pdf") is None
    assert validate_responses(schema, {"cv": "cv.pdf"}) == {}
    assert compute_progress(schema, {"cv": "cv.pdf"}) == pytest.approx(0.5)
