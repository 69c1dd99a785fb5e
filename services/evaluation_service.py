"""
Evaluation service: visibility, validation and progress for an assessment being taken.

Everything here is a pure function of (assessment schema, responses). Nothing is stored.

Conditional logic supports exactly one dependency per question. A question whose
dependency is itself hidden is still judged on the dependency's recorded answer;
rules are not chained.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

from models.enums import Condition, QuestionType, TEXT_TYPES


@dataclass(frozen=True)
class ValidationIssue:
    question_id: str
    code: str  # required, min_length, max_length, format, min, max
    message: str


@dataclass
class Evaluation:
    visible: List[str] = field(default_factory=list)
    errors: Dict[str, ValidationIssue] = field(default_factory=dict)
    progress: float = 0.0

    @property
    def is_valid(self) -> bool:
        return not self.errors


def iter_questions(assessment: Mapping[str, Any]) -> Iterator[Dict[str, Any]]:
    """All questions in section order, then question order."""
    for section in assessment.get("sections") or []:
        for question in section.get("questions") or []:
            yield question


def is_answered(value: Any) -> bool:
    """None, empty strings and empty lists count as no answer."""
    if value is None:
        return False
    if isinstance(value, (str, list, tuple, set)):
        return len(value) > 0
    return True


def is_question_visible(question: Mapping[str, Any], responses: Mapping[str, Any]) -> bool:
    logic = question.get("conditional_logic")
    if not logic:
        return True

    dependent = responses.get(logic.get("depends_on"))
    if not is_answered(dependent):
        return False

    condition = logic.get("condition")
    if condition == Condition.EQUALS.value:
        return dependent == logic.get("value")
    if condition == Condition.NOT_EQUALS.value:
        return dependent != logic.get("value")
    # Unknown conditions fail open
    return True


def visible_questions(assessment: Mapping[str, Any], responses: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return [q for q in iter_questions(assessment) if is_question_visible(q, responses)]


def _parse_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    if math.isnan(number):
        return None
    return number


def validate_answer(question: Mapping[str, Any], value: Any) -> Optional[ValidationIssue]:
    """
    First problem with a single answer, or None.
    Choice and file-upload questions are only checked for presence.
    """
    qid = question.get("id")
    if question.get("required") and not is_answered(value):
        return ValidationIssue(qid, "required", "This field is required")
    if not is_answered(value):
        return None

    rules = question.get("validation") or {}
    qtype = question.get("type")

    if qtype in TEXT_TYPES:
        length = len(str(value))
        min_length = rules.get("min_length")
        max_length = rules.get("max_length")
        if min_length and length < min_length:
            return ValidationIssue(qid, "min_length", f"Minimum {min_length} characters required")
        if max_length and length > max_length:
            return ValidationIssue(qid, "max_length", f"Maximum {max_length} characters allowed")

    elif qtype == QuestionType.NUMERIC.value:
        number = _parse_number(value)
        if number is None:
            return ValidationIssue(qid, "format", "Please enter a valid number")
        if rules.get("min") is not None and number < rules["min"]:
            return ValidationIssue(qid, "min", f"Minimum value is {rules['min']}")
        if rules.get("max") is not None and number > rules["max"]:
            return ValidationIssue(qid, "max", f"Maximum value is {rules['max']}")

    return None


def validate_responses(assessment: Mapping[str, Any], responses: Mapping[str, Any]) -> Dict[str, ValidationIssue]:
    """Validate every visible question. Hidden questions are never checked."""
    errors = {}
    for question in visible_questions(assessment, responses):
        issue = validate_answer(question, responses.get(question.get("id")))
        if issue:
            errors[issue.question_id] = issue
    return errors


def compute_progress(assessment: Mapping[str, Any], responses: Mapping[str, Any]) -> float:
    """Answered visible questions over visible questions, 0.0 when nothing is visible."""
    visible = visible_questions(assessment, responses)
    if not visible:
        return 0.0
    answered = sum(1 for q in visible if is_answered(responses.get(q.get("id"))))
    return answered / len(visible)


def evaluate(assessment: Mapping[str, Any], responses: Mapping[str, Any]) -> Evaluation:
    visible = visible_questions(assessment, responses)
    answered = sum(1 for q in visible if is_answered(responses.get(q.get("id"))))
    return Evaluation(
        visible=[q.get("id") for q in visible],
        errors=validate_responses(assessment, responses),
        progress=answered / len(visible) if visible else 0.0,
    )
