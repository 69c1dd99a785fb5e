"""
Assessment persistence: one assessment per job, plus immutable response submissions.
"""
import copy
import logging
from typing import Any, Dict, List, Mapping, Optional

from models.enums import CHOICE_TYPES, QuestionType, values_of
from services.common import new_id, now_iso, parse_iso
from services.errors import AssessmentValidationError, NotFoundError, ValidationError
from services.evaluation_service import iter_questions, validate_responses
from services.store import DataStore

logger = logging.getLogger(__name__)

VALIDATION_KEYS = {"min_length", "max_length", "min", "max"}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_question(question: Mapping[str, Any], where: str, fields: Dict[str, str]) -> None:
    if not isinstance(question, Mapping):
        fields[where] = "Question must be an object"
        return
    if not question.get("id"):
        fields[f"{where}.id"] = "Question id is required"
    if question.get("type") not in values_of(QuestionType):
        fields[f"{where}.type"] = f"Unknown question type: {question.get('type')}"
    if not isinstance(question.get("question", ""), str):
        fields[f"{where}.question"] = "Question text must be a string"

    options = question.get("options")
    if question.get("type") in CHOICE_TYPES and not options:
        fields[f"{where}.options"] = "Choice questions need at least one option"
    elif options is not None and not isinstance(options, list):
        fields[f"{where}.options"] = "Options must be a list"

    rules = question.get("validation") or {}
    if not isinstance(rules, Mapping):
        fields[f"{where}.validation"] = "Validation must be an object"
    else:
        for key, value in rules.items():
            if key not in VALIDATION_KEYS:
                fields[f"{where}.validation.{key}"] = "Unknown validation rule"
            elif value is not None and not _is_number(value):
                fields[f"{where}.validation.{key}"] = "Must be a number"

    logic = question.get("conditional_logic")
    if logic:
        if not isinstance(logic, Mapping) or not logic.get("depends_on") or not logic.get("condition"):
            fields[f"{where}.conditional_logic"] = "depends_on and condition are required"


def validate_schema(schema: Mapping[str, Any]) -> None:
    """Structural checks on an assessment schema. Raises ValidationError listing every problem."""
    fields: Dict[str, str] = {}
    sections = schema.get("sections")
    if sections is None:
        sections = []
    if not isinstance(sections, list):
        raise ValidationError("Invalid assessment", {"sections": "Sections must be a list"})

    seen_ids = set()
    for s_index, section in enumerate(sections):
        where = f"sections[{s_index}]"
        if not isinstance(section, Mapping):
            fields[where] = "Section must be an object"
            continue
        if not section.get("id"):
            fields[f"{where}.id"] = "Section id is required"
        questions = section.get("questions") or []
        if not isinstance(questions, list):
            fields[f"{where}.questions"] = "Questions must be a list"
            continue
        for q_index, question in enumerate(questions):
            q_where = f"{where}.questions[{q_index}]"
            _check_question(question, q_where, fields)
            qid = question.get("id") if isinstance(question, Mapping) else None
            if qid and qid in seen_ids:
                fields[f"{q_where}.id"] = f"Duplicate question id: {qid}"
            seen_ids.add(qid)

    if fields:
        raise ValidationError("Invalid assessment: " + ", ".join(sorted(fields)), fields)


def _warn_dangling_dependencies(assessment: Mapping[str, Any]) -> None:
    ids = {q.get("id") for q in iter_questions(assessment)}
    for question in iter_questions(assessment):
        logic = question.get("conditional_logic") or {}
        if logic and logic.get("depends_on") not in ids:
            logger.warning(
                "Question %s depends on unknown question %s", question.get("id"), logic.get("depends_on")
            )


def get_assessment(store: DataStore, job_id: str) -> Optional[Dict[str, Any]]:
    matches = store.backend.find("assessments", "job_id", job_id)
    return matches[0] if matches else None


def save_assessment(store: DataStore, job_id: str, schema: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create or replace the assessment for a job.
    A job keeps one assessment: an existing record's id and created_at are reused.
    """
    validate_schema(schema)
    _warn_dangling_dependencies(schema)

    timestamp = now_iso()
    with store.transaction() as backend:
        existing = backend.find("assessments", "job_id", job_id)
        current = existing[0] if existing else None
        assessment = {
            "id": current["id"] if current else (schema.get("id") or new_id()),
            "job_id": job_id,
            "title": schema.get("title") or "",
            "description": schema.get("description") or "",
            "sections": copy.deepcopy(list(schema.get("sections") or [])),
            "created_at": current["created_at"] if current else timestamp,
            "updated_at": timestamp,
        }
        saved = backend.put("assessments", assessment)
    logger.info(f"Saved assessment {saved['id']} for job {job_id}")
    return saved


def submit_response(
    store: DataStore, job_id: str, candidate_id: str, responses: Mapping[str, Any]
) -> Dict[str, Any]:
    """
    Validate every visible question and store the submission only when all pass.
    Raises AssessmentValidationError carrying every failing question otherwise.
    """
    if not candidate_id:
        raise ValidationError("Candidate id is required", {"candidate_id": "Candidate id is required"})
    if not isinstance(responses, Mapping):
        raise ValidationError("Responses must be an object", {"responses": "Must be an object"})

    assessment = get_assessment(store, job_id)
    if not assessment:
        raise NotFoundError(f"No assessment for job {job_id}")

    errors = validate_responses(assessment, responses)
    if errors:
        logger.info("Submission for job %s rejected: %s invalid answers", job_id, len(errors))
        raise AssessmentValidationError(list(errors.values()))

    submission = {
        "id": new_id(),
        "job_id": job_id,
        "candidate_id": candidate_id,
        "responses": copy.deepcopy(dict(responses)),
        "submitted_at": now_iso(),
    }
    with store.transaction() as backend:
        saved = backend.put("responses", submission)
    logger.info(f"Stored submission {saved['id']} for job {job_id}, candidate {candidate_id}")
    return saved


def list_responses(
    store: DataStore, job_id: Optional[str] = None, candidate_id: Optional[str] = None
) -> List[Dict[str, Any]]:
    if job_id:
        records = store.backend.find("responses", "job_id", job_id)
    else:
        records = store.backend.all("responses")
    if candidate_id:
        records = [r for r in records if r["candidate_id"] == candidate_id]
    return sorted(records, key=lambda r: parse_iso(r["submitted_at"]))
