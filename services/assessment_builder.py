"""
Editing helpers for the assessment builder.
Each helper returns a new schema and leaves its input untouched.
"""
import copy
from typing import Any, Dict, List, Optional

from models.enums import QuestionType
from services.common import new_id
from services.errors import NotFoundError
from services.ordering import move_item


def new_section(title: str = "New Section", description: str = "") -> Dict[str, Any]:
    return {"id": f"section-{new_id()}", "title": title, "description": description, "questions": []}


def new_question(
    question: str = "New Question",
    type: str = QuestionType.SHORT_TEXT.value,
    required: bool = False,
    options: Optional[List[str]] = None,
) -> Dict[str, Any]:
    return {
        "id": f"question-{new_id()}",
        "type": type,
        "question": question,
        "required": required,
        "options": list(options or []),
        "validation": {},
    }


def _section_index(schema: Dict[str, Any], section_id: str) -> int:
    for index, section in enumerate(schema.get("sections") or []):
        if section.get("id") == section_id:
            return index
    raise NotFoundError(f"Section {section_id} not found")


def add_section(schema: Dict[str, Any], section: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    updated = copy.deepcopy(schema)
    updated.setdefault("sections", []).append(copy.deepcopy(section) if section else new_section())
    return updated


def remove_section(schema: Dict[str, Any], section_id: str) -> Dict[str, Any]:
    updated = copy.deepcopy(schema)
    del updated["sections"][_section_index(updated, section_id)]
    return updated


def move_section(schema: Dict[str, Any], from_index: int, to_index: int) -> Dict[str, Any]:
    updated = copy.deepcopy(schema)
    updated["sections"] = move_item(updated.get("sections") or [], from_index, to_index)
    return updated


def add_question(
    schema: Dict[str, Any], section_id: str, question: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    updated = copy.deepcopy(schema)
    section = updated["sections"][_section_index(updated, section_id)]
    section.setdefault("questions", []).append(copy.deepcopy(question) if question else new_question())
    return updated


def update_question(
    schema: Dict[str, Any], section_id: str, question_id: str, changes: Dict[str, Any]
) -> Dict[str, Any]:
    updated = copy.deepcopy(schema)
    section = updated["sections"][_section_index(updated, section_id)]
    for question in section.get("questions") or []:
        if question.get("id") == question_id:
            question.update(copy.deepcopy(changes))
            return updated
    raise NotFoundError(f"Question {question_id} not found in section {section_id}")


def remove_question(schema: Dict[str, Any], section_id: str, question_id: str) -> Dict[str, Any]:
    updated = copy.deepcopy(schema)
    section = updated["sections"][_section_index(updated, section_id)]
    remaining = [q for q in section.get("questions") or [] if q.get("id") != question_id]
    if len(remaining) == len(section.get("questions") or []):
        raise NotFoundError(f"Question {question_id} not found in section {section_id}")
    section["questions"] = remaining
    return updated


def move_question(
    schema: Dict[str, Any], section_id: str, from_index: int, to_index: int
) -> Dict[str, Any]:
    """Reorder a question within its section."""
    updated = copy.deepcopy(schema)
    section = updated["sections"][_section_index(updated, section_id)]
    section["questions"] = move_item(section.get("questions") or [], from_index, to_index)
    return updated
