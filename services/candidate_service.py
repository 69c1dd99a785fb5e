from typing import List, Optional, Dict, Any
import logging

from models.enums import Stage, TimelineAction, values_of
from services.common import check_choice, new_id, now_iso, parse_iso
from services.errors import NotFoundError, ValidationError
from services.query import (
    CANDIDATES_PAGE_SIZE,
    Page,
    filter_exact,
    matches_search,
    paginate,
    sort_candidates,
)
from services.store import DataStore

logger = logging.getLogger(__name__)

CANDIDATE_FIELDS = {"name", "email", "stage", "job_id", "phone", "notes"}
READ_ONLY_FIELDS = {"id", "created_at", "updated_at"}


def _validate_candidate_fields(data: Dict[str, Any], creating: bool) -> None:
    fields: Dict[str, str] = {}

    for name in sorted(set(data) - CANDIDATE_FIELDS - READ_ONLY_FIELDS):
        fields[name] = "Unknown field"

    for name in ("name", "email", "job_id"):
        if creating or name in data:
            value = data.get(name)
            if not isinstance(value, str) or not value.strip():
                fields[name] = f"{name.replace('_', ' ').capitalize()} is required"

    # Any stage may follow any other; only the value itself is checked.
    check_choice(fields, data, "stage", values_of(Stage), nullable=creating)

    if fields:
        raise ValidationError("Invalid candidate data: " + ", ".join(sorted(fields)), fields)


def get_candidate(store: DataStore, candidate_id: str) -> Dict[str, Any]:
    candidate = store.backend.get("candidates", candidate_id)
    if not candidate:
        raise NotFoundError(f"Candidate {candidate_id} not found")
    return candidate


def list_candidates(
    store: DataStore,
    search: Optional[str] = None,
    stage: Optional[str] = None,
    job_id: Optional[str] = None,
    page: int = 1,
    page_size: int = CANDIDATES_PAGE_SIZE,
) -> Page:
    """Candidates newest first, optionally narrowed by a name/email search, stage and job."""
    if job_id:
        candidates = store.backend.find("candidates", "job_id", job_id)
    else:
        candidates = store.backend.all("candidates")
    candidates = sort_candidates(candidates)
    candidates = [c for c in candidates if matches_search(c, search, ("name", "email"))]
    candidates = filter_exact(candidates, "stage", stage)
    return paginate(candidates, page, page_size)


def create_candidate(store: DataStore, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Creates a new candidate in the applied stage unless another stage is given.
    The referenced job is not checked for existence.
    """
    _validate_candidate_fields(data, creating=True)

    timestamp = now_iso()
    candidate = {
        "id": new_id(),
        "name": data["name"].strip(),
        "email": data["email"].strip(),
        "stage": data.get("stage") or Stage.APPLIED.value,
        "job_id": data["job_id"],
        "phone": data.get("phone"),
        "notes": data.get("notes"),
        "created_at": timestamp,
        "updated_at": timestamp,
    }
    with store.transaction() as backend:
        saved = backend.put("candidates", candidate)
    logger.info(f"Created candidate {saved['id']} for job {saved['job_id']}")
    return saved


def _timeline_entry_for(candidate_id: str, old_stage: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Decide which single timeline entry, if any, an update produces.
    A stage change wins and carries the note; a note alone becomes note_added.
    """
    new_stage = patch.get("stage")
    note = patch.get("notes") or None
    entry = {
        "id": new_id(),
        "candidate_id": candidate_id,
        "from_stage": None,
        "to_stage": None,
        "timestamp": now_iso(),
        "notes": note,
    }
    if new_stage and new_stage != old_stage:
        entry.update(
            action=TimelineAction.STAGE_CHANGE.value,
            from_stage=old_stage,
            to_stage=new_stage,
        )
        return entry
    if note:
        entry["action"] = TimelineAction.NOTE_ADDED.value
        return entry
    return None


def update_candidate(store: DataStore, candidate_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply a partial update and append at most one timeline entry.
    The record write and the timeline append happen in the same transaction.
    """
    _validate_candidate_fields(patch, creating=False)
    changes = {k: v for k, v in patch.items() if k not in READ_ONLY_FIELDS}

    with store.transaction() as backend:
        candidate = backend.get("candidates", candidate_id)
        if not candidate:
            raise NotFoundError(f"Candidate {candidate_id} not found")

        old_stage = candidate["stage"]
        candidate.update(changes)
        candidate["updated_at"] = now_iso()
        saved = backend.put("candidates", candidate)

        entry = _timeline_entry_for(candidate_id, old_stage, changes)
        if entry:
            backend.put("timeline", entry)
            logger.info(
                "Candidate %s: %s (%s -> %s)",
                candidate_id, entry["action"], entry["from_stage"], entry["to_stage"],
            )
    return saved


def get_timeline(store: DataStore, candidate_id: str) -> List[Dict[str, Any]]:
    """Timeline entries for a candidate, newest first."""
    if not store.backend.get("candidates", candidate_id):
        raise NotFoundError(f"Candidate {candidate_id} not found")
    entries = store.backend.find("timeline", "candidate_id", candidate_id)
    return sorted(entries, key=lambda e: parse_iso(e["timestamp"]), reverse=True)
