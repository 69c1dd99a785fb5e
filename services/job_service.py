import logging
from typing import Any, Dict, Optional

from models.enums import JobStatus, JobType, values_of
from services.common import check_choice, new_id, now_iso, slugify, unique_strings
from services.errors import NotFoundError, ValidationError
from services.ordering import shift_orders
from services.query import JOBS_PAGE_SIZE, Page, filter_exact, matches_search, paginate, sort_jobs
from services.store import DataStore

logger = logging.getLogger(__name__)

JOB_FIELDS = {
    "title", "slug", "status", "tags", "order", "description",
    "requirements", "location", "type",
}
READ_ONLY_FIELDS = {"id", "created_at", "updated_at"}


def _validate_job_fields(data: Dict[str, Any], creating: bool) -> None:
    fields: Dict[str, str] = {}

    unknown = set(data) - JOB_FIELDS - READ_ONLY_FIELDS
    for name in sorted(unknown):
        fields[name] = "Unknown field"

    if creating or "title" in data:
        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            fields["title"] = "Title is required"

    check_choice(fields, data, "status", values_of(JobStatus), nullable=creating)
    check_choice(fields, data, "type", values_of(JobType))

    if not creating and "slug" in data:
        slug = data["slug"]
        if not isinstance(slug, str) or not slug.strip():
            fields["slug"] = "Slug cannot be empty"

    if "order" in data and (isinstance(data["order"], bool) or not isinstance(data["order"], int)):
        fields["order"] = "Order must be an integer"
    for name in ("tags", "requirements"):
        if data.get(name) is not None and not isinstance(data[name], (list, tuple, set)):
            fields[name] = "Must be a list of strings"

    if fields:
        raise ValidationError("Invalid job data: " + ", ".join(sorted(fields)), fields)


def get_job(store: DataStore, job_id: str) -> Dict[str, Any]:
    job = store.backend.get("jobs", job_id)
    if not job:
        raise NotFoundError(f"Job {job_id} not found")
    return job


def list_jobs(
    store: DataStore,
    search: Optional[str] = None,
    status: Optional[str] = None,
    sort: Optional[str] = None,
    page: int = 1,
    page_size: int = JOBS_PAGE_SIZE,
) -> Page:
    jobs = sort_jobs(store.backend.all("jobs"), sort)
    jobs = [j for j in jobs if matches_search(j, search, ("title",), ("tags",))]
    jobs = filter_exact(jobs, "status", status)
    return paginate(jobs, page, page_size)


def create_job(store: DataStore, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a job at the end of the manual ranking.
    Status defaults to active and the slug is derived from the title when not given.
    """
    _validate_job_fields(data, creating=True)

    title = data["title"].strip()
    timestamp = now_iso()
    with store.transaction() as backend:
        orders = [j.get("order") or 0 for j in backend.all("jobs")]
        job = {
            "id": new_id(),
            "title": title,
            "slug": data.get("slug") or slugify(title),
            "status": data.get("status") or JobStatus.ACTIVE.value,
            "tags": unique_strings(data.get("tags") or []),
            "order": max(orders, default=0) + 1,
            "description": data.get("description"),
            "requirements": list(data["requirements"]) if data.get("requirements") is not None else None,
            "location": data.get("location"),
            "type": data.get("type"),
            "created_at": timestamp,
            "updated_at": timestamp,
        }
        saved = backend.put("jobs", job)
    logger.info(f"Created job {saved['id']} '{saved['title']}' at order {saved['order']}")
    return saved


def update_job(store: DataStore, job_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    """Apply a partial update. id and created_at cannot change; updated_at always refreshes."""
    _validate_job_fields(patch, creating=False)

    changes = {k: v for k, v in patch.items() if k not in READ_ONLY_FIELDS}
    if "title" in changes:
        changes["title"] = changes["title"].strip()
    if "tags" in changes:
        changes["tags"] = unique_strings(changes["tags"] or [])
    if changes.get("requirements") is not None:
        changes["requirements"] = list(changes["requirements"])

    with store.transaction() as backend:
        job = backend.get("jobs", job_id)
        if not job:
            raise NotFoundError(f"Job {job_id} not found")
        job.update(changes)
        job["updated_at"] = now_iso()
        return backend.put("jobs", job)


def reorder_job(store: DataStore, job_id: str, from_order: int, to_order: int) -> Dict[str, Any]:
    """
    Move a job in the manual ranking and shift the jobs in between by one slot.
    All order changes are written in one transaction.
    """
    for name, value in (("from_order", from_order), ("to_order", to_order)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{name} must be an integer", {name: "Must be an integer"})

    with store.transaction() as backend:
        if not backend.get("jobs", job_id):
            raise NotFoundError(f"Job {job_id} not found")
        changed = shift_orders(backend.all("jobs"), job_id, from_order, to_order)
        for job in changed:
            backend.put("jobs", job)

    logger.info("Reordered job %s from %s to %s (%s rows)", job_id, from_order, to_order, len(changed))
    return {"success": True}
