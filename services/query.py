"""
Filtering, sorting and pagination shared by the job and candidate listings.
Sorting always happens before the page slice is taken.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from services.common import parse_iso
from services.errors import ValidationError

JOBS_PAGE_SIZE = 10
CANDIDATES_PAGE_SIZE = 50


@dataclass
class Page:
    items: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = JOBS_PAGE_SIZE
    total_pages: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": self.items,
            "total": self.total,
            "page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
        }


def is_unrestricted(value: Optional[str]) -> bool:
    return value is None or value == "" or value == "all"


def matches_search(record: Dict[str, Any], search: Optional[str], fields: Sequence[str],
                   list_fields: Sequence[str] = ()) -> bool:
    """Case-insensitive substring match on any of the text fields or any list element."""
    if not search:
        return True
    needle = search.lower()
    for name in fields:
        if needle in str(record.get(name) or "").lower():
            return True
    for name in list_fields:
        if any(needle in str(item).lower() for item in record.get(name) or []):
            return True
    return False


def filter_exact(records: Iterable[Dict[str, Any]], key: str, value: Optional[str]) -> List[Dict[str, Any]]:
    if is_unrestricted(value):
        return list(records)
    return [r for r in records if r.get(key) == value]


def sort_jobs(jobs: Iterable[Dict[str, Any]], sort: Optional[str] = None) -> List[Dict[str, Any]]:
    if sort == "title":
        return sorted(jobs, key=lambda j: (j.get("title", "").casefold(), j.get("title", "")))
    return sorted(jobs, key=lambda j: j.get("order") or 0)


def sort_candidates(candidates: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # Newest first
    return sorted(candidates, key=lambda c: parse_iso(c["created_at"]), reverse=True)


def paginate(records: Sequence[Dict[str, Any]], page: int, page_size: int) -> Page:
    if page < 1:
        raise ValidationError("Page must be 1 or greater", {"page": "Must be >= 1"})
    if page_size < 1:
        raise ValidationError("Page size must be 1 or greater", {"page_size": "Must be >= 1"})

    total = len(records)
    start = (page - 1) * page_size
    return Page(
        items=list(records[start:start + page_size]),
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size),
    )
