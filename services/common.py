import datetime
import re
import uuid
from typing import Any, Dict, Iterable, List, Mapping


def now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def parse_iso(value: str) -> datetime.datetime:
    """Parse a stored timestamp. Naive values are treated as UTC."""
    parsed = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def new_id() -> str:
    return uuid.uuid4().hex


def slugify(title: str) -> str:
    """
    Lowercase, drop anything that is not a letter, digit, space or dash,
    then turn whitespace runs into single dashes.
    """
    slug = re.sub(r"[^a-z0-9\s-]", "", title.lower())
    return re.sub(r"\s+", "-", slug.strip())


def unique_strings(values: Iterable[Any]) -> List[str]:
    """De-duplicate while keeping first-seen order; blank entries are dropped."""
    seen = []
    for value in values:
        text = str(value).strip()
        if text and text not in seen:
            seen.append(text)
    return seen


def check_choice(
    fields: Dict[str, str], data: Mapping[str, Any], key: str, allowed: set, nullable: bool = True
) -> None:
    """
    Record a field error when data[key] is present but not one of the allowed values.
    An explicit None is only accepted when the field is nullable.
    """
    value = data.get(key)
    if value is None:
        if key in data and not nullable:
            fields[key] = f"{key.capitalize()} cannot be empty"
        return
    if value not in allowed:
        fields[key] = f"Must be one of: {', '.join(sorted(allowed))}"
