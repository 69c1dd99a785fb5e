"""
Ordering primitives behind drag-and-drop moves.
"""
from typing import Any, Dict, Iterable, List, Sequence, TypeVar

T = TypeVar("T")


def move_item(items: Sequence[T], from_index: int, to_index: int) -> List[T]:
    """Return a copy of items with the element at from_index reinserted at to_index."""
    if not 0 <= from_index < len(items):
        raise IndexError(f"from_index {from_index} out of range")
    if not 0 <= to_index < len(items):
        raise IndexError(f"to_index {to_index} out of range")
    moved = list(items)
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return moved


def shift_orders(
    jobs: Iterable[Dict[str, Any]], job_id: str, from_order: int, to_order: int
) -> List[Dict[str, Any]]:
    """
    Compute the job records that change when job_id moves from from_order to to_order.

    The moved job takes to_order. Jobs between the two positions shift by one to
    close the gap: down a slot when moving later, up a slot when moving earlier.
    Returns updated copies of the changed records only; empty when the orders match.
    """
    if from_order == to_order:
        return []

    changed = []
    for job in jobs:
        order = job.get("order") or 0
        if job["id"] == job_id:
            new_order = to_order
        elif from_order < to_order and from_order < order <= to_order:
            new_order = order - 1
        elif from_order > to_order and to_order <= order < from_order:
            new_order = order + 1
        else:
            continue
        changed.append({**job, "order": new_order})
    return changed
