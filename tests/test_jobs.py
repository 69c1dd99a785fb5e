"""Tests for job creation, updates and manual reordering."""
from __future__ import annotations

import pytest

from services.errors import NotFoundError, StorageError, ValidationError
from services.job_service import create_job, get_job, list_jobs, reorder_job, update_job
from services.ordering import move_item, shift_orders


def orders(store) -> dict:
    return {j["id"]: j["order"] for j in store.backend.all("jobs")}


def ranked_ids(store) -> list:
    return [j["id"] for j in list_jobs(store, page_size=100).items]


def test_create_job_defaults(store) -> None:
    job = create_job(store, {"title": "  Backend Engineer II ", "description": "Build APIs"})

    assert job["title"] == "Backend Engineer II"
    assert job["slug"] == "backend-engineer-ii"
    assert job["status"] == "active"
    assert job["order"] == 6
    assert job["created_at"] == job["updated_at"]

    listed = list_jobs(store, page_size=100).items
    assert job["id"] in [j["id"] for j in listed]


def test_create_job_keeps_given_slug_and_dedupes_tags(store) -> None:
    job = create_job(store, {"title": "C++ Developer", "slug": "cpp-dev", "tags": ["Remote", "Remote", " ", "New"]})

    assert job["slug"] == "cpp-dev"
    assert job["tags"] == ["Remote", "New"]


def test_create_job_requires_title_and_changes_nothing(store) -> None:
    before = store.backend.count("jobs")

    with pytest.raises(ValidationError) as excinfo:
        create_job(store, {"title": "   ", "status": "paused"})

    assert set(excinfo.value.fields) == {"title", "status"}
    assert store.backend.count("jobs") == before


def test_archived_job_leaves_active_listing(store) -> None:
    job = create_job(store, {"title": "Backend Engineer", "description": "..."})
    update_job(store, job["id"], {"status": "archived"})

    active_ids = [j["id"] for j in list_jobs(store, status="active", page_size=100).items]
    assert job["id"] not in active_ids


def test_update_job_refreshes_updated_at_and_keeps_id(store) -> None:
    original = get_job(store, "1")
    updated = update_job(store, "1", {"id": "other", "location": "Berlin"})

    assert updated["id"] == "1"
    assert updated["location"] == "Berlin"
    assert updated["updated_at"] > original["updated_at"]
    assert updated["created_at"] == original["created_at"]


def test_update_job_errors(store) -> None:
    with pytest.raises(NotFoundError):
        update_job(store, "missing", {"title": "x"})
    with pytest.raises(ValidationError):
        update_job(store, "1", {"salary": 100})
    with pytest.raises(ValidationError):
        update_job(store, "1", {"type": "internship"})


def test_search_by_title_or_tag(store) -> None:
    assert [j["id"] for j in list_jobs(store, search="engineer").items] == ["1", "4"]
    assert [j["id"] for j in list_jobs(store, search="hybrid").items] == ["2"]


def test_sort_by_title(store) -> None:
    titles = [j["title"] for j in list_jobs(store, sort="title").items]
    assert titles == sorted(titles, key=str.casefold)


def test_reorder_moving_down(store) -> None:
    reorder_job(store, "1", 1, 4)

    assert orders(store) == {"1": 4, "2": 1, "3": 2, "4": 3, "5": 5}


def test_reorder_moving_up(store) -> None:
    reorder_job(store, "5", 5, 2)

    assert orders(store) == {"1": 1, "2": 3, "3": 4, "4": 5, "5": 2}


def test_reorder_same_position_is_noop(store) -> None:
    before = orders(store)
    assert reorder_job(store, "3", 3, 3) == {"success": True}
    assert orders(store) == before


@pytest.mark.parametrize("job_id,from_order,to_order", [("1", 1, 5), ("4", 4, 2), ("3", 3, 1), ("5", 5, 4)])
def test_reorder_then_reverse_restores_ranking(store, job_id: str, from_order: int, to_order: int) -> None:
    before = ranked_ids(store)

    reorder_job(store, job_id, from_order, to_order)
    assert ranked_ids(store) != before
    reorder_job(store, job_id, to_order, from_order)

    assert ranked_ids(store) == before


def test_reorder_unknown_job(store) -> None:
    before = orders(store)
    with pytest.raises(NotFoundError):
        reorder_job(store, "missing", 1, 2)
    assert orders(store) == before


def test_reorder_rejects_non_integer_positions(store) -> None:
    with pytest.raises(ValidationError):
        reorder_job(store, "1", "1", 3)


def test_reorder_failure_leaves_no_partial_shift(store, monkeypatch) -> None:
    before = orders(store)
    real_put = store.backend.put
    writes = []

    def flaky_put(collection, record):
        writes.append(record["id"])
        if len(writes) == 3:
            raise StorageError("disk full")
        return real_put(collection, record)

    monkeypatch.setattr(store.backend, "put", flaky_put)
    with pytest.raises(StorageError):
        reorder_job(store, "1", 1, 5)
    monkeypatch.undo()

    assert orders(store) == before


def test_shift_orders_returns_only_changed_rows() -> None:
    jobs = [{"id": str(i), "order": i} for i in range(1, 6)]

    changed = shift_orders(jobs, "2", 2, 4)

    assert {j["id"]: j["order"] for j in changed} == {"2": 4, "3": 2, "4": 3}
    assert jobs[2]["order"] == 3
    assert shift_orders(jobs, "2", 2, 2) == []


def test_move_item() -> None:
    assert move_item(["a", "b", "c", "d"], 0, 2) == ["b", "c", "a", "d"]
    assert move_item(["a", "b", "c", "d"], 3, 0) == ["d", "a", "b", "c"]
    with pytest.raises(IndexError):
        move_item(["a"], 0, 1)


@pytest.mark.parametrize("patch", [{"status": None}, {"slug": None}, {"slug": "  "}])
def test_update_job_rejects_empty_required_fields(store, patch) -> None:
    before = store.export_all()

    with pytest.raises(ValidationError) as excinfo:
        update_job(store, "1", patch)

    assert set(excinfo.value.fields) == set(patch)
    assert store.export_all() == before


def test_update_job_allows_clearing_optional_fields(store) -> None:
    updated = update_job(store, "1", {"type": None, "location": None})

    assert updated["type"] is None
    assert updated["location"] is None
