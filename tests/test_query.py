"""Tests for filtering, sorting and pagination."""
from __future__ import annotations

import math

import pytest

from conftest import make_job
from services.errors import ValidationError
from services.job_service import list_jobs
from services.query import matches_search, paginate, sort_jobs
from services.storage import MemoryStorage
from services.store import DataStore


def test_paginate_slices_and_counts() -> None:
    records = [{"id": str(i)} for i in range(23)]
    page = paginate(records, page=3, page_size=10)

    assert [r["id"] for r in page.items] == ["20", "21", "22"]
    assert page.total == 23
    assert page.total_pages == 3


def test_out_of_range_page_is_empty_not_an_error() -> None:
    page = paginate([{"id": "1"}], page=5, page_size=10)

    assert page.items == []
    assert page.total == 1
    assert page.total_pages == 1


def test_empty_collection_has_zero_pages() -> None:
    assert paginate([], page=1, page_size=10).total_pages == 0


@pytest.mark.parametrize("page,page_size", [(0, 10), (1, 0), (-1, 5)])
def test_invalid_page_arguments(page: int, page_size: int) -> None:
    with pytest.raises(ValidationError):
        paginate([], page=page, page_size=page_size)


def test_search_matches_fields_and_tags_case_insensitively() -> None:
    job = make_job("1", "Backend Engineer", 1, tags=["Remote"])

    assert matches_search(job, "END eng", ("title",), ("tags",))
    assert matches_search(job, "mot", ("title",), ("tags",))
    assert not matches_search(job, "frontend", ("title",), ("tags",))
    assert matches_search(job, "", ("title",))


def test_sort_jobs_by_title_or_order() -> None:
    jobs = [make_job("1", "beta", 2), make_job("2", "Alpha", 3), make_job("3", "gamma", 1)]

    assert [j["id"] for j in sort_jobs(jobs)] == ["3", "1", "2"]
    assert [j["id"] for j in sort_jobs(jobs, "title")] == ["2", "1", "3"]


def test_second_page_of_active_jobs_in_mixed_set() -> None:
    store = DataStore(MemoryStorage())
    jobs = [
        make_job(str(i), f"Job {i:02d}", i, status="active" if i % 3 else "archived")
        for i in range(1, 26)
    ]
    store.backend.bulk_insert("jobs", jobs)
    active_count = sum(1 for j in jobs if j["status"] == "active")

    page = list_jobs(store, status="active", page=2, page_size=10)

    assert len(page.items) == min(10, max(0, active_count - 10))
    assert page.total == active_count
    assert page.total_pages == math.ceil(active_count / 10)
    assert all(j["status"] == "active" for j in page.items)


def test_status_all_means_no_restriction(store) -> None:
    assert list_jobs(store, status="all").total == 5
    assert list_jobs(store, status="").total == 5
    assert list_jobs(store, status="archived").total == 2
