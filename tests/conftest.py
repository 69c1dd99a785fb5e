"""Shared fixtures: a small deterministic data set on both storage backends."""
from __future__ import annotations

import datetime
from typing import Any, Dict, List

import pytest

from services.config import Settings
from services.seed_data import build_assessment
from services.storage import MemoryStorage, SqlStorage
from services.store import DataStore

NOW = datetime.datetime(2024, 5, 1, 12, 0, tzinfo=datetime.timezone.utc)


def iso(days_ago: float) -> str:
    return (NOW - datetime.timedelta(days=days_ago)).isoformat()


def make_job(job_id: str, title: str, order: int, status: str = "active", tags=None) -> Dict[str, Any]:
    return {
        "id": job_id,
        "title": title,
        "slug": title.lower().replace(" ", "-"),
        "status": status,
        "tags": list(tags or []),
        "order": order,
        "description": f"{title} role",
        "requirements": ["Team player"],
        "location": "Remote",
        "type": "full-time",
        "created_at": iso(10),
        "updated_at": iso(10),
    }


def make_candidate(cid: str, name: str, stage: str, job_id: str, days_ago: float) -> Dict[str, Any]:
    first = name.split()[0].lower()
    return {
        "id": cid,
        "name": name,
        "email": f"{first}@example.com",
        "stage": stage,
        "job_id": job_id,
        "phone": None,
        "notes": None,
        "created_at": iso(days_ago),
        "updated_at": iso(days_ago),
    }


def small_seed() -> Dict[str, List[Dict[str, Any]]]:
    jobs = [
        make_job("1", "Backend Engineer", 1, tags=["Remote", "Senior"]),
        make_job("2", "Data Scientist", 2, status="archived", tags=["Hybrid"]),
        make_job("3", "Frontend Developer", 3, tags=["On-site"]),
        make_job("4", "QA Engineer", 4, tags=["Junior"]),
        make_job("5", "Product Manager", 5, status="archived"),
    ]
    candidates = [
        make_candidate("c1", "Alice Smith", "applied", "1", days_ago=5),
        make_candidate("c2", "Bob Jones", "screen", "1", days_ago=1),
        make_candidate("c3", "Carol White", "tech", "3", days_ago=3),
        make_candidate("c4", "Dan Brown", "hired", "4", days_ago=8),
    ]
    timeline = [
        {"id": "c2-initial", "candidate_id": "c2", "action": "stage_change", "from_stage": None,
         "to_stage": "applied", "timestamp": iso(1), "notes": "Candidate applied for the position"},
        {"id": "c2-1", "candidate_id": "c2", "action": "stage_change", "from_stage": "applied",
         "to_stage": "screen", "timestamp": iso(0.5), "notes": "Moved to screen stage"},
    ]
    return {
        "jobs": jobs,
        "candidates": candidates,
        "assessments": [build_assessment(jobs[0], iso(2))],
        "timeline": timeline,
        "responses": [],
    }


@pytest.fixture(params=["memory", "sql"])
def backend(request):
    if request.param == "memory":
        yield MemoryStorage()
    else:
        storage = SqlStorage("sqlite://")
        yield storage
        storage.engine.dispose()


@pytest.fixture
def store(backend) -> DataStore:
    data_store = DataStore(backend, seed_factory=small_seed)
    data_store.init()
    return data_store


@pytest.fixture
def quiet_settings() -> Settings:
    """No latency and no injected failures."""
    return Settings(
        persistent=False,
        latency_min_ms=0,
        latency_max_ms=0,
        write_error_rate=0.0,
        reorder_error_rate=0.0,
    )


@pytest.fixture
def fresh_store() -> DataStore:
    """An in-memory store that seeds itself on first use."""
    return DataStore(MemoryStorage(), seed_factory=small_seed)
