from __future__ import annotations

import pytest

from models.enums import STAGE_ORDER
from services.report_service import export_csv, job_pipeline, pipeline_summary


def test_pipeline_summary_lists_every_stage(store) -> None:
    summary = pipeline_summary(store)

    assert list(summary["stage"]) == STAGE_ORDER
    counts = dict(zip(summary["stage"], summary["count"]))
    assert counts == {"applied": 1, "screen": 1, "tech": 1, "offer": 0, "hired": 1, "rejected": 0}
    assert summary["share"].sum() == pytest.approx(1.0)


def test_job_pipeline_totals(store) -> None:
    table = job_pipeline(store)

    assert list(table["job_id"]) == ["1", "2", "3", "4", "5"]
    assert list(table["total"]) == [2, 0, 1, 1, 0]
    first = table.iloc[0]
    assert (first["applied"], first["screen"]) == (1, 1)


def test_job_pipeline_can_hide_archived(store) -> None:
    table = job_pipeline(store, include_archived=False)

    assert list(table["title"]) == ["Backend Engineer", "Frontend Developer", "QA Engineer"]


def test_export_csv(store) -> None:
    lines = export_csv(store, "candidates").splitlines()

    assert lines[0].split(",")[:3] == ["id", "name", "email"]
    assert len(lines) == 5

    with pytest.raises(ValueError):
        export_csv(store, "users")
