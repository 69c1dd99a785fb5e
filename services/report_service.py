"""
Pipeline analytics and CSV export, built on pandas DataFrames.
"""
from typing import List

import pandas as pd

from models.enums import STAGE_ORDER
from services.storage import COLLECTIONS
from services.store import DataStore


def _frame(store: DataStore, collection: str) -> pd.DataFrame:
    model = COLLECTIONS[collection]
    columns: List[str] = [col.name for col in model.__table__.columns]
    return pd.DataFrame(store.backend.all(collection), columns=columns)


def pipeline_summary(store: DataStore) -> pd.DataFrame:
    """
    Candidate count per stage, in pipeline order, with each stage's share of the total.
    Stages without candidates are reported with a zero count.
    """
    candidates = _frame(store, "candidates")
    counts = candidates["stage"].value_counts().reindex(STAGE_ORDER, fill_value=0)
    summary = counts.rename_axis("stage").reset_index(name="count")
    total = int(summary["count"].sum())
    summary["share"] = summary["count"] / total if total else 0.0
    return summary


def job_pipeline(store: DataStore, include_archived: bool = True) -> pd.DataFrame:
    """
    Jobs x stages pivot of candidate counts, ordered by the jobs' manual ranking.
    Includes a `total` column.
    """
    jobs = _frame(store, "jobs")
    if not include_archived:
        jobs = jobs[jobs["status"] == "active"]
    candidates = _frame(store, "candidates")

    pivot = (
        pd.crosstab(candidates["job_id"], candidates["stage"])
        .reindex(columns=STAGE_ORDER, fill_value=0)
        .reindex(jobs["id"], fill_value=0)
    )
    pivot.index.name = "job_id"
    pivot = pivot.reset_index()
    pivot.columns.name = None
    pivot.insert(1, "title", jobs["title"].to_numpy())
    pivot.insert(2, "order", jobs["order"].to_numpy())
    pivot["total"] = pivot[STAGE_ORDER].sum(axis=1)
    return pivot.sort_values("order").reset_index(drop=True)


def export_csv(store: DataStore, collection: str) -> str:
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection}")
    return _frame(store, collection).to_csv(index=False)
