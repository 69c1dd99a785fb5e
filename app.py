"""
Composition root for TalentFlow.
Builds the storage backend, the store lifecycle object and the mock API exactly once,
and hands them out together. Also provides a small admin command line.
"""
import argparse
import json
import logging
import random
import sys
from dataclasses import dataclass
from typing import List, Optional

from services import report_service
from services.config import Settings, load_settings
from services.mock_api import MockApi
from services.seed_data import generate_seed_data
from services.storage import create_storage
from services.store import DataStore

logger = logging.getLogger(__name__)


@dataclass
class TalentFlowApp:
    settings: Settings
    store: DataStore
    api: MockApi


def build_store(settings: Settings) -> DataStore:
    backend = create_storage(settings.persistent, settings.database_url)
    seed_rng = random.Random(settings.seed) if settings.seed is not None else random.Random()
    return DataStore(backend, seed_factory=lambda: generate_seed_data(rng=seed_rng))


def create_app(settings: Optional[Settings] = None) -> TalentFlowApp:
    """Wire everything together and make sure the store holds data."""
    settings = settings or load_settings()
    store = build_store(settings)
    store.init()
    api = MockApi(store, settings)
    return TalentFlowApp(settings=settings, store=store, api=api)


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="TalentFlow data administration")
    sub = parser.add_subparsers(dest="command", required=True)
    export_cmd = sub.add_parser("export", help="Write a JSON snapshot of every collection")
    export_cmd.add_argument("--out", help="Output file (defaults to stdout)")
    sub.add_parser("reset", help="Wipe all data and reseed")
    sub.add_parser("stats", help="Print candidate counts per pipeline stage")
    args = parser.parse_args(argv)

    app = create_app()

    if args.command == "export":
        payload = json.dumps(app.store.export_all(), indent=2)
        if args.out:
            with open(args.out, "w", encoding="utf-8") as fh:
                fh.write(payload)
            logger.info(f"Exported data to {args.out}")
        else:
            print(payload)
    elif args.command == "reset":
        app.store.reset_all()
    elif args.command == "stats":
        print(report_service.pipeline_summary(app.store).to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
