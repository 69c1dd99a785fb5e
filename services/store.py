"""
DataStore: the store lifecycle object.

Owned by the composition root (app.create_app) and handed to every service function.
Holds the backend, the seed generator and the in-process lock that serializes
multi-step writes.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from services.storage import StorageBackend

logger = logging.getLogger(__name__)

SeedFactory = Callable[[], Dict[str, List[Dict[str, Any]]]]


class DataStore:
    def __init__(self, backend: StorageBackend, seed_factory: Optional[SeedFactory] = None):
        self.backend = backend
        self._seed_factory = seed_factory
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[StorageBackend]:
        """Serialize against other writers and group the writes into one backend transaction."""
        with self._lock:
            with self.backend.transaction():
                yield self.backend

    def init(self) -> bool:
        """
        Seed the store when it holds no jobs. Safe to call any number of times.
        Returns True when seed data was written.
        """
        with self.transaction() as backend:
            job_count = backend.count("jobs")
            if job_count > 0:
                logger.debug("Store already initialised with %s jobs", job_count)
                return False
            if self._seed_factory is None:
                return False

            logger.info("Initialising store with seed data...")
            self._write_seed(backend)
        logger.info("Store initialised successfully")
        return True

    def _write_seed(self, backend: StorageBackend) -> None:
        data = self._seed_factory()
        for collection in backend.collections:
            records = data.get(collection) or []
            if records:
                backend.bulk_insert(collection, records)
                logger.info(f"Seeded {len(records)} {collection}")

    def reset_all(self) -> None:
        """Wipe every collection and reseed, as one unit."""
        with self.transaction() as backend:
            backend.clear()
            if self._seed_factory is not None:
                self._write_seed(backend)
        logger.info("All data reset")

    def clear_all(self) -> None:
        with self.transaction() as backend:
            backend.clear()
        logger.info("All data cleared")

    def export_all(self) -> Dict[str, List[Dict[str, Any]]]:
        with self._lock:
            return {name: self.backend.all(name) for name in self.backend.collections}
