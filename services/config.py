"""
Runtime settings, read from the environment (a .env file is honoured).
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///db/talentflow.db"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    # False selects the volatile in-memory store
    persistent: bool = True
    seed: Optional[int] = None
    latency_min_ms: int = 200
    latency_max_ms: int = 1200
    write_error_rate: float = 0.075
    reorder_error_rate: float = 0.1
    search_cache_ttl: float = 30.0


def load_settings() -> Settings:
    seed = os.getenv("TALENTFLOW_SEED")
    return Settings(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        persistent=_env_bool("TALENTFLOW_PERSISTENT", True),
        seed=int(seed) if seed else None,
        latency_min_ms=int(os.getenv("MOCK_LATENCY_MIN_MS", "200")),
        latency_max_ms=int(os.getenv("MOCK_LATENCY_MAX_MS", "1200")),
        write_error_rate=float(os.getenv("MOCK_WRITE_ERROR_RATE", "0.075")),
        reorder_error_rate=float(os.getenv("MOCK_REORDER_ERROR_RATE", "0.1")),
        search_cache_ttl=float(os.getenv("SEARCH_CACHE_TTL", "30")),
    )
