import argparse
import logging
import random

from dotenv import load_dotenv

from services.config import load_settings
from services.seed_data import generate_seed_data
from services.storage import create_storage
from services.store import DataStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_database(reset: bool = False) -> None:
    """
    One-time seeding of the durable store.
    Skips when jobs already exist unless reset is requested.
    """
    # Load environment variables (like DATABASE_URL)
    load_dotenv()
    settings = load_settings()

    logger.info("Starting database seed...")
    rng = random.Random(settings.seed) if settings.seed is not None else random.Random()
    store = DataStore(
        create_storage(persistent=True, database_url=settings.database_url),
        seed_factory=lambda: generate_seed_data(rng=rng),
    )

    if reset:
        logger.warning("Reset requested: wiping all existing data.")
        store.reset_all()
    elif not store.init():
        logger.warning(f"Store at {settings.database_url} already has jobs. Skipping.")
        return

    counts = {name: len(records) for name, records in store.export_all().items()}
    logger.info(f"Database seeding complete! {counts}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the TalentFlow database")
    parser.add_argument("--reset", action="store_true", help="Wipe existing data before seeding")
    seed_database(reset=parser.parse_args().reset)
