"""Main entry point for the trainer."""
import argparse
import logging
import sys

from miyalingo.app import Trainer
from miyalingo.config import ensure_directories, settings
from miyalingo.logging_config import setup_logging
from miyalingo.models.catalog import JLPT_LEVELS
from miyalingo.monitoring import start_monitoring
from miyalingo.services.catalog_service import CatalogService
from miyalingo.services.progress_store import SchedulerStore
from miyalingo.services.repositories import create_repository

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(prog="miyalingo", description="Japanese vocabulary trainer")
    parser.add_argument(
        "--level",
        type=str.upper,
        choices=JLPT_LEVELS,
        help="Only study words of this JLPT level, e.g. N5",
    )
    parser.add_argument("--reset", action="store_true", help="Forget all progress and exit")
    parser.add_argument("--stats", action="store_true", help="Show progress summary and exit")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Run the trainer."""
    args = parse_args(argv)

    ensure_directories()
    setup_logging("Starting MiyaLingo trainer ...")

    if settings.monitoring.enabled:
        start_monitoring(settings.monitoring.port)
        logger.info(f"Metrics server listening on port {settings.monitoring.port}")

    catalog = CatalogService.load()
    if args.level:
        catalog = catalog.by_level(args.level)

    store = SchedulerStore(create_repository())

    if args.reset:
        store.reset_progress()
        print("Progress reset.")
        return 0

    if args.stats:
        keys = catalog.keys()
        for status, count in store.status_counts(keys).items():
            print(f"{status.value:>10}: {count}")
        print(f"{'due':>10}: {store.count_due(keys, catalog_only=True)}")
        return 0

    try:
        Trainer(store, catalog).run()
    except (KeyboardInterrupt, EOFError):
        print()
        logger.info("Received keyboard interrupt, shutting down...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
