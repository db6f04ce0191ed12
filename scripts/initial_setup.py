"""Create the data directory and bring the database schema up to date."""
import logging
from pathlib import Path

from progressive.database import run_migrations
from progressive.logging_config import configure_logging


logger = logging.getLogger("setup")


def main() -> None:
    configure_logging()
    data_dir = Path("data")
    data_dir.mkdir(exist_ok=True)
    run_migrations()
    logger.info("Database initialised at %s", data_dir.resolve())


if __name__ == "__main__":
    main()
