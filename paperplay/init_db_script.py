import logging
from paperplay.db.init_db import init_db
from paperplay.db.session import engine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main() -> None:
    logger.info("Creating tables")
    init_db(engine)
    logger.info("Tables created")


if __name__ == "__main__":
    main()
