from sqlalchemy.engine import Engine

from paperplay.db import base  # noqa: F401


def init_db(engine: Engine) -> None:
    # Tables should be created with Alembic migrations in production,
    # create_all is enough for a fresh database and for tests
    base.Base.metadata.create_all(bind=engine)
