from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from paperplay.core.config import settings


def make_engine(url: str):
    if url.startswith("sqlite"):
        # in-memory databases live and die with their connection, keep exactly one
        pool_args = {"poolclass": StaticPool} if url in ("sqlite://", "sqlite:///:memory:") else {}
        return create_engine(url, connect_args={"check_same_thread": False}, **pool_args)
    return create_engine(url, pool_pre_ping=True)


engine = make_engine(settings.SQLALCHEMY_DATABASE_URI)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db_session() -> Generator:
    session = None
    try:
        session = SessionLocal()
        yield session
    finally:
        if session:
            session.close()
