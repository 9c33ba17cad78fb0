import os
import tempfile
from typing import Dict, Generator

# settings are read once at import, so the test environment goes first
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["FILE_STORAGE"] = tempfile.mkdtemp(prefix="paperplay-tests-")
os.environ["MEDIA_BASE_URL"] = "http://testserver/media"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_CONFIG"] = "testing"
os.environ["SECRET_KEY"] = "paperplay-tests-secret"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from paperplay.core.celery_utils import create_celery  # noqa: E402
from paperplay.core.config import settings  # noqa: E402
from paperplay.core.security import create_access_token  # noqa: E402
from paperplay.db.init_db import init_db  # noqa: E402
from paperplay.db.session import SessionLocal, engine  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def setup_backend() -> None:
    create_celery()
    init_db(engine)


@pytest.fixture()
def db() -> Generator:
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="module")
def client() -> Generator:
    from paperplay.main import app
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def operator_token_headers() -> Dict[str, str]:
    token = create_access_token("operator@paperplay.test", scopes=[settings.OPERATOR_SCOPE])
    return {"Authorization": f"Bearer {token}"}
