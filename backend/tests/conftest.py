import os
import tempfile
from pathlib import Path

_DB_DIR = tempfile.mkdtemp(prefix="applytrack-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_DB_DIR) / 'test.db'}"
os.environ["ADZUNA_APP_ID"] = ""
os.environ["ADZUNA_API_KEY"] = ""
os.environ["CONNECTOR_RETRY_WAIT_SECONDS"] = "0"
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import applytrack.models  # noqa: E402,F401
from applytrack.auth import create_access_token, hash_password  # noqa: E402
from applytrack.database import Base, SessionLocal, engine  # noqa: E402
from applytrack.models.user import User  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    row = User(username="jane", password_hash=hash_password("secret-pass"))
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def client():
    from applytrack.main import app

    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
