"""
Point the app at a throwaway SQLite file before anything imports
fitrecord (settings are cached on first use), and rebuild the schema
for every test.
"""
import os
import tempfile
from pathlib import Path

_DB_FILE = Path(tempfile.mkdtemp(prefix="fitrecord-tests-")) / "fitrecord.db"
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{_DB_FILE}"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from fitrecord.db import Base
from fitrecord import models  # noqa: F401

_schema_engine = create_engine(f"sqlite:///{_DB_FILE}")


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(_schema_engine)
    Base.metadata.create_all(_schema_engine)
    yield


@pytest.fixture
def client():
    # context manager so the lifespan (live view registry) runs
    from fitrecord.main import app
    with TestClient(app) as c:
        yield c
