"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from mdgarden.core.models import Asset, CompiledNote
from mdgarden.crud import models  # noqa: F401


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="compiled")
def compiled_fixture():
    """A compiled note carrying one image."""
    return CompiledNote(
        text="---\ndg-publish: true\n---\nHello",
        assets=[Asset(path="/img/user/pic.png", content="aGVsbG8=")],
    )
