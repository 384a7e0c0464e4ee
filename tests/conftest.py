from __future__ import annotations

import pytest

from tasknest.infra.db import init_db, make_engine, make_session_factory
from tasknest.infra.store import DocumentStore


@pytest.fixture()
def store() -> DocumentStore:
    """Real store on a private in-memory SQLite database."""
    engine = make_engine("sqlite://")
    init_db(engine)
    return DocumentStore(make_session_factory(engine))
