import pytest

from db import database
from db.store import SqliteStore


@pytest.fixture
def store(tmp_path):
    db_path = tmp_path / "multidrill.db"
    database.init_db(db_path)
    return SqliteStore(db_path)
