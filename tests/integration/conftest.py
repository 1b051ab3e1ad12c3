import os
import uuid
from collections.abc import Generator
from pathlib import Path

import pytest

from docvault.config.settings import Settings
from docvault.database.connection import Database

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "sql" / "schema.sql"


def _test_settings() -> Settings:
    return Settings(db_database=os.environ.get("DB_DATABASE", "docvault_test"))


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def database(test_settings: Settings) -> Generator[Database, None, None]:
    try:
        db = Database.from_settings(test_settings)
        with db.connection() as conn:
            conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
            conn.commit()
    except Exception as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run integration tests")
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def owner_id(database: Database) -> Generator[str, None, None]:
    """A fresh owner; every row it creates is removed afterwards."""
    owner = str(uuid.uuid4())
    yield owner
    with database.connection() as conn:
        conn.execute("DELETE FROM documents WHERE owner_id = %s", (owner,))
        conn.execute("DELETE FROM audit_logs WHERE user_id = %s", (owner,))
        conn.execute("DELETE FROM accounts WHERE user_id = %s", (owner,))
        conn.commit()


@pytest.fixture
def set_limit(database: Database):  # type: ignore[no-untyped-def]
    def _set(owner: str, limit_bytes: int, used_bytes: int = 0) -> None:
        with database.connection() as conn:
            conn.execute(
                """
                INSERT INTO accounts (user_id, storage_used_bytes, storage_limit_bytes)
                VALUES (%s, %s, %s)
                ON CONFLICT (user_id)
                DO UPDATE SET storage_used_bytes = EXCLUDED.storage_used_bytes,
                              storage_limit_bytes = EXCLUDED.storage_limit_bytes
                """,
                (owner, used_bytes, limit_bytes),
            )
            conn.commit()

    return _set
