from psycopg.rows import dict_row

from docvault.database.connection import Database
from docvault.database.models import QuotaAccount


class QuotaRepository:
    """Database operations for the storage columns of the accounts table."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def get_account(self, owner_id: str) -> QuotaAccount | None:
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT user_id, storage_used_bytes, storage_limit_bytes, document_count
                    FROM accounts
                    WHERE user_id = %s
                    """,
                    (owner_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return QuotaAccount(
            owner_id=str(row["user_id"]),
            used_bytes=row["storage_used_bytes"] or 0,
            limit_bytes=row["storage_limit_bytes"] or 0,
            document_count=row["document_count"] or 0,
        )

    def atomic_add(self, owner_id: str, delta: int) -> None:
        """Apply ``delta`` in a single statement through update_user_storage().

        Raises psycopg.errors.UndefinedFunction when the function is not installed.
        """
        with self._db.connection() as conn:
            conn.execute("SELECT update_user_storage(%s, %s)", (owner_id, delta))
            conn.commit()

    def set_used(self, owner_id: str, used_bytes: int) -> None:
        with self._db.connection() as conn:
            conn.execute(
                """
                INSERT INTO accounts (user_id, storage_used_bytes)
                VALUES (%s, %s)
                ON CONFLICT (user_id)
                DO UPDATE SET storage_used_bytes = EXCLUDED.storage_used_bytes,
                              updated_at = NOW()
                """,
                (owner_id, used_bytes),
            )
            conn.commit()

    def adjust_document_count(self, owner_id: str, delta: int) -> None:
        """Add ``delta`` to the owner's document counter, never below zero."""
        with self._db.connection() as conn:
            conn.execute(
                """
                INSERT INTO accounts (user_id, document_count)
                VALUES (%s, GREATEST(%s, 0))
                ON CONFLICT (user_id)
                DO UPDATE SET document_count = GREATEST(accounts.document_count + %s, 0),
                              updated_at = NOW()
                """,
                (owner_id, delta, delta),
            )
            conn.commit()
