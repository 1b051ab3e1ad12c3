from psycopg.types.json import Jsonb

from docvault.database.connection import Database
from docvault.database.models import AuditEntry


class AuditRepository:
    """Appends rows to the audit_logs table."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def log(self, entry: AuditEntry) -> None:
        with self._db.connection() as conn:
            conn.execute(
                """
                INSERT INTO audit_logs (action, entity_type, entity_id, user_id, details)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (
                    entry.action,
                    entry.entity_type,
                    entry.entity_id,
                    entry.user_id,
                    Jsonb(entry.details),
                ),
            )
            conn.commit()
