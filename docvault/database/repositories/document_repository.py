from datetime import date
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from docvault.classification.models import ClassificationResult
from docvault.database.connection import Database
from docvault.database.models import DocumentClass, DocumentRecord, DocumentStatus
from docvault.ingestion.exceptions import DocumentNotFoundError

_COLUMNS = """
    id, title, description, owner_id, content_hash, mime_type, file_name,
    storage_path, original_size_bytes, stored_size_bytes, status,
    document_class, entity_id, category_id, tags, extracted_text,
    classification, processing_degraded, is_public, effective_date,
    expiration_date, has_custom_renewal, custom_renewal_period,
    custom_renewal_unit, created_at, updated_at
"""

# Archived and rejected documents are never renewal candidates.
_RENEWABLE = "status NOT IN ('archived', 'rejected') AND expiration_date IS NOT NULL"


class DocumentRepository:
    """Database operations for the documents table."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def insert(self, record: DocumentRecord) -> DocumentRecord:
        """Insert a new document and return it with its generated id and timestamps."""
        classification = (
            Jsonb(record.classification.to_dict())
            if record.classification is not None
            else None
        )
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO documents (
                        title, description, owner_id, content_hash, mime_type,
                        file_name, storage_path, original_size_bytes,
                        stored_size_bytes, status, document_class, entity_id,
                        category_id, tags, extracted_text, classification,
                        processing_degraded, is_public, effective_date,
                        expiration_date, has_custom_renewal,
                        custom_renewal_period, custom_renewal_unit
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s,
                            %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        record.title,
                        record.description,
                        record.owner_id,
                        record.content_hash,
                        record.mime_type,
                        record.file_name,
                        record.storage_path,
                        record.original_size_bytes,
                        record.stored_size_bytes,
                        record.status.value,
                        record.document_class.value,
                        record.entity_id,
                        record.category_id,
                        sorted(record.tags),
                        record.extracted_text,
                        classification,
                        record.processing_degraded,
                        record.is_public,
                        record.effective_date,
                        record.expiration_date,
                        record.has_custom_renewal,
                        record.custom_renewal_period,
                        record.custom_renewal_unit,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT ... RETURNING produced no row")
        return _to_record(row)

    def find_by_id(self, document_id: str) -> DocumentRecord:
        """Find a document by ID.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE id = %s",
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _to_record(row)

    def find_by_hash(self, owner_id: str, content_hash: str) -> DocumentRecord | None:
        """Find the owner's standard document with identical content, if any."""
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM documents
                    WHERE owner_id = %s
                      AND content_hash = %s
                      AND document_class = %s
                    ORDER BY created_at
                    LIMIT 1
                    """,
                    (owner_id, content_hash, DocumentClass.STANDARD.value),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return _to_record(row)

    def delete(self, document_id: str) -> None:
        """Delete a document row.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with self._db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM documents WHERE id = %s", (document_id,))
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()

    def update_status(self, document_id: str, status: DocumentStatus) -> None:
        """Persist a new status.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with self._db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET status = %s, updated_at = NOW()
                    WHERE id = %s
                    """,
                    (status.value, document_id),
                )
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()

    def find_expiring_between(
        self, start: date, end: date, owner_id: str | None = None
    ) -> list[DocumentRecord]:
        """Renewable documents whose expiration date lies in [start, end]."""
        query = f"""
            SELECT {_COLUMNS}
            FROM documents
            WHERE {_RENEWABLE}
              AND expiration_date BETWEEN %s AND %s
        """
        params: list[Any] = [start, end]
        if owner_id is not None:
            query += " AND owner_id = %s"
            params.append(owner_id)
        return self._fetch_all(query + " ORDER BY expiration_date", params)

    def find_expired_before(
        self, day: date, owner_id: str | None = None
    ) -> list[DocumentRecord]:
        """Renewable documents whose expiration date is strictly before ``day``."""
        query = f"""
            SELECT {_COLUMNS}
            FROM documents
            WHERE {_RENEWABLE}
              AND expiration_date < %s
        """
        params: list[Any] = [day]
        if owner_id is not None:
            query += " AND owner_id = %s"
            params.append(owner_id)
        return self._fetch_all(query + " ORDER BY expiration_date", params)

    def _fetch_all(self, query: str, params: list[Any]) -> list[DocumentRecord]:
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, params)
                rows = cur.fetchall()
        return [_to_record(row) for row in rows]


def _to_record(row: dict[str, Any]) -> DocumentRecord:
    classification = row["classification"]
    return DocumentRecord(
        id=str(row["id"]),
        title=row["title"],
        description=row["description"],
        owner_id=str(row["owner_id"]),
        content_hash=row["content_hash"],
        mime_type=row["mime_type"],
        file_name=row["file_name"],
        storage_path=row["storage_path"],
        original_size_bytes=row["original_size_bytes"],
        stored_size_bytes=row["stored_size_bytes"],
        status=DocumentStatus(row["status"]),
        document_class=DocumentClass(row["document_class"]),
        entity_id=str(row["entity_id"]) if row["entity_id"] is not None else None,
        category_id=str(row["category_id"]) if row["category_id"] is not None else None,
        tags=frozenset(row["tags"] or ()),
        extracted_text=row["extracted_text"] or "",
        classification=(
            ClassificationResult.from_dict(classification)
            if classification is not None
            else None
        ),
        processing_degraded=row["processing_degraded"],
        is_public=row["is_public"],
        effective_date=row["effective_date"],
        expiration_date=row["expiration_date"],
        has_custom_renewal=row["has_custom_renewal"],
        custom_renewal_period=row["custom_renewal_period"],
        custom_renewal_unit=row["custom_renewal_unit"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
