import argparse
import json
import mimetypes
import sys
from collections.abc import Sequence
from datetime import date
from pathlib import Path

from docvault.config.settings import Settings
from docvault.database.connection import Database
from docvault.database.models import DocumentClass, DocumentRecord
from docvault.database.repositories.document_repository import DocumentRepository
from docvault.ingestion.exceptions import IngestionError
from docvault.ingestion.models import DocumentMetadata, IngestionRequest
from docvault.ingestion.orchestrator import IngestionOrchestrator, build_orchestrator
from docvault.logging.logger import Log
from docvault.renewal.models import RenewalPolicy, RenewalUnit
from docvault.renewal.scheduler import RenewalScheduler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docvault", description="Document ingestion and renewal tooling")
    commands = parser.add_subparsers(dest="command", required=True)

    ingest = commands.add_parser("ingest", help="Ingest a file for an owner")
    ingest.add_argument("path", type=Path)
    ingest.add_argument("--owner", required=True)
    ingest.add_argument("--title", default="")
    ingest.add_argument("--mime-type", help="Defaults to a guess from the file name")
    ingest.add_argument("--folder", default="general")
    ingest.add_argument("--entity-id", help="Attach to an entity; skips deduplication")
    ingest.add_argument("--effective-date", type=date.fromisoformat)
    ingest.add_argument("--renewal-period", type=int)
    ingest.add_argument(
        "--renewal-unit",
        choices=[unit.value for unit in RenewalUnit],
        default=RenewalUnit.MONTHS.value,
    )

    expiring = commands.add_parser("expiring", help="List documents expiring soon")
    expiring.add_argument("--days", type=int, default=30)
    expiring.add_argument("--owner")

    expired = commands.add_parser("expired", help="List expired documents")
    expired.add_argument("--owner")

    delete = commands.add_parser("delete", help="Delete a document")
    delete.add_argument("document_id")
    delete.add_argument("--owner", required=True)

    return parser


def build_request(args: argparse.Namespace) -> IngestionRequest:
    path: Path = args.path
    mime_type = args.mime_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    policy = None
    if args.renewal_period:
        policy = RenewalPolicy(
            has_expiration=True,
            renewal_period=args.renewal_period,
            renewal_unit=RenewalUnit(args.renewal_unit),
        )
    metadata = DocumentMetadata(
        title=args.title,
        effective_date=args.effective_date,
        folder=args.folder,
        document_class=DocumentClass.ENTITY_SCOPED if args.entity_id else DocumentClass.STANDARD,
        entity_id=args.entity_id,
        type_policy=policy,
    )
    return IngestionRequest(
        owner_id=args.owner,
        file_bytes=path.read_bytes(),
        filename=path.name,
        mime_type=mime_type,
        metadata=metadata,
    )


def _describe(record: DocumentRecord, **extra: object) -> str:
    payload: dict[str, object] = {
        "id": record.id,
        "title": record.title,
        "owner_id": record.owner_id,
        "status": record.status.value,
        "expiration_date": record.expiration_date.isoformat() if record.expiration_date else None,
        "processing_degraded": record.processing_degraded,
    }
    payload.update(extra)
    return json.dumps(payload, ensure_ascii=False)


def run(args: argparse.Namespace, orchestrator: IngestionOrchestrator, scheduler: RenewalScheduler) -> int:
    if args.command == "ingest":
        print(_describe(orchestrator.ingest(build_request(args))))
    elif args.command == "expiring":
        for item in scheduler.expiring_within(args.days, owner_id=args.owner):
            print(_describe(
                item.document,
                days_until_expiration=item.days_until_expiration,
                urgency_level=item.urgency_level.value,
            ))
    elif args.command == "expired":
        for entry in scheduler.expired(owner_id=args.owner):
            print(_describe(entry.document, days_expired=entry.days_expired))
    elif args.command == "delete":
        print(_describe(orchestrator.delete_document(args.owner, args.document_id)))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: parse args -> open pool -> build dependencies -> run command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    db = Database.from_settings(settings)

    try:
        orchestrator = build_orchestrator(settings, db)
        scheduler = RenewalScheduler(DocumentRepository(db))
        try:
            return run(args, orchestrator, scheduler)
        except IngestionError as exc:
            Log.error(f"{type(exc).__name__}: {exc}")
            return 1
        finally:
            orchestrator.close()
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
