from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from coitrack.app import (
    commit_folder_import,
    compliance_report,
    delete_document,
    due_alert_notices,
    preview_folder_import,
    renew_document,
)
from coitrack.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from coitrack.domain.reconciliation import PreviewResult

log = logging.getLogger(__name__)


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--folder",
        type=str,
        help="Folder of scanned certificates (defaults to COITRACK_IMPORT_FOLDER)",
    )
    parser.add_argument(
        "--roster",
        type=str,
        help="JSON roster export (defaults to COITRACK_ROSTER_PATH)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Track certificate-of-insurance compliance")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Bulk import from a folder")
    import_sub = import_parser.add_subparsers(dest="import_command", required=True)
    preview = import_sub.add_parser("preview", help="Show what an import would do")
    _add_source_arguments(preview)
    commit = import_sub.add_parser("commit", help="Import the default selections")
    _add_source_arguments(commit)
    commit.add_argument(
        "--only",
        nargs="+",
        metavar="ID",
        help="Import only these source file ids",
    )

    status = subparsers.add_parser("status", help="Show compliance status of stored documents")
    status.add_argument(
        "--days",
        type=int,
        help="Only documents expiring within this many days",
    )

    subparsers.add_parser("alerts", help="Show alert notices due today")

    renew = subparsers.add_parser("renew", help="Record a renewed certificate")
    renew.add_argument("--id", dest="document_id", type=str, required=True, help="Document id")
    renew.add_argument(
        "--expires",
        type=str,
        required=True,
        help="New expiration date (YYYY-MM-DD)",
    )
    renew.add_argument("--issued", type=str, help="New issue date (YYYY-MM-DD)")

    delete = subparsers.add_parser("delete", help="Delete a stored document")
    delete.add_argument("--id", dest="document_id", type=str, required=True, help="Document id")

    return parser.parse_args(list(argv))


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid date (expected YYYY-MM-DD): {value}") from exc


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _validate(args: argparse.Namespace) -> None:
    if args.command == "status" and args.days is not None and args.days < 0:
        raise ValueError("--days must be non-negative")
    if args.command == "renew":
        args.document_uuid = _parse_uuid(args.document_id)
        args.expires_on = _parse_date(args.expires)
        args.issued_on = _parse_date(args.issued) if args.issued else None
    if args.command == "delete":
        args.document_uuid = _parse_uuid(args.document_id)


def _log_preview(preview: PreviewResult) -> None:
    for candidate, decision in zip(preview.candidates, preview.decisions, strict=True):
        assignment = decision.assignment
        assignee = assignment.employee_id or f"external '{assignment.external_name}'"
        log.info(
            "%s %s: %s -> %s (%s %d)%s",
            "[x]" if decision.selected else "[ ]",
            candidate.source_file_id,
            candidate.parsed.display_name or "<no name>",
            assignee,
            candidate.match.match_type.value,
            candidate.match.confidence,
            " already imported" if candidate.already_imported else "",
        )
    for error in preview.errors:
        log.warning("Skipped %s: %s", error.file_name, error.message)
    log.info(
        "Preview: %d candidate(s), %d selected, %d already imported, %d error(s)",
        len(preview.candidates),
        preview.selected_count,
        preview.already_imported,
        len(preview.errors),
    )


def _run(args: argparse.Namespace) -> None:
    if args.command == "import" and args.import_command == "preview":
        _log_preview(preview_folder_import(folder=args.folder, roster_path=args.roster))
    elif args.command == "import" and args.import_command == "commit":
        result = commit_folder_import(only=args.only, folder=args.folder, roster_path=args.roster)
        for outcome in result.outcomes:
            if outcome.error is not None:
                log.info("%s %s: %s", outcome.status.value, outcome.source_file_id, outcome.error)
        log.info(
            "Import finished: imported=%s, skipped=%s, failed=%s",
            result.imported,
            result.skipped,
            result.failed,
        )
    elif args.command == "status":
        report = compliance_report(days=args.days)
        for entry in report.entries:
            log.info(
                "%s %s %s expires %s: %s (%d days, %s)",
                entry.document.id,
                entry.document.assignee_label,
                entry.document.type.value,
                entry.document.expiration_date.isoformat(),
                entry.reading.status.value,
                entry.reading.days_remaining,
                entry.reading.cadence.label.value,
            )
        summary = report.summary
        log.info(
            "Summary: expired=%s, today=%s, this_week=%s, this_month=%s, total=%s",
            summary.expired,
            summary.expiring_today,
            summary.expiring_this_week,
            summary.expiring_this_month,
            summary.total,
        )
    elif args.command == "alerts":
        notices = due_alert_notices()
        for notice in notices:
            log.info("%s (%s, document %s)", notice.subject, notice.assignee, notice.document_id)
        log.info("%d alert(s) due", len(notices))
    elif args.command == "renew":
        document = renew_document(
            args.document_uuid,
            args.expires_on,
            issue_date=args.issued_on,
        )
        log.info("Document %s now expires %s", document.id, document.expiration_date)
    elif args.command == "delete":
        document = delete_document(args.document_uuid)
        log.info("No longer tracking %s", document.assignee_label)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    try:
        _run(parsed_args)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
