from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

import pytest

from coitrack.app import ComplianceReport
from coitrack.domain.reconciliation import CommitResult
from coitrack.ui import cli

if TYPE_CHECKING:
    from datetime import date


def test_import_commit_passes_options(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_commit(**kwargs: object) -> CommitResult:
        captured.update(kwargs)
        return CommitResult(imported=2)

    monkeypatch.setattr(cli, "commit_folder_import", fake_commit)

    cli.main(["import", "commit", "--folder", "/srv/certs", "--only", "a.pdf", "b.pdf"])

    assert captured == {"only": ["a.pdf", "b.pdf"], "folder": "/srv/certs", "roster_path": None}


def test_import_commit_defaults_to_all_selected(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_commit(**kwargs: object) -> CommitResult:
        captured.update(kwargs)
        return CommitResult()

    monkeypatch.setattr(cli, "commit_folder_import", fake_commit)

    cli.main(["import", "commit"])

    assert captured["only"] is None


def test_status_logs_summary(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    captured: dict[str, object] = {}

    def fake_report(**kwargs: object) -> ComplianceReport:
        captured.update(kwargs)
        return ComplianceReport()

    monkeypatch.setattr(cli, "compliance_report", fake_report)

    with caplog.at_level(logging.INFO, logger="coitrack.ui.cli"):
        cli.main(["status", "--days", "30"])

    assert captured == {"days": 30}
    assert "Summary: expired=0" in caplog.text


def test_renew_parses_arguments(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    class _Renewed:
        id = "doc"
        expiration_date = "2027-01-15"

    def fake_renew(
        document_id: UUID, expiration_date: date, *, issue_date: date | None
    ) -> _Renewed:
        captured.update(
            document_id=document_id, expiration_date=expiration_date, issue_date=issue_date
        )
        return _Renewed()

    monkeypatch.setattr(cli, "renew_document", fake_renew)
    document_id = "0b7c1d52-6f0e-4a55-9f55-7f8b8f0b6a01"

    cli.main(["renew", "--id", document_id, "--expires", "2027-01-15"])

    assert captured["document_id"] == UUID(document_id)
    assert str(captured["expiration_date"]) == "2027-01-15"
    assert captured["issue_date"] is None


def test_delete_parses_document_id(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    captured: list[UUID] = []

    class _Deleted:
        assignee_label = "employee:emp-1"

    def fake_delete(document_id: UUID) -> _Deleted:
        captured.append(document_id)
        return _Deleted()

    monkeypatch.setattr(cli, "delete_document", fake_delete)
    document_id = "0b7c1d52-6f0e-4a55-9f55-7f8b8f0b6a01"

    with caplog.at_level(logging.INFO, logger="coitrack.ui.cli"):
        cli.main(["delete", "--id", document_id])

    assert captured == [UUID(document_id)]
    assert "No longer tracking employee:emp-1" in caplog.text


def test_deleting_unknown_document_exits_with_code_1(monkeypatch: pytest.MonkeyPatch) -> None:
    def missing(document_id: UUID) -> object:
        raise LookupError(f"No compliance document with id {document_id}")

    monkeypatch.setattr(cli, "delete_document", missing)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["delete", "--id", "0b7c1d52-6f0e-4a55-9f55-7f8b8f0b6a01"])

    assert excinfo.value.code == 1


@pytest.mark.parametrize(
    "argv",
    [
        ["status", "--days", "-1"],
        ["renew", "--id", "not-a-uuid", "--expires", "2027-01-15"],
        ["renew", "--id", "0b7c1d52-6f0e-4a55-9f55-7f8b8f0b6a01", "--expires", "15/01/2027"],
        ["delete", "--id", "not-a-uuid"],
    ],
)
def test_invalid_arguments_exit_with_code_2(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)

    assert excinfo.value.code == 2


def test_failures_exit_with_code_1(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_alerts() -> list[object]:
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(cli, "due_alert_notices", failing_alerts)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["alerts"])

    assert excinfo.value.code == 1
