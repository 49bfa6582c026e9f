"""Derive compliance status and alert cadence from an expiration date.

Nothing here is stored: status, cadence and notices are recomputed from
``(expiration_date, now)`` on every read.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Protocol

from coitrack.domain.model import AlertSeverity, CadenceLabel, ComplianceStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from coitrack.domain.model import ComplianceDocument, CoverageType

MONTH_LEAD_DAYS = 30
TWO_WEEK_LEAD_DAYS = 14
DAILY_FROM_DAYS = 7


class Clock(Protocol):
    def __call__(self) -> date: ...


def _today() -> date:
    return date.today()


@dataclass(frozen=True, slots=True)
class AlertCadence:
    label: CadenceLabel
    severity: AlertSeverity


@dataclass(frozen=True, slots=True)
class ComplianceReading:
    """Status of one expiration date as seen on one day."""

    status: ComplianceStatus
    days_remaining: int
    cadence: AlertCadence
    alert_due: bool


@dataclass(frozen=True, slots=True, kw_only=True)
class AlertNotice:
    document_id: str
    assignee: str
    coverage_type: CoverageType
    expiration_date: date
    days_remaining: int
    severity: AlertSeverity
    subject: str


@dataclass(frozen=True, slots=True, kw_only=True)
class AlertSummary:
    expired: int = 0
    expiring_today: int = 0
    expiring_this_week: int = 0
    expiring_this_month: int = 0
    total: int = 0


_NO_ALERT = AlertCadence(CadenceLabel.NONE, AlertSeverity.NONE)
_MONTH_BEFORE = AlertCadence(CadenceLabel.MONTH_BEFORE, AlertSeverity.LOW)
_TWO_WEEKS = AlertCadence(CadenceLabel.TWO_WEEKS, AlertSeverity.MEDIUM)
_DAILY = AlertCadence(CadenceLabel.DAILY, AlertSeverity.HIGH)
_DAILY_CRITICAL = AlertCadence(CadenceLabel.DAILY, AlertSeverity.CRITICAL)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def days_until(expiration_date: date | datetime, now: date | datetime) -> int:
    """Whole calendar days from ``now`` to ``expiration_date``; negative once expired."""
    return (_as_date(expiration_date) - _as_date(now)).days


def status_for(days: int) -> ComplianceStatus:
    if days < 0:
        return ComplianceStatus.EXPIRED
    if days <= DAILY_FROM_DAYS:
        return ComplianceStatus.EXPIRES_IMMINENT
    if days <= TWO_WEEK_LEAD_DAYS:
        return ComplianceStatus.EXPIRES_SOON_2W
    if days <= MONTH_LEAD_DAYS:
        return ComplianceStatus.EXPIRES_SOON_1M
    return ComplianceStatus.ACTIVE


def cadence_for(days: int) -> AlertCadence:
    if days <= 0:
        return _DAILY_CRITICAL
    if days <= DAILY_FROM_DAYS:
        return _DAILY
    if days <= TWO_WEEK_LEAD_DAYS:
        return _TWO_WEEKS
    if days <= MONTH_LEAD_DAYS:
        return _MONTH_BEFORE
    return _NO_ALERT


def _alert_due(days: int, cadence: AlertCadence) -> bool:
    match cadence.label:
        case CadenceLabel.DAILY:
            return True
        case CadenceLabel.TWO_WEEKS:
            return days == TWO_WEEK_LEAD_DAYS
        case CadenceLabel.MONTH_BEFORE:
            return days == MONTH_LEAD_DAYS
        case _:
            return False


def classify(
    expiration_date: date | datetime,
    *,
    now: date | datetime | None = None,
    clock: Clock = _today,
) -> ComplianceReading:
    """Classify ``expiration_date`` relative to ``now`` (``clock()`` when omitted).

    Lead alerts fire once, on the 30-day and 14-day boundaries; from seven
    days out alerts are daily and stay daily after expiry until renewal.
    """

    days = days_until(expiration_date, now if now is not None else clock())
    cadence = cadence_for(days)
    return ComplianceReading(
        status=status_for(days),
        days_remaining=days,
        cadence=cadence,
        alert_due=_alert_due(days, cadence),
    )


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def _subject(days: int) -> str:
    if days < 0:
        return f"URGENT: COI Document EXPIRED {_plural(-days, 'day')} ago"
    if days == 0:
        return "URGENT: COI Document EXPIRES TODAY"
    if days < DAILY_FROM_DAYS:
        return f"URGENT: COI Document expires in {_plural(days, 'day')}"
    if days == DAILY_FROM_DAYS:
        return "COI Document expires in 1 week"
    if days == TWO_WEEK_LEAD_DAYS:
        return "COI Document expires in 2 weeks"
    return f"COI Document expires in {_plural(days, 'day')}"


def alert_notice(
    document: ComplianceDocument,
    *,
    now: date | datetime | None = None,
    clock: Clock = _today,
) -> AlertNotice | None:
    """Notice for ``document`` when its cadence calls for an alert today."""

    reading = classify(document.expiration_date, now=now, clock=clock)
    if not reading.alert_due:
        return None
    severity = reading.cadence.severity
    kind = document.type.value.replace("_", " ")
    return AlertNotice(
        document_id=str(document.id),
        assignee=document.assignee_label,
        coverage_type=document.type,
        expiration_date=document.expiration_date,
        days_remaining=reading.days_remaining,
        severity=severity,
        subject=f"[{severity.name}] {_subject(reading.days_remaining)} - {kind}",
    )


def due_alerts(
    documents: Iterable[ComplianceDocument],
    *,
    now: date | datetime | None = None,
    clock: Clock = _today,
) -> list[AlertNotice]:
    """Notices due today, most severe first."""

    today = now if now is not None else clock()
    notices = [
        notice
        for document in documents
        if (notice := alert_notice(document, now=today)) is not None
    ]
    notices.sort(key=lambda notice: (-notice.severity, notice.days_remaining))
    return notices


def summarize(
    documents: Iterable[ComplianceDocument],
    *,
    now: date | datetime | None = None,
    clock: Clock = _today,
) -> AlertSummary:
    today = now if now is not None else clock()
    expired = expiring_today = this_week = this_month = total = 0
    for document in documents:
        total += 1
        days = days_until(document.expiration_date, today)
        if days < 0:
            expired += 1
        elif days == 0:
            expiring_today += 1
        elif days <= DAILY_FROM_DAYS:
            this_week += 1
        elif days <= MONTH_LEAD_DAYS:
            this_month += 1
    return AlertSummary(
        expired=expired,
        expiring_today=expiring_today,
        expiring_this_week=this_week,
        expiring_this_month=this_month,
        total=total,
    )


def expiring_within(
    documents: Iterable[ComplianceDocument],
    days: int,
    *,
    now: date | datetime | None = None,
    clock: Clock = _today,
) -> list[ComplianceDocument]:
    """Documents expiring in ``0..days`` days, soonest first. Expired ones are excluded."""

    if days < 0:
        raise ValueError("days must be non-negative")
    today = now if now is not None else clock()
    selected = [
        document
        for document in documents
        if 0 <= days_until(document.expiration_date, today) <= days
    ]
    selected.sort(key=lambda document: document.expiration_date)
    return selected
