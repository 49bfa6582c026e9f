"""SQLAlchemy mapping metadata for the compliance domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    Index,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from coitrack.domain.model import ComplianceDocument, CoverageType

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

compliance_document_table = Table(
    "compliance_document",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("employee_id", String, nullable=True),
    Column("external_name", String, nullable=True),
    Column("type", Enum(CoverageType, native_enum=False, length=32), nullable=False),
    Column("issue_date", Date, nullable=False),
    Column("expiration_date", Date, nullable=False),
    Column("policy_number", String, nullable=True),
    Column("insurer_name", String, nullable=True),
    Column("source_file_id", String, nullable=True),
    Column("parsed_insured_name", String, nullable=True),
    Column("document_url", String, nullable=True),
    Column("notes", Text, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    UniqueConstraint("source_file_id"),
    CheckConstraint(
        "(employee_id IS NULL) <> (external_name IS NULL)",
        name="assignee_xor",
    ),
    Index("ix_compliance_document_expiration_date", "expiration_date"),
    Index("ix_compliance_document_employee_id", "employee_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(ComplianceDocument, compliance_document_table)

    configure_mappers()
    return mapper_registry
