from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import inspect

from coitrack.adapters.sqlalchemy.mappings import compliance_document_table
from coitrack.adapters.sqlalchemy.migrations import upgrade_head

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def _unique_columns(engine: Engine) -> list[list[str]]:
    return [
        constraint["column_names"]
        for constraint in inspect(engine).get_unique_constraints("compliance_document")
    ]


def test_migration_creates_compliance_document_table(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)

    columns = {column["name"] for column in inspector.get_columns("compliance_document")}
    assert columns == set(compliance_document_table.columns.keys())
    indexes = {index["name"] for index in inspector.get_indexes("compliance_document")}
    assert {
        "ix_compliance_document_expiration_date",
        "ix_compliance_document_employee_id",
    } <= indexes
    assert ["source_file_id"] in _unique_columns(sqlite_engine)


def test_migration_is_repeatable(sqlite_engine: Engine) -> None:
    upgrade_head(engine=sqlite_engine)

    assert "compliance_document" in inspect(sqlite_engine).get_table_names()
