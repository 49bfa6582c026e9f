"""Create the compliance_document table.

Revision ID: 0001
Revises:
Create Date: 2026-10-18

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "compliance_document",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.String(), nullable=True),
        sa.Column("external_name", sa.String(), nullable=True),
        sa.Column(
            "type",
            sa.Enum(
                "WORKERS_COMP",
                "GENERAL_LIABILITY",
                name="coveragetype",
                native_enum=False,
                length=32,
            ),
            nullable=False,
        ),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("expiration_date", sa.Date(), nullable=False),
        sa.Column("policy_number", sa.String(), nullable=True),
        sa.Column("insurer_name", sa.String(), nullable=True),
        sa.Column("source_file_id", sa.String(), nullable=True),
        sa.Column("parsed_insured_name", sa.String(), nullable=True),
        sa.Column("document_url", sa.String(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_compliance_document"),
        sa.UniqueConstraint("source_file_id", name="uq_compliance_document_source_file_id"),
        sa.CheckConstraint(
            "(employee_id IS NULL) <> (external_name IS NULL)",
            name="ck_compliance_document_assignee_xor",
        ),
    )
    op.create_index(
        "ix_compliance_document_expiration_date",
        "compliance_document",
        ["expiration_date"],
    )
    op.create_index(
        "ix_compliance_document_employee_id",
        "compliance_document",
        ["employee_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_compliance_document_employee_id", table_name="compliance_document")
    op.drop_index("ix_compliance_document_expiration_date", table_name="compliance_document")
    op.drop_table("compliance_document")
