from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from coitrack.adapters.sqlalchemy import start_mappers
from coitrack.adapters.sqlalchemy.migrations import upgrade_head
from coitrack.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyComplianceUnitOfWork,
    shutdown,
    startup,
)
from tests.helpers.documents import FakeStore, make_person

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from coitrack.domain.model import PersonRecord


@pytest.fixture
def roster() -> tuple[PersonRecord, ...]:
    return (
        make_person("emp-1", "John", "Smith", "john.smith@example.com"),
        make_person("emp-2", "Christopher", "Lee", "chris.lee@example.com"),
        make_person("emp-3", "Maria", "Garcia"),
        make_person("emp-4", "Jane", "Doe", "jane@example.com"),
    )


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyComplianceUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyComplianceUnitOfWork:
        return SqlAlchemyComplianceUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
