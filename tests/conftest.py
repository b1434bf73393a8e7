from __future__ import annotations

import os
from datetime import date
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.testclient import TestClient

from app.config.database import Base, configure_sqlite_locking, get_db
from app.main import app
from app.shared.database.models import ClaimSheet, ExpenseItem


def _file_engine(path):
    return create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def deferred_sessions(tmp_path):
    """File-backed SQLite with pysqlite's own deferred BEGIN: reads run outside the write lock."""
    engine = _file_engine(tmp_path / "deferred.db")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def locking_sessions(tmp_path):
    """File-backed SQLite configured like the application engine (BEGIN IMMEDIATE)."""
    engine = configure_sqlite_locking(_file_engine(tmp_path / "locking.db"))
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def seed_claim_sheet(db, claim_number: str = "CLM-001", amounts=(Decimal("100.00"), Decimal("50.50"), Decimal("20.00"))):
    """Claim sheet with one expense per amount, serial numbers 1..N."""
    claim_sheet = ClaimSheet(
        name=f"Sheet {claim_number}",
        claim_number=claim_number,
        claim_type="Travel",
        status="Draft",
        total_amount=sum(amounts, Decimal("0")),
    )
    db.add(claim_sheet)
    db.flush()

    expenses = []
    for serial_no, amount in enumerate(amounts, start=1):
        expense = ExpenseItem(
            claim_sheet_id=claim_sheet.id,
            serial_no=serial_no,
            bill_no=f"B-{claim_number}-{serial_no}",
            date=date(2024, 3, serial_no),
            issued_by=f"Vendor {serial_no}",
            details=f"Item {serial_no}",
            amount=amount,
        )
        db.add(expense)
        expenses.append(expense)

    db.commit()
    return claim_sheet.id, [e.id for e in expenses]


@pytest.fixture()
def seed(session_factory):
    def _seed(claim_number: str = "CLM-001", amounts=(Decimal("100.00"), Decimal("50.50"), Decimal("20.00"))):
        session = session_factory()
        try:
            return seed_claim_sheet(session, claim_number, amounts)
        finally:
            session.close()

    return _seed


@pytest.fixture()
def seed_with():
    """Like ``seed`` but against any session factory (file-backed engines)."""
    def _seed_with(factory, claim_number: str = "CLM-001", amounts=(Decimal("100.00"), Decimal("50.50"), Decimal("20.00"))):
        with factory() as session:
            return seed_claim_sheet(session, claim_number, amounts)

    return _seed_with
