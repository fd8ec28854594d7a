"""Pytest fixtures for payroll engine tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from factories import PERIOD_MONTH, PERIOD_YEAR
from staffhub_payroll.api.app import create_app
from staffhub_payroll.api.dependencies import get_db_session
from staffhub_payroll.config import Settings, get_settings
from staffhub_payroll.database import build_session_factory, create_schema
from staffhub_payroll.models import (
    AppUser,
    AttendanceRecord,
    BonusRecord,
    DeductionRecord,
    Employee,
    LeaveBalance,
    LeaveRecord,
)

# In-memory SQLite shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
def settings() -> Settings:
    """Settings for tests, independent of the process environment."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        engine_version="test",
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="DEBUG",
        min_payroll_year=2020,
        late_penalty_rate=Decimal("0.1"),
        half_day_penalty_rate=Decimal("0"),
    )


@pytest_asyncio.fixture
async def engine():
    """Fresh schema per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    # pysqlite/aiosqlite emit BEGIN lazily, which breaks SAVEPOINT; take over
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    factory = build_session_factory(engine)
    async with factory() as session:
        yield session
        await session.rollback()


# ============================================================================
# Seed data
# ============================================================================


@pytest_asyncio.fixture
async def hr_user(session: AsyncSession) -> AppUser:
    user = AppUser(user_id=uuid4(), role="hr")
    session.add(user)
    await session.commit()
    return user


@pytest_asyncio.fixture
async def admin_user(session: AsyncSession) -> AppUser:
    user = AppUser(user_id=uuid4(), role="admin")
    session.add(user)
    await session.commit()
    return user


@pytest_asyncio.fixture
async def staff_user(session: AsyncSession) -> AppUser:
    user = AppUser(user_id=uuid4(), role="staff")
    session.add(user)
    await session.commit()
    return user


@pytest_asyncio.fixture
async def employees(session: AsyncSession) -> dict[str, Employee]:
    """Three active employees and one inactive one.

    - ada: 3000.00, 2 absences and 1 late arrival in the period
    - grace: 4400.00, 5 days of annual leave with 2 days of balance left
    - alan: 1000.00, 1500.00 of manual deductions and a 200.00 bonus
    - inactive: never picked up by generation
    """
    ada = Employee(
        employee_number="E-001",
        first_name="Ada",
        last_name="Lovelace",
        base_salary=Decimal("3000.00"),
    )
    grace = Employee(
        employee_number="E-002",
        first_name="Grace",
        last_name="Hopper",
        base_salary=Decimal("4400.00"),
    )
    alan = Employee(
        employee_number="E-003",
        first_name="Alan",
        last_name="Turing",
        base_salary=Decimal("1000.00"),
    )
    inactive = Employee(
        employee_number="E-004",
        first_name="Charles",
        last_name="Babbage",
        status="inactive",
        base_salary=Decimal("2500.00"),
    )
    session.add_all([ada, grace, alan, inactive])
    await session.flush()

    session.add_all(
        [
            AttendanceRecord(
                employee_id=ada.employee_id,
                attendance_date=date(2024, 4, 2),
                status="absent",
            ),
            AttendanceRecord(
                employee_id=ada.employee_id,
                attendance_date=date(2024, 4, 3),
                status="absent",
            ),
            AttendanceRecord(
                employee_id=ada.employee_id,
                attendance_date=date(2024, 4, 4),
                status="late",
            ),
            AttendanceRecord(
                employee_id=ada.employee_id,
                attendance_date=date(2024, 4, 5),
                status="present",
            ),
            # Outside the period
            AttendanceRecord(
                employee_id=ada.employee_id,
                attendance_date=date(2024, 3, 29),
                status="absent",
            ),
            LeaveRecord(
                employee_id=grace.employee_id,
                leave_type="annual",
                start_date=date(2024, 4, 8),
                end_date=date(2024, 4, 12),
                days_count=Decimal("5"),
                status="approved",
            ),
            LeaveBalance(
                employee_id=grace.employee_id,
                year=PERIOD_YEAR,
                annual_total=10,
                annual_used=8,
            ),
            DeductionRecord(
                employee_id=alan.employee_id,
                period_month=PERIOD_MONTH,
                period_year=PERIOD_YEAR,
                amount=Decimal("1500.00"),
                description="Equipment",
            ),
            BonusRecord(
                employee_id=alan.employee_id,
                period_month=PERIOD_MONTH,
                period_year=PERIOD_YEAR,
                amount=Decimal("200.00"),
            ),
            # Other period, ignored
            BonusRecord(
                employee_id=alan.employee_id,
                period_month=5,
                period_year=PERIOD_YEAR,
                amount=Decimal("999.00"),
            ),
        ]
    )
    await session.commit()
    return {"ada": ada, "grace": grace, "alan": alan, "inactive": inactive}


# ============================================================================
# API client
# ============================================================================


@pytest_asyncio.fixture
async def client(session: AsyncSession, settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the test session."""
    app = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_settings] = lambda: settings

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
