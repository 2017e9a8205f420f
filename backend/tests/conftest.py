"""
Pytest configuration and fixtures.
"""
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"

from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Any, AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import app.models.domain  # noqa: E402,F401
from app.db.base import Base  # noqa: E402
from app.models.domain import Funder, Funding, Lender, Merchant, Syndicator  # noqa: E402
from app.repositories import embed  # noqa: E402
from app.services.schedule import HolidayCalendar, PaybackScheduleEngine  # noqa: E402


@pytest.fixture(scope="session")
def schedule_engine() -> PaybackScheduleEngine:
    """Schedule engine over a small holiday window."""
    return PaybackScheduleEngine(HolidayCalendar(start_year=2023, end_year=2026))


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, Any]:
    """Create a fresh in-memory database session per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )

    async with session_factory() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest_asyncio.fixture
async def parties(db: AsyncSession) -> dict[str, Any]:
    """Funder with a lender, a merchant and a syndicator."""
    funder = Funder(name="Acme Capital", email="ops@acme.test", phone="5550100")
    merchant = Merchant(name="Joe's Pizza", email="joe@pizza.test", phone="5550111")
    syndicator = Syndicator(name="Blue Partners", email="deals@blue.test")
    db.add_all([funder, merchant, syndicator])
    await db.flush()

    lender = Lender(funder_id=funder.id, name="Acme Lending LLC", email="lend@acme.test")
    db.add(lender)
    await db.commit()

    return {"funder": funder, "merchant": merchant, "lender": lender, "syndicator": syndicator}


@pytest_asyncio.fixture
async def funding(db: AsyncSession, parties: dict[str, Any]) -> Funding:
    """Funding of 10,000 paid back as 14,000."""
    funder, merchant, lender = parties["funder"], parties["merchant"], parties["lender"]
    funding = Funding(
        name="Joe's Pizza #1",
        identifier="F-1001",
        **embed("funder", funder),
        **embed("lender", lender),
        **embed("merchant", merchant),
        funded_amount=Decimal("10000.00"),
        payback_amount=Decimal("14000.00"),
    )
    db.add(funding)
    await db.commit()
    return funding


@pytest.fixture
def plan_data() -> dict[str, Any]:
    """Weekday plan of 10 paybacks collecting 1,000 from Monday 2024-06-17."""
    return {
        "frequency": "DAILY",
        "payday_list": [5, 1, 2, 3, 4],
        "avoid_holiday": True,
        "start_date": date(2024, 6, 17),
        "total_amount": Decimal("1000.00"),
        "payback_count": 10,
    }
