from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timezone
from decimal import Decimal

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.api.deps import get_storage
from app.db.base import Base
from app.main import app
from app.models.enums import TradeDirection, TradeStatus
from app.schemas.trade import TradeCreate, TradeRead
from app.storage.database import DatabaseStorage
from app.storage.memory import MemStorage

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture()
async def async_session() -> AsyncGenerator[AsyncSession, None]:
    engine = create_async_engine(TEST_DB_URL, future=True)
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with async_session() as session:
        yield session
    await engine.dispose()


@pytest.fixture()
def memory_storage() -> MemStorage:
    return MemStorage()


@pytest_asyncio.fixture()
async def db_storage(async_session: AsyncSession) -> DatabaseStorage:
    return DatabaseStorage(async_session)


@pytest_asyncio.fixture()
async def client(memory_storage: MemStorage) -> AsyncGenerator[httpx.AsyncClient, None]:
    app.dependency_overrides[get_storage] = lambda: memory_storage
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


def at(year: int, month: int, day: int, hour: int = 10, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture()
def make_trade() -> Callable[..., TradeCreate]:
    def _make(**overrides) -> TradeCreate:
        values = {
            "symbol": "AAPL",
            "direction": TradeDirection.LONG,
            "entry_price": "100",
            "quantity": "10",
            "entry_time": at(2024, 3, 4),
        }
        values.update(overrides)
        return TradeCreate(**values)

    return _make


@pytest.fixture()
def closed_trade() -> Callable[..., TradeRead]:
    """Builds stored trade records directly, for the pure statistics functions."""
    counter = iter(range(1, 10_000))

    def _make(pnl: str | None, entry_time: datetime | None = None, status: TradeStatus = TradeStatus.CLOSED) -> TradeRead:
        return TradeRead(
            id=next(counter),
            symbol="ES",
            direction=TradeDirection.LONG,
            entry_price=Decimal("100"),
            quantity=Decimal("1"),
            entry_time=entry_time or at(2024, 3, 4),
            pnl=Decimal(pnl) if pnl is not None else None,
            status=status,
        )

    return _make
