from datetime import date, datetime, time
from typing import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from tablebook.infrastructure.repositories import (
    SqlAlchemyBookingRepository,
    SqlAlchemyProfileRepository,
    SqlAlchemyTokenRepository,
    SqlAlchemyUserRepository,
)
from tablebook.models import Base, BookingStatus


@pytest_asyncio.fixture
async def session() -> AsyncIterator[AsyncSession]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    maker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with maker() as s:
        yield s
    await engine.dispose()


async def _book(repo: SqlAlchemyBookingRepository, user_id: int, day: date, at: time) -> int:
    booking = await repo.create(
        user_id=user_id,
        booking_date=day,
        booking_time=at,
        number_of_guests=2,
        occasion="",
        special_requests="",
        status=BookingStatus.CONFIRMED,
    )
    return booking.id


@pytest.mark.asyncio
async def test_user_and_profile_round_trip(session: AsyncSession) -> None:
    users = SqlAlchemyUserRepository(session)
    profiles = SqlAlchemyProfileRepository(session)

    user = await users.create(email="diner@example.com", password_hash="hash")
    await profiles.create(user_id=user.id, email=user.email, full_name="Ada Diner", phone="5551234567")

    assert (await users.get_by_email("diner@example.com")).id == user.id  # type: ignore[union-attr]
    assert await users.get_by_email("other@example.com") is None
    assert (await users.get(user.id)).email == "diner@example.com"  # type: ignore[union-attr]
    profile = await profiles.get(user.id)
    assert profile is not None and profile.full_name == "Ada Diner"


@pytest.mark.asyncio
async def test_bookings_listed_by_date_then_time(session: AsyncSession) -> None:
    repo = SqlAlchemyBookingRepository(session)
    user = await SqlAlchemyUserRepository(session).create(email="a@example.com", password_hash="hash")
    other = await SqlAlchemyUserRepository(session).create(email="b@example.com", password_hash="hash")

    await _book(repo, user.id, date(2026, 10, 23), time(12, 0))
    await _book(repo, user.id, date(2026, 10, 20), time(18, 0))
    await _book(repo, other.id, date(2026, 10, 19), time(12, 0))
    await _book(repo, user.id, date(2026, 10, 20), time(11, 30))

    rows = await repo.list_by_user(user.id)
    assert [(b.date, b.time) for b in rows] == [
        (date(2026, 10, 20), time(11, 30)),
        (date(2026, 10, 20), time(18, 0)),
        (date(2026, 10, 23), time(12, 0)),
    ]
    assert all(b.status == BookingStatus.CONFIRMED for b in rows)


@pytest.mark.asyncio
async def test_get_for_user_scopes_to_owner_and_delete_removes(session: AsyncSession) -> None:
    repo = SqlAlchemyBookingRepository(session)
    user = await SqlAlchemyUserRepository(session).create(email="a@example.com", password_hash="hash")
    booking_id = await _book(repo, user.id, date(2026, 10, 20), time(12, 0))

    assert await repo.get_for_user(booking_id, user.id + 1) is None
    booking = await repo.get_for_user(booking_id, user.id)
    assert booking is not None

    await repo.delete(booking)
    assert await repo.get_for_user(booking_id, user.id) is None
    assert await repo.list_by_user(user.id) == []


@pytest.mark.asyncio
async def test_revoke_token_is_idempotent(session: AsyncSession) -> None:
    tokens = SqlAlchemyTokenRepository(session)
    expires = datetime(2030, 1, 1)

    assert await tokens.is_revoked("jti-1") is False
    await tokens.revoke(jti="jti-1", user_id=1, expires_at=expires)
    await tokens.revoke(jti="jti-1", user_id=1, expires_at=expires)
    assert await tokens.is_revoked("jti-1") is True
    assert await tokens.is_revoked("jti-2") is False
