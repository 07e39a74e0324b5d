from datetime import date
from typing import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from tablebook.config import get_settings
from tablebook.deps import get_session, get_today
from tablebook.main import app
from tablebook.models import Base

# Monday
TODAY = date(2026, 10, 19)

SIGNUP = {
    "email": "diner@example.com",
    "password": "secret123",
    "full_name": "Ada Diner",
    "phone": "+1 (555) 123-4567",
}


@pytest.fixture(autouse=True)
def _auth_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTH_SECRET", "testsecret")
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def client() -> AsyncIterator[AsyncClient]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    maker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    async def override_get_session() -> AsyncIterator[AsyncSession]:
        async with maker() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_today] = lambda: TODAY
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
        await engine.dispose()


async def _signup(client: AsyncClient) -> dict[str, str]:
    res = await client.post("/auth/signup", json=SIGNUP)
    assert res.status_code == 201
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


@pytest.mark.asyncio
async def test_signup_book_list_cancel_signout(client: AsyncClient) -> None:
    auth = await _signup(client)

    later = await client.post(
        "/bookings",
        json={"date": "2026-10-23", "time": "19:30", "number_of_guests": 4, "occasion": "Birthday"},
        headers=auth,
    )
    assert later.status_code == 201
    sooner = await client.post(
        "/bookings",
        json={"date": "2026-10-20", "time": "12:00", "number_of_guests": 2},
        headers=auth,
    )
    assert sooner.status_code == 201
    assert sooner.json()["time"] == "12:00"

    listed = await client.get("/me/bookings", headers=auth)
    assert listed.status_code == 200
    assert [b["date"] for b in listed.json()] == ["2026-10-20", "2026-10-23"]

    booking_id = sooner.json()["booking_id"]
    cancelled = await client.delete(f"/me/bookings/{booking_id}", headers=auth)
    assert cancelled.status_code == 204
    again = await client.delete(f"/me/bookings/{booking_id}", headers=auth)
    assert again.status_code == 404

    listed = await client.get("/me/bookings", headers=auth)
    assert [b["booking_id"] for b in listed.json()] == [later.json()["booking_id"]]

    current = await client.get("/auth/session", headers=auth)
    assert current.json() == {"user_id": later.json()["user_id"], "email": "diner@example.com"}

    signed_out = await client.post("/auth/signout", headers=auth)
    assert signed_out.status_code == 204
    rejected = await client.get("/auth/session", headers=auth)
    assert rejected.status_code == 401
    blocked = await client.post(
        "/bookings",
        json={"date": "2026-10-20", "time": "12:00", "number_of_guests": 2},
        headers=auth,
    )
    assert blocked.status_code == 401


@pytest.mark.asyncio
async def test_rule_violations_are_reported_and_not_stored(client: AsyncClient) -> None:
    auth = await _signup(client)

    res = await client.post(
        "/bookings",
        json={"date": "2026-10-24", "time": "21:30", "number_of_guests": 7},
        headers=auth,
    )
    assert res.status_code == 422
    assert res.json()["detail"]["errors"] == [
        "Bookings currently closed on Saturdays",
        "Bookings available between 11:00 AM and 9:00 PM",
        "Number of guests must be between 1 and 6",
    ]
    listed = await client.get("/me/bookings", headers=auth)
    assert listed.json() == []


@pytest.mark.asyncio
async def test_signin_profile_and_duplicate_signup(client: AsyncClient) -> None:
    await _signup(client)

    duplicate = await client.post("/auth/signup", json=SIGNUP)
    assert duplicate.status_code == 409

    bad = await client.post("/auth/signin", json={"email": SIGNUP["email"], "password": "wrong-password"})
    assert bad.status_code == 401

    signed_in = await client.post("/auth/signin", json={"email": SIGNUP["email"], "password": SIGNUP["password"]})
    assert signed_in.status_code == 200
    auth = {"Authorization": f"Bearer {signed_in.json()['access_token']}"}

    profile = await client.get("/me/profile", headers=auth)
    assert profile.status_code == 200
    assert profile.json()["full_name"] == "Ada Diner"
