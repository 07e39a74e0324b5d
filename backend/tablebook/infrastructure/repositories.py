from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import List, Optional

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.repositories import BookingRepository, ProfileRepository, TokenRepository, UserRepository
from ..models import Booking, BookingStatus, Profile, RevokedToken, User


def _utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.scalar(select(User).where(User.email == email))
        return result if isinstance(result, User) else None

    async def get(self, user_id: int) -> User | None:
        result = await self.session.scalar(select(User).where(User.id == user_id))
        return result if isinstance(result, User) else None

    async def create(self, *, email: str, password_hash: str) -> User:
        now = _utc_now_naive()
        user = User(email=email, password_hash=password_hash, created_at=now, updated_at=now)
        self.session.add(user)
        await self.session.flush()
        return user


class SqlAlchemyProfileRepository(ProfileRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, *, user_id: int, email: str, full_name: str, phone: str) -> Profile:
        profile = Profile(
            id=user_id,
            email=email,
            full_name=full_name,
            phone=phone,
            created_at=_utc_now_naive(),
        )
        self.session.add(profile)
        await self.session.flush()
        return profile

    async def get(self, user_id: int) -> Profile | None:
        result = await self.session.scalar(select(Profile).where(Profile.id == user_id))
        return result if isinstance(result, Profile) else None


class SqlAlchemyTokenRepository(TokenRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def is_revoked(self, jti: str) -> bool:
        return await self.session.scalar(select(RevokedToken.jti).where(RevokedToken.jti == jti)) is not None

    async def revoke(self, *, jti: str, user_id: int, expires_at: datetime) -> None:
        if await self.is_revoked(jti):
            return
        self.session.add(
            RevokedToken(jti=jti, user_id=user_id, expires_at=expires_at, revoked_at=_utc_now_naive())
        )
        await self.session.flush()


class SqlAlchemyBookingRepository(BookingRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        *,
        user_id: int,
        booking_date: date,
        booking_time: time,
        number_of_guests: int,
        occasion: str,
        special_requests: str,
        status: BookingStatus,
    ) -> Booking:
        booking = Booking(
            user_id=user_id,
            date=booking_date,
            time=booking_time,
            number_of_guests=number_of_guests,
            occasion=occasion,
            special_requests=special_requests,
            status=status,
            created_at=_utc_now_naive(),
        )
        self.session.add(booking)
        await self.session.flush()
        return booking

    async def list_by_user(self, user_id: int) -> List[Booking]:
        stmt: Select[tuple[Booking]] = (
            select(Booking)
            .where(Booking.user_id == user_id)
            .order_by(Booking.date.asc(), Booking.time.asc())
        )
        rows = await self.session.scalars(stmt)
        return list(rows.all())

    async def get_for_user(self, booking_id: int, user_id: int) -> Optional[Booking]:
        stmt = select(Booking).where(Booking.id == booking_id, Booking.user_id == user_id)
        result = await self.session.scalar(stmt)
        return result if isinstance(result, Booking) else None

    async def delete(self, booking: Booking) -> None:
        await self.session.delete(booking)
        await self.session.flush()
