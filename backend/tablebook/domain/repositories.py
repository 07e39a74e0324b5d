from __future__ import annotations

from datetime import date, datetime, time
from typing import Protocol

from ..models import Booking, BookingStatus, Profile, User


class UserRepository(Protocol):
    async def get_by_email(self, email: str) -> User | None: ...

    async def get(self, user_id: int) -> User | None: ...

    async def create(self, *, email: str, password_hash: str) -> User: ...


class ProfileRepository(Protocol):
    async def create(self, *, user_id: int, email: str, full_name: str, phone: str) -> Profile: ...

    async def get(self, user_id: int) -> Profile | None: ...


class TokenRepository(Protocol):
    async def is_revoked(self, jti: str) -> bool: ...

    async def revoke(self, *, jti: str, user_id: int, expires_at: datetime) -> None: ...


class BookingRepository(Protocol):
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
    ) -> Booking: ...

    async def list_by_user(self, user_id: int) -> list[Booking]: ...

    async def get_for_user(self, booking_id: int, user_id: int) -> Booking | None: ...

    async def delete(self, booking: Booking) -> None: ...
