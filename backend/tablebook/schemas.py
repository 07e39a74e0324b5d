from datetime import date, datetime, time

from pydantic import BaseModel, Field, field_serializer

from .domain.validation import ValidationResult
from .models import Booking, BookingStatus, Profile
from .usecases.auth import AuthSession


class SignUpRequest(BaseModel):
    email: str = ""
    password: str = ""
    full_name: str = ""
    phone: str = ""


class SignInRequest(BaseModel):
    email: str
    password: str


class SessionRead(BaseModel):
    user_id: int
    email: str
    access_token: str
    token_type: str = "bearer"
    expires_in: int

    @classmethod
    def from_session(cls, *, session: AuthSession) -> "SessionRead":
        return cls(
            user_id=session.user.id,
            email=session.user.email,
            access_token=session.access_token,
            expires_in=session.expires_in,
        )


class CurrentSession(BaseModel):
    user_id: int
    email: str


class ProfileRead(BaseModel):
    user_id: int
    email: str
    full_name: str
    phone: str

    @classmethod
    def from_db(cls, *, profile: Profile) -> "ProfileRead":
        return cls(user_id=profile.id, email=profile.email, full_name=profile.full_name, phone=profile.phone)


class BookingCreate(BaseModel):
    # Raw strings so that empty or malformed values reach the rule checks.
    date: str = ""
    time: str = ""
    number_of_guests: int = 2
    occasion: str = Field(default="", max_length=100)
    special_requests: str = Field(default="", max_length=500)


class ValidationResultRead(BaseModel):
    valid: bool
    errors: list[str]

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationResultRead":
        return cls(valid=result.valid, errors=list(result.errors))


class BookingRead(BaseModel):
    booking_id: int
    user_id: int
    date: date
    time: time
    number_of_guests: int
    occasion: str
    special_requests: str
    status: BookingStatus
    created_at: datetime

    @field_serializer("time")
    def _ser_time(self, value: time) -> str:
        return value.strftime("%H:%M")

    @classmethod
    def from_db(cls, *, booking: Booking) -> "BookingRead":
        return cls(
            booking_id=booking.id,
            user_id=booking.user_id,
            date=booking.date,
            time=booking.time,
            number_of_guests=booking.number_of_guests,
            occasion=booking.occasion,
            special_requests=booking.special_requests,
            status=booking.status,
            created_at=booking.created_at,
        )
