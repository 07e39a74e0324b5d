"""
Booking and registration rules.

Every function here is pure: it reads nothing but its arguments (and the local
date when `today` is not supplied) and never raises. Rejections are reported
as booleans or as an ordered list of user-facing messages.
"""

import re
from dataclasses import dataclass, field
from datetime import date, time, timedelta
from typing import Any

from ..utils.time import local_today, parse_local_date, parse_local_time

_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_PHONE_RE = re.compile(r"[0-9\-+\s()]{7,}")

MIN_PASSWORD_LENGTH = 6

MSG_MISSING_DATE_TIME = "Please select a date and time"
MSG_INVALID_DATE = "Please select a valid date"
MSG_PAST_DATE = "Cannot book in the past"
MSG_TOO_FAR_AHEAD = "Can only book up to 30 days in advance"
MSG_OUTSIDE_HOURS = "Bookings available between 11:00 AM and 9:00 PM"
MSG_GUEST_COUNT = "Number of guests must be between 1 and 6"

_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@dataclass(frozen=True)
class BookingPolicy:
    horizon_days: int = 30
    opening: time = time(11, 0)
    last_seating: time = time(21, 0)
    closed_weekdays: frozenset[int] = field(default_factory=lambda: frozenset({5, 6}))
    min_guests: int = 1
    max_guests: int = 6


DEFAULT_POLICY = BookingPolicy()


@dataclass(frozen=True)
class BookingRequest:
    date: str
    time: str
    guest_count: int


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: tuple[str, ...] = ()


def validate_email(value: str) -> bool:
    return isinstance(value, str) and _EMAIL_RE.fullmatch(value) is not None


def validate_password(value: str) -> bool:
    return isinstance(value, str) and len(value) >= MIN_PASSWORD_LENGTH


def validate_phone_number(value: str) -> bool:
    return isinstance(value, str) and _PHONE_RE.fullmatch(value) is not None


def _date_violation(selected: date, today: date, policy: BookingPolicy) -> str | None:
    """Return the first rule `selected` breaks, in reporting precedence."""
    if selected < today:
        return MSG_PAST_DATE
    if selected > today + timedelta(days=policy.horizon_days):
        return MSG_TOO_FAR_AHEAD
    weekday = selected.weekday()
    if weekday in policy.closed_weekdays:
        return f"Bookings currently closed on {_DAY_NAMES[weekday]}s"
    return None


def validate_date(value: str, *, today: date | None = None, policy: BookingPolicy = DEFAULT_POLICY) -> bool:
    if not value:
        return False
    selected = parse_local_date(value)
    if selected is None:
        return False
    return _date_violation(selected, today or local_today(), policy) is None


def validate_time(value: str, *, policy: BookingPolicy = DEFAULT_POLICY) -> bool:
    if not value:
        return False
    parsed = parse_local_time(value)
    if parsed is None:
        return False
    # Seconds are ignored; only hour and minute decide the window.
    hhmm = time(parsed.hour, parsed.minute)
    return policy.opening <= hhmm <= policy.last_seating


def validate_guest_count(value: Any, *, policy: BookingPolicy = DEFAULT_POLICY) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return policy.min_guests <= value <= policy.max_guests


def validate_booking_form(
    date: str,
    time: str,
    guest_count: Any,
    *,
    today: date | None = None,
    policy: BookingPolicy = DEFAULT_POLICY,
) -> ValidationResult:
    """
    Check a booking request and collect every message the diner should see.

    An empty date or time yields only the generic prompt for the date/time
    part. Otherwise the date and the time are checked independently, so an
    invalid date and an out-of-hours time are both reported. The guest count
    is always checked last.
    """
    errors: list[str] = []

    if not date or not time:
        errors.append(MSG_MISSING_DATE_TIME)
    else:
        current = today or local_today()
        if not validate_date(date, today=current, policy=policy):
            selected = parse_local_date(date)
            if selected is None:
                errors.append(MSG_INVALID_DATE)
            else:
                errors.append(_date_violation(selected, current, policy) or MSG_INVALID_DATE)

        if not validate_time(time, policy=policy):
            errors.append(MSG_OUTSIDE_HOURS)

    if not validate_guest_count(guest_count, policy=policy):
        errors.append(MSG_GUEST_COUNT)

    return ValidationResult(valid=not errors, errors=tuple(errors))


def validate_booking_request(
    request: BookingRequest,
    *,
    today: date | None = None,
    policy: BookingPolicy = DEFAULT_POLICY,
) -> ValidationResult:
    return validate_booking_form(request.date, request.time, request.guest_count, today=today, policy=policy)
