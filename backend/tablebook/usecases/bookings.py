from datetime import date

from ..domain.errors import BookingNotFoundError, BookingValidationError
from ..domain.repositories import BookingRepository
from ..domain.validation import MSG_MISSING_DATE_TIME, validate_booking_form
from ..models import Booking, BookingStatus
from ..utils.time import parse_local_date, parse_local_time


async def create_booking(
    booking_repo: BookingRepository,
    *,
    user_id: int,
    booking_date: str,
    booking_time: str,
    number_of_guests: int,
    occasion: str = "",
    special_requests: str = "",
    today: date,
) -> Booking:
    result = validate_booking_form(booking_date, booking_time, number_of_guests, today=today)
    if not result.valid:
        raise BookingValidationError(result.errors)

    parsed_date = parse_local_date(booking_date)
    parsed_time = parse_local_time(booking_time)
    if parsed_date is None or parsed_time is None:
        raise BookingValidationError([MSG_MISSING_DATE_TIME])

    return await booking_repo.create(
        user_id=user_id,
        booking_date=parsed_date,
        booking_time=parsed_time.replace(second=0, microsecond=0),
        number_of_guests=number_of_guests,
        occasion=occasion.strip(),
        special_requests=special_requests.strip(),
        status=BookingStatus.CONFIRMED,
    )


async def list_user_bookings(
    booking_repo: BookingRepository,
    *,
    user_id: int,
) -> list[Booking]:
    return await booking_repo.list_by_user(user_id)


async def cancel_booking(
    booking_repo: BookingRepository,
    *,
    booking_id: int,
    user_id: int,
) -> Booking:
    booking = await booking_repo.get_for_user(booking_id, user_id)
    if booking is None:
        raise BookingNotFoundError("booking not found")
    await booking_repo.delete(booking)
    return booking
