from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_user_id, get_session, get_today
from ..domain.errors import BookingNotFoundError, BookingValidationError
from ..domain.validation import validate_booking_form
from ..infrastructure.repositories import SqlAlchemyBookingRepository
from ..schemas import BookingCreate, BookingRead, ValidationResultRead
from ..usecases import bookings as booking_usecase
from ..utils.audit_log import emit_audit_log

router = APIRouter(prefix="", tags=["bookings"])


@router.post("/bookings/validate", response_model=ValidationResultRead)
async def validate_booking(
    payload: BookingCreate,
    today: date = Depends(get_today),
) -> ValidationResultRead:
    result = validate_booking_form(payload.date, payload.time, payload.number_of_guests, today=today)
    return ValidationResultRead.from_result(result)


@router.post("/bookings", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreate,
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
    today: date = Depends(get_today),
) -> BookingRead:
    booking_repo = SqlAlchemyBookingRepository(session)
    async with session.begin():
        try:
            booking = await booking_usecase.create_booking(
                booking_repo,
                user_id=user_id,
                booking_date=payload.date,
                booking_time=payload.time,
                number_of_guests=payload.number_of_guests,
                occasion=payload.occasion,
                special_requests=payload.special_requests,
                today=today,
            )
        except BookingValidationError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"errors": exc.errors},
            )

    emit_audit_log(
        action="booking.created",
        initiator="user",
        user_id=user_id,
        booking_id=booking.id,
        booking_date=booking.date,
        booking_time=booking.time,
        number_of_guests=booking.number_of_guests,
        status=booking.status,
    )
    return BookingRead.from_db(booking=booking)


@router.get("/me/bookings", response_model=List[BookingRead])
async def list_my_bookings(
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
) -> list[BookingRead]:
    booking_repo = SqlAlchemyBookingRepository(session)
    bookings = await booking_usecase.list_user_bookings(booking_repo, user_id=user_id)
    return [BookingRead.from_db(booking=booking) for booking in bookings]


@router.delete("/me/bookings/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_booking(
    booking_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
) -> Response:
    booking_repo = SqlAlchemyBookingRepository(session)
    async with session.begin():
        try:
            booking = await booking_usecase.cancel_booking(booking_repo, booking_id=booking_id, user_id=user_id)
        except BookingNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="booking not found")

    emit_audit_log(
        action="booking.cancelled",
        initiator="user",
        user_id=user_id,
        booking_id=booking.id,
        booking_date=booking.date,
        booking_time=booking.time,
        number_of_guests=booking.number_of_guests,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
