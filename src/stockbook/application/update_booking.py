"""Application service: Update Booking use case (administrative edit)."""

from __future__ import annotations

from datetime import date

from stockbook.application.dto import BookingDTO, booking_to_dto
from stockbook.domain.exceptions import EntityNotFoundError, ValidationError
from stockbook.domain.model.value_objects import as_date
from stockbook.domain.repository.unit_of_work import UnitOfWork


class UpdateBookingHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        booking_id: int,
        required_quantity: int | None = None,
        dispatch_date: date | str | None = None,
        customer_name: str | None = None,
        gym_name: str | None = None,
        city: str | None = None,
    ) -> BookingDTO:
        """Edit a booking. Its priority (booked-on, sequence) never changes."""
        if all(
            v is None
            for v in (required_quantity, dispatch_date, customer_name, gym_name, city)
        ):
            raise ValidationError("Nothing to update")
        new_dispatch = as_date(dispatch_date, "dispatch date") if dispatch_date is not None else None

        with self._uow as uow:
            booking = uow.bookings.get_by_id(booking_id)
            if booking is None:
                raise EntityNotFoundError(f"Booking #{booking_id} not found")

            if required_quantity is not None or new_dispatch is not None:
                booking.reschedule(
                    required_quantity=required_quantity, dispatch_date=new_dispatch
                )
            if customer_name is not None:
                booking.customer_name = customer_name
            if gym_name is not None:
                booking.gym_name = gym_name
            if city is not None:
                booking.city = city

            uow.bookings.save(booking)
            uow.commit()
        return booking_to_dto(booking)
