"""Application service: Cancel Booking use case.

Removing a booking frees its place in the queue; bookings behind it move
up on the next allocation read.
"""

from __future__ import annotations

import logging

from stockbook.domain.exceptions import EntityNotFoundError
from stockbook.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class CancelBookingHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, booking_id: int) -> None:
        with self._uow as uow:
            booking = uow.bookings.get_by_id(booking_id)
            if booking is None:
                raise EntityNotFoundError(f"Booking #{booking_id} not found")
            uow.bookings.delete(booking_id)
            uow.commit()
        logger.info("Cancelled booking #%s (sale line %s)", booking_id, booking.source)
