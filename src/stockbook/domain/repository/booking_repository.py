"""Abstract repository for Booking aggregate (the booking registry).

The registry stores and retrieves reservations; no allocation logic
lives here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from stockbook.domain.model.booking import Booking


class BookingRepository(ABC):

    @abstractmethod
    def get_by_id(self, booking_id: int) -> Booking | None:
        """Return a booking by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Booking]:
        """Return every booking in insertion order."""

    @abstractmethod
    def list_for_allocation(
        self, product_id: str, dispatch_on_or_before: date
    ) -> list[Booking]:
        """Return the product's bookings dispatching on or before a date.

        Ordered by ``(dispatch_date, booked_on, sequence)`` ascending.
        """

    @abstractmethod
    def find_latest_by_order_reference(self, reference_id: str) -> Booking | None:
        """Return the most recent booking tied to an order line or quotation."""

    @abstractmethod
    def get_by_sale_line(self, quotation_item_id: str) -> Booking | None:
        """Return the booking created for exactly this quotation item, if any."""

    @abstractmethod
    def save(self, booking: Booking) -> None:
        """Persist a booking. New bookings get an ID and the next sequence."""

    @abstractmethod
    def delete(self, booking_id: int) -> None:
        """Remove a booking from the registry."""
