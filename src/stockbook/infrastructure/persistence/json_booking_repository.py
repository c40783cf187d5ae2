"""JSON-document-backed implementation of BookingRepository."""

from __future__ import annotations

from datetime import date, datetime

from stockbook.domain.model.allocation import BookingStatus, allocation_order_key
from stockbook.domain.model.booking import Booking
from stockbook.domain.model.value_objects import SourceReference
from stockbook.domain.repository.booking_repository import BookingRepository


class JsonBookingRepository(BookingRepository):

    def __init__(self, document: dict) -> None:
        self._records: list[dict] = document.setdefault("bookings", [])
        self._counters: dict = document.setdefault("counters", {})

    # --- BookingRepository interface ------------------------------------------

    def get_by_id(self, booking_id: int) -> Booking | None:
        for raw in self._records:
            if raw["id"] == booking_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Booking]:
        bookings = [self._to_domain(raw) for raw in self._records]
        bookings.sort(key=lambda b: b.sequence)
        return bookings

    def list_for_allocation(
        self, product_id: str, dispatch_on_or_before: date
    ) -> list[Booking]:
        bookings = [
            b
            for b in (self._to_domain(raw) for raw in self._records)
            if b.product_id == product_id and b.dispatch_date <= dispatch_on_or_before
        ]
        bookings.sort(key=allocation_order_key)
        return bookings

    def find_latest_by_order_reference(self, reference_id: str) -> Booking | None:
        matches = [
            b
            for b in (self._to_domain(raw) for raw in self._records)
            if b.source.matches(reference_id)
        ]
        if not matches:
            return None
        return max(matches, key=lambda b: (b.booked_on, b.sequence))

    def get_by_sale_line(self, quotation_item_id: str) -> Booking | None:
        for raw in self._records:
            if raw["source"]["quotation_item_id"] == quotation_item_id:
                return self._to_domain(raw)
        return None

    def save(self, booking: Booking) -> None:
        if booking.id is None:
            booking.id = self._bump("booking_id")
            booking.sequence = self._bump("booking_sequence")
            self._records.append(self._to_raw(booking))
            return
        for i, raw in enumerate(self._records):
            if raw["id"] == booking.id:
                self._records[i] = self._to_raw(booking)
                return
        self._records.append(self._to_raw(booking))

    def delete(self, booking_id: int) -> None:
        self._records[:] = [raw for raw in self._records if raw["id"] != booking_id]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(booking: Booking) -> dict:
        return {
            "id": booking.id,
            "sequence": booking.sequence,
            "product_id": booking.product_id,
            "required_quantity": booking.required_quantity,
            "dispatch_date": booking.dispatch_date.isoformat(),
            "booked_on": booking.booked_on.isoformat(),
            "source": {
                "quotation_id": booking.source.quotation_id,
                "quotation_item_id": booking.source.quotation_item_id,
                "quote_number": booking.source.quote_number,
            },
            "customer_name": booking.customer_name,
            "gym_name": booking.gym_name,
            "state_code": booking.state_code,
            "city": booking.city,
            "status": booking.status.value,
            "waiting_quantity": booking.waiting_quantity,
            "status_computed_at": (
                booking.status_computed_at.isoformat()
                if booking.status_computed_at
                else None
            ),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Booking:
        computed_at = raw.get("status_computed_at")
        return Booking(
            id=raw["id"],
            sequence=raw["sequence"],
            product_id=raw["product_id"],
            required_quantity=raw["required_quantity"],
            dispatch_date=date.fromisoformat(raw["dispatch_date"]),
            booked_on=datetime.fromisoformat(raw["booked_on"]),
            source=SourceReference(
                quotation_id=raw["source"]["quotation_id"],
                quotation_item_id=raw["source"]["quotation_item_id"],
                quote_number=raw["source"].get("quote_number"),
            ),
            customer_name=raw.get("customer_name"),
            gym_name=raw.get("gym_name"),
            state_code=raw.get("state_code"),
            city=raw.get("city"),
            status=BookingStatus(raw["status"]),
            waiting_quantity=raw["waiting_quantity"],
            status_computed_at=datetime.fromisoformat(computed_at) if computed_at else None,
        )

    # --- ID allocation --------------------------------------------------------

    def _bump(self, counter: str) -> int:
        self._counters[counter] = self._counters.get(counter, 0) + 1
        return self._counters[counter]
