"""Capacity and ownership views over the reservations table.

Both ledgers only read and write through the session of an open transaction,
so what they see is the committed state plus the unit's own writes.
"""
from __future__ import annotations

from datetime import date
from typing import List

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .models import Flight, Reservation


class ReservationIntegrityError(RuntimeError):
    """Raised when a reservation row would violate a table constraint."""


class DuplicateReservationError(ReservationIntegrityError):
    """Raised when a (customer, flight) reservation already exists."""


class CapacityLedger:
    def __init__(self, session: Session):
        self.session = session

    def count_reservations(self, flight_id: int) -> int:
        stmt = select(func.count()).select_from(Reservation).where(Reservation.flight_id == flight_id)
        return int(self.session.scalar(stmt) or 0)

    def reserve(self, customer_id: int, flight_id: int) -> None:
        # The open transaction is serializable, so the lookup and the insert see the same rows.
        existing = self.session.scalar(
            select(func.count())
            .select_from(Reservation)
            .where(Reservation.customer_id == customer_id, Reservation.flight_id == flight_id)
        )
        if existing:
            raise DuplicateReservationError(f"customer {customer_id} already holds flight {flight_id}")
        try:
            self.session.execute(insert(Reservation).values(customer_id=customer_id, flight_id=flight_id))
        except IntegrityError as exc:
            raise ReservationIntegrityError(
                f"unknown customer {customer_id} or flight {flight_id}"
            ) from exc


class OwnershipLedger:
    def __init__(self, session: Session):
        self.session = session

    def has_reservation_on_date(self, customer_id: int, travel_date: date) -> bool:
        stmt = (
            select(func.count())
            .select_from(Reservation)
            .join(Flight, Flight.id == Reservation.flight_id)
            .where(
                Reservation.customer_id == customer_id,
                Flight.year == travel_date.year,
                Flight.month_id == travel_date.month,
                Flight.day_of_month == travel_date.day,
            )
        )
        return bool(self.session.scalar(stmt))

    def remove(self, customer_id: int, flight_id: int) -> bool:
        """Delete the reservation if present; return whether a row went away."""

        result = self.session.execute(
            delete(Reservation).where(
                Reservation.customer_id == customer_id,
                Reservation.flight_id == flight_id,
            )
        )
        return bool(result.rowcount)

    def flight_ids(self, customer_id: int) -> List[int]:
        stmt = (
            select(Reservation.flight_id)
            .where(Reservation.customer_id == customer_id)
            .order_by(Reservation.flight_id)
        )
        return list(self.session.scalars(stmt))
