"""Booking and cancellation of itineraries."""
from __future__ import annotations

import enum
import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from .config import load_settings
from .itinerary import Itinerary
from .ledgers import CapacityLedger, OwnershipLedger, ReservationIntegrityError
from .transactions import TransactionConflictError, TransactionCoordinator

logger = logging.getLogger(__name__)

# Maximum number of reservations to allow on one flight.
MAX_FLIGHT_BOOKINGS = 3


class BookingResult(enum.IntEnum):
    FAILED = 0
    ADDED = 1
    FLIGHT_FULL = 2
    DAY_FULL = 3


class BookingEngine:
    """Books and cancels itineraries for one logical session.

    Every attempt runs in its own serializable transaction: the same-day and
    capacity checks for all legs happen before any reservation is written, so
    an itinerary is booked entirely or not at all. ``max_attempts`` above one
    retries attempts that lost a serialization conflict.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        max_attempts: Optional[int] = None,
        max_bookings: int = MAX_FLIGHT_BOOKINGS,
    ):
        self.coordinator = TransactionCoordinator(session_factory)
        self.max_attempts = load_settings().max_attempts if max_attempts is None else max_attempts
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_bookings = max_bookings

    def book(self, customer_id: int, travel_date: date, itinerary: Itinerary) -> BookingResult:
        result = BookingResult.FAILED
        for attempt in range(1, self.max_attempts + 1):
            result = self._book_once(customer_id, travel_date, itinerary)
            if result is not BookingResult.FAILED:
                break
            logger.warning(
                "booking attempt %d/%d for customer %s conflicted", attempt, self.max_attempts, customer_id
            )
        logger.info(
            "booking customer=%s date=%s flights=%s -> %s",
            customer_id,
            travel_date.isoformat(),
            list(itinerary.flight_ids),
            result.name,
        )
        return result

    def _book_once(self, customer_id: int, travel_date: date, itinerary: Itinerary) -> BookingResult:
        try:
            with self.coordinator.transaction() as session:
                ownership = OwnershipLedger(session)
                capacity = CapacityLedger(session)
                if ownership.has_reservation_on_date(customer_id, travel_date):
                    self.coordinator.abort()
                    return BookingResult.DAY_FULL
                for flight_id in itinerary.flight_ids:
                    if capacity.count_reservations(flight_id) >= self.max_bookings:
                        self.coordinator.abort()
                        return BookingResult.FLIGHT_FULL
                for flight_id in itinerary.flight_ids:
                    capacity.reserve(customer_id, flight_id)
        except TransactionConflictError:
            return BookingResult.FAILED
        except ReservationIntegrityError:
            logger.error(
                "integrity violation booking flights %s for customer %s",
                list(itinerary.flight_ids),
                customer_id,
            )
            raise
        return BookingResult.ADDED

    def cancel(self, customer_id: int, itinerary: Itinerary) -> None:
        """Remove the customer's reservations on every leg; missing ones are ignored."""

        for attempt in range(1, self.max_attempts + 1):
            try:
                with self.coordinator.transaction() as session:
                    ownership = OwnershipLedger(session)
                    removed = sum(ownership.remove(customer_id, flight_id) for flight_id in itinerary.flight_ids)
            except TransactionConflictError:
                logger.warning(
                    "cancel attempt %d/%d for customer %s conflicted", attempt, self.max_attempts, customer_id
                )
                if attempt == self.max_attempts:
                    raise
                continue
            logger.info(
                "cancelled %d reservation(s) for customer=%s flights=%s",
                removed,
                customer_id,
                list(itinerary.flight_ids),
            )
            return
