"""Flight reservation system package."""
import logging

from .booking import MAX_FLIGHT_BOOKINGS, BookingEngine, BookingResult
from .config import Settings, load_settings
from .database import create_session_factory, init_db
from .dataset import generate_sample_data
from .itinerary import FlightInfo, Itinerary
from .ledgers import (
    CapacityLedger,
    DuplicateReservationError,
    OwnershipLedger,
    ReservationIntegrityError,
)
from .services import (
    add_carrier,
    add_customer,
    add_flight,
    get_reservations,
    log_in,
    search_itineraries,
    summarize_capacity,
)
from .transactions import (
    TransactionConflictError,
    TransactionCoordinator,
    TransactionError,
    TransactionState,
    TransactionStateError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "MAX_FLIGHT_BOOKINGS",
    "BookingEngine",
    "BookingResult",
    "Settings",
    "load_settings",
    "create_session_factory",
    "init_db",
    "generate_sample_data",
    "FlightInfo",
    "Itinerary",
    "CapacityLedger",
    "DuplicateReservationError",
    "OwnershipLedger",
    "ReservationIntegrityError",
    "add_carrier",
    "add_customer",
    "add_flight",
    "get_reservations",
    "log_in",
    "search_itineraries",
    "summarize_capacity",
    "TransactionConflictError",
    "TransactionCoordinator",
    "TransactionError",
    "TransactionState",
    "TransactionStateError",
]
