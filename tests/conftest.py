from __future__ import annotations

from datetime import date

import pytest

from flight_reservations.database import create_session_factory
from flight_reservations.itinerary import FlightInfo
from flight_reservations.ledgers import CapacityLedger, OwnershipLedger
from flight_reservations.models import Base
from flight_reservations.services import add_carrier, add_customer, add_flight
from flight_reservations.transactions import TransactionCoordinator

TRAVEL_DAY = date(2024, 5, 1)
NEXT_DAY = date(2024, 5, 2)


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+pysqlite:///{tmp_path / 'flights.db'}"


@pytest.fixture
def session_factory(db_url):
    engine, factory = create_session_factory(db_url, echo=False, timeout=5.0)
    Base.metadata.create_all(engine)
    yield factory
    engine.dispose()


@pytest.fixture
def flights(session_factory):
    """Seed one carrier, five flights and eight customers; return flights by id."""

    with session_factory() as session:
        add_carrier(session, carrier_id="AS", name="Alaska Airlines Inc.")
        created = [
            add_flight(session, flight_id=1, travel_date=TRAVEL_DAY, carrier_id="AS", flight_num="100",
                       origin_city="Seattle WA", dest_city="Boston MA", actual_time=300.0),
            add_flight(session, flight_id=2, travel_date=TRAVEL_DAY, carrier_id="AS", flight_num="200",
                       origin_city="Seattle WA", dest_city="Denver CO", actual_time=150.0),
            add_flight(session, flight_id=3, travel_date=TRAVEL_DAY, carrier_id="AS", flight_num="300",
                       origin_city="Denver CO", dest_city="Boston MA", actual_time=200.0),
            add_flight(session, flight_id=4, travel_date=NEXT_DAY, carrier_id="AS", flight_num="400",
                       origin_city="Seattle WA", dest_city="Boston MA", actual_time=310.0),
            add_flight(session, flight_id=5, travel_date=TRAVEL_DAY, carrier_id="AS", flight_num="500",
                       origin_city="Seattle WA", dest_city="Boston MA", actual_time=None),
        ]
        for index in range(1, 9):
            add_customer(
                session,
                customer_id=index,
                full_name=f"Customer {index}",
                handle=f"c{index}",
                password=f"pw{index}",
            )
        infos = {flight.id: FlightInfo.from_model(flight) for flight in created}
        session.commit()
    return infos


def reservation_count(session_factory, flight_id: int) -> int:
    with TransactionCoordinator(session_factory).transaction() as session:
        return CapacityLedger(session).count_reservations(flight_id)


def reserved_flights(session_factory, customer_id: int) -> list:
    with TransactionCoordinator(session_factory).transaction() as session:
        return OwnershipLedger(session).flight_ids(customer_id)
