"""Catalog, credential and listing helpers around the booking engine."""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session, aliased, joinedload

from .booking import MAX_FLIGHT_BOOKINGS
from .itinerary import FlightInfo, Itinerary
from .models import Carrier, Customer, Flight, Reservation

SEARCH_LIMIT = 99


def add_carrier(session: Session, *, carrier_id: str, name: str) -> Carrier:
    carrier = Carrier(id=carrier_id, name=name)
    session.add(carrier)
    session.flush()
    return carrier


def add_flight(
    session: Session,
    *,
    travel_date: date,
    carrier_id: str,
    flight_num: str,
    origin_city: str,
    dest_city: str,
    actual_time: Optional[float],
    flight_id: Optional[int] = None,
) -> Flight:
    """Create a flight entry."""

    flight = Flight(
        id=flight_id,
        year=travel_date.year,
        month_id=travel_date.month,
        day_of_month=travel_date.day,
        carrier_id=carrier_id,
        flight_num=flight_num,
        origin_city=origin_city,
        dest_city=dest_city,
        actual_time=actual_time,
    )
    session.add(flight)
    session.flush()
    return flight


def add_customer(
    session: Session,
    *,
    full_name: str,
    handle: str,
    password: str,
    customer_id: Optional[int] = None,
) -> Customer:
    customer = Customer(id=customer_id, full_name=full_name, handle=handle, password=password)
    session.add(customer)
    session.flush()
    return customer


def log_in(session: Session, handle: str, password: str) -> Optional[Customer]:
    """Return the customer matching ``handle`` and ``password``, or ``None``."""

    stmt = select(Customer).where(Customer.handle == handle, Customer.password == password)
    return session.scalars(stmt).first()


def _on_day(flight, travel_date: date):
    return (
        flight.year == travel_date.year,
        flight.month_id == travel_date.month,
        flight.day_of_month == travel_date.day,
    )


def search_itineraries(
    session: Session,
    travel_date: date,
    origin_city: str,
    dest_city: str,
    *,
    limit: int = SEARCH_LIMIT,
) -> List[Itinerary]:
    """Direct flights by actual time, followed by one-connection trips by total time."""

    direct: Select[tuple[Flight]] = (
        select(Flight)
        .options(joinedload(Flight.carrier))
        .where(
            *_on_day(Flight, travel_date),
            Flight.origin_city == origin_city,
            Flight.dest_city == dest_city,
            Flight.actual_time.is_not(None),
        )
        .order_by(Flight.actual_time, Flight.id)
        .limit(limit)
    )
    results = [Itinerary([FlightInfo.from_model(flight)]) for flight in session.scalars(direct)]

    first, second = aliased(Flight), aliased(Flight)
    connections = (
        select(first, second)
        .where(
            *_on_day(first, travel_date),
            *_on_day(second, travel_date),
            first.origin_city == origin_city,
            second.dest_city == dest_city,
            first.dest_city == second.origin_city,
            first.id != second.id,
            first.actual_time.is_not(None),
            second.actual_time.is_not(None),
        )
        .order_by(first.actual_time + second.actual_time, first.id, second.id)
        .limit(limit)
    )
    for leg_one, leg_two in session.execute(connections):
        results.append(Itinerary([FlightInfo.from_model(leg_one), FlightInfo.from_model(leg_two)]))
    return results


def get_reservations(session: Session, customer_id: int) -> List[FlightInfo]:
    """List the customer's reserved flights; flights with no actual time are left out."""

    stmt = (
        select(Flight)
        .join(Reservation, Reservation.flight_id == Flight.id)
        .options(joinedload(Flight.carrier))
        .where(Reservation.customer_id == customer_id, Flight.actual_time.is_not(None))
        .order_by(Flight.year, Flight.month_id, Flight.day_of_month, Flight.id)
    )
    return [FlightInfo.from_model(flight) for flight in session.scalars(stmt)]


def summarize_capacity(session: Session) -> List[dict]:
    rows = session.execute(
        select(
            Flight.id,
            Flight.flight_num,
            Flight.origin_city,
            Flight.dest_city,
            func.count(Reservation.customer_id).label("reservations"),
        )
        .outerjoin(Reservation, Reservation.flight_id == Flight.id)
        .group_by(Flight.id)
        .order_by(Flight.id)
    ).all()
    return [
        {
            "flight_id": row.id,
            "flight": row.flight_num,
            "route": f"{row.origin_city}-{row.dest_city}",
            "reservations": row.reservations,
            "available": max(MAX_FLIGHT_BOOKINGS - row.reservations, 0),
        }
        for row in rows
    ]
