"""Utilities to populate the database with sample data for tests and demos."""
from __future__ import annotations

import random
from collections import Counter
from datetime import date, timedelta
from typing import Dict, List, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from .booking import BookingEngine
from .itinerary import FlightInfo, Itinerary
from .models import Customer, Flight
from .services import add_carrier, add_customer, add_flight

CITIES: Sequence[str] = (
    "Seattle WA",
    "Boston MA",
    "Chicago IL",
    "Denver CO",
    "Atlanta GA",
    "Portland OR",
)
CARRIERS = (("AS", "Alaska Airlines Inc."), ("UA", "United Air Lines Inc."), ("DL", "Delta Air Lines Inc."))
FIRST_NAMES = ("Ava", "Noah", "Liam", "Mia", "Lucas", "Emma", "Ethan", "Isabella")
LAST_NAMES = ("Johnson", "Williams", "Smith", "Brown", "Garcia", "Lee")


def generate_sample_data(
    session_factory: sessionmaker[Session],
    *,
    flights: int = 25,
    customers: int = 20,
    bookings: int = 50,
    start: date = date(2015, 7, 1),
    days: int = 3,
) -> Dict[str, int]:
    """Populate the database with deterministic pseudo-random data.

    Bookings go through :class:`BookingEngine`, so the returned counts per
    result name reflect the capacity and one-trip-per-day rules.
    """

    rng = random.Random(42)
    with session_factory() as session:
        for carrier_id, name in CARRIERS:
            add_carrier(session, carrier_id=carrier_id, name=name)
        for index in range(flights):
            origin, destination = rng.sample(CITIES, 2)
            add_flight(
                session,
                travel_date=start + timedelta(days=rng.randrange(days)),
                carrier_id=rng.choice(CARRIERS)[0],
                flight_num=str(100 + index),
                origin_city=origin,
                dest_city=destination,
                actual_time=float(rng.randint(60, 360)),
            )
        for index in range(customers):
            add_customer(
                session,
                full_name=f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
                handle=f"user{index}",
                password=f"secret{index}",
            )
        session.commit()

    with session_factory() as session:
        flight_infos: List[FlightInfo] = [
            FlightInfo.from_model(flight) for flight in session.scalars(select(Flight).order_by(Flight.id))
        ]
        customer_ids = list(session.scalars(select(Customer.id).order_by(Customer.id)))

    outcomes: Counter[str] = Counter()
    if flight_infos and customer_ids:
        engine = BookingEngine(session_factory, max_attempts=3)
        for _ in range(bookings):
            flight = rng.choice(flight_infos)
            result = engine.book(rng.choice(customer_ids), flight.travel_date, Itinerary([flight]))
            outcomes[result.name] += 1
    summary = {"flights": len(flight_infos), "customers": len(customer_ids)}
    summary.update(outcomes)
    return summary
