"""Detached flight records and itineraries built from them."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Tuple

from .models import Flight

MAX_LEGS = 2


@dataclass(frozen=True)
class FlightInfo:
    id: int
    travel_date: date
    carrier: str
    flight_num: str
    origin_city: str
    dest_city: str
    actual_time: Optional[float]

    @classmethod
    def from_model(cls, flight: Flight) -> "FlightInfo":
        return cls(
            id=flight.id,
            travel_date=flight.travel_date,
            carrier=flight.carrier.name,
            flight_num=flight.flight_num,
            origin_city=flight.origin_city,
            dest_city=flight.dest_city,
            actual_time=flight.actual_time,
        )


@dataclass(frozen=True)
class Itinerary:
    """A direct or one-connection trip; every leg flies on the same day."""

    flights: Tuple[FlightInfo, ...]

    def __init__(self, flights: Iterable[FlightInfo]):
        legs = tuple(flights)
        if not 1 <= len(legs) <= MAX_LEGS:
            raise ValueError(f"an itinerary has 1 to {MAX_LEGS} flights, got {len(legs)}")
        if len({leg.travel_date for leg in legs}) != 1:
            raise ValueError("all flights of an itinerary must share a travel date")
        if len({leg.id for leg in legs}) != len(legs):
            raise ValueError("an itinerary cannot list the same flight twice")
        object.__setattr__(self, "flights", legs)

    @property
    def travel_date(self) -> date:
        return self.flights[0].travel_date

    @property
    def flight_ids(self) -> Tuple[int, ...]:
        return tuple(leg.id for leg in self.flights)

    @property
    def total_time(self) -> float:
        return sum(leg.actual_time or 0.0 for leg in self.flights)

    def __len__(self) -> int:
        return len(self.flights)
