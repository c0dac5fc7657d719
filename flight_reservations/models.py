"""SQLAlchemy models for the flight reservation system."""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import CheckConstraint, Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class Carrier(Base):
    __tablename__ = "carriers"

    id: Mapped[str] = mapped_column(String(7), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    flights: Mapped[List["Flight"]] = relationship(back_populates="carrier")


class Flight(Base):
    __tablename__ = "flights"
    __table_args__ = (
        CheckConstraint("month_id BETWEEN 1 AND 12", name="ck_flight_month"),
        CheckConstraint("day_of_month BETWEEN 1 AND 31", name="ck_flight_day"),
        Index("ix_flights_day_route", "year", "month_id", "day_of_month", "origin_city"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month_id: Mapped[int] = mapped_column(Integer, nullable=False)
    day_of_month: Mapped[int] = mapped_column(Integer, nullable=False)
    carrier_id: Mapped[str] = mapped_column(ForeignKey("carriers.id"), nullable=False)
    flight_num: Mapped[str] = mapped_column(String(10), nullable=False)
    origin_city: Mapped[str] = mapped_column(String(50), nullable=False)
    dest_city: Mapped[str] = mapped_column(String(50), nullable=False)
    actual_time: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    carrier: Mapped[Carrier] = relationship(back_populates="flights")
    reservations: Mapped[List["Reservation"]] = relationship(back_populates="flight")

    @property
    def travel_date(self) -> date:
        return date(self.year, self.month_id, self.day_of_month)


class Customer(Base):
    __tablename__ = "customers"
    __table_args__ = (UniqueConstraint("handle", name="uq_customer_handle"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    handle: Mapped[str] = mapped_column(String(50), nullable=False)
    password: Mapped[str] = mapped_column(String(50), nullable=False)

    reservations: Mapped[List["Reservation"]] = relationship(back_populates="customer")


class Reservation(Base):
    """A booked seat. The composite key keeps each (customer, flight) pair unique."""

    __tablename__ = "reservations"
    __table_args__ = (Index("ix_reservations_flight", "flight_id"),)

    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), primary_key=True)
    flight_id: Mapped[int] = mapped_column(ForeignKey("flights.id"), primary_key=True)

    customer: Mapped[Customer] = relationship(back_populates="reservations")
    flight: Mapped[Flight] = relationship(back_populates="reservations")
