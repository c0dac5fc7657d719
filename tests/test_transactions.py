from __future__ import annotations

import pytest
from conftest import TRAVEL_DAY, reservation_count

from flight_reservations.database import create_session_factory
from flight_reservations.ledgers import CapacityLedger, DuplicateReservationError, OwnershipLedger
from flight_reservations.transactions import (
    TransactionConflictError,
    TransactionCoordinator,
    TransactionState,
    TransactionStateError,
)


def test_nested_begin_is_rejected(session_factory):
    coordinator = TransactionCoordinator(session_factory)
    coordinator.begin()
    try:
        assert coordinator.state is TransactionState.OPEN
        with pytest.raises(TransactionStateError):
            coordinator.begin()
    finally:
        coordinator.abort()
    assert coordinator.state is TransactionState.IDLE


def test_commit_without_transaction_is_rejected(session_factory):
    coordinator = TransactionCoordinator(session_factory)
    with pytest.raises(TransactionStateError):
        coordinator.commit()
    coordinator.abort()
    assert coordinator.state is TransactionState.IDLE


def test_abort_discards_writes(session_factory, flights):
    coordinator = TransactionCoordinator(session_factory)
    session = coordinator.begin()
    ledger = CapacityLedger(session)
    ledger.reserve(1, 1)
    assert ledger.count_reservations(1) == 1
    coordinator.abort()

    assert reservation_count(session_factory, 1) == 0


def test_commit_publishes_writes(session_factory, flights):
    coordinator = TransactionCoordinator(session_factory)
    session = coordinator.begin()
    CapacityLedger(session).reserve(1, 1)
    coordinator.commit()

    assert coordinator.state is TransactionState.IDLE
    assert reservation_count(session_factory, 1) == 1


def test_transaction_block_aborts_on_error(session_factory, flights):
    coordinator = TransactionCoordinator(session_factory)
    with pytest.raises(DuplicateReservationError):
        with coordinator.transaction() as session:
            ledger = CapacityLedger(session)
            ledger.reserve(1, 1)
            ledger.reserve(1, 1)

    assert coordinator.state is TransactionState.IDLE
    assert reservation_count(session_factory, 1) == 0


def test_begin_times_out_while_another_unit_holds_the_lock(db_url, session_factory, flights):
    _, impatient_factory = create_session_factory(db_url, timeout=0.1)
    holder = TransactionCoordinator(session_factory)
    holder.begin()
    waiter = TransactionCoordinator(impatient_factory)
    try:
        with pytest.raises(TransactionConflictError):
            waiter.begin()
        assert waiter.state is TransactionState.IDLE
    finally:
        holder.abort()

    waiter.begin()
    waiter.abort()


def test_ownership_ledger_queries_by_date(session_factory, flights):
    with TransactionCoordinator(session_factory).transaction() as session:
        CapacityLedger(session).reserve(1, 2)
        ownership = OwnershipLedger(session)
        assert ownership.has_reservation_on_date(1, TRAVEL_DAY)
        assert not ownership.has_reservation_on_date(1, flights[4].travel_date)
        assert not ownership.has_reservation_on_date(2, TRAVEL_DAY)
        assert ownership.remove(1, 2) is True
        assert ownership.remove(1, 2) is False
        assert ownership.flight_ids(1) == []
