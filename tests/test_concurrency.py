"""
Concurrency tests for seat admission
Tests race conditions and double booking prevention
"""

import asyncio
import pytest
from sqlalchemy import func, select

from app.core.exceptions import ConflictError
from app.models.reservation import EventDay, Reservation, SeatClaim
from app.schemas.reservation import ReservationCreate
from app.services.seat_ledger import SeatLedger


@pytest.fixture
def ledger():
    return SeatLedger(code_length=10, max_attempts=5)


async def attempt(session_factory, ledger, payload):
    """One caller with its own session, as concurrent requests would have"""
    async with session_factory() as session:
        try:
            return await ledger.try_reserve(session, ReservationCreate(**payload))
        except ConflictError as e:
            return e


async def claims_by_pair(session_factory):
    async with session_factory() as session:
        result = await session.execute(
            select(SeatClaim.seat_id, SeatClaim.day, func.count(SeatClaim.id))
            .group_by(SeatClaim.seat_id, SeatClaim.day)
        )
        return {(seat_id, EventDay(day)): count for seat_id, day, count in result.all()}


@pytest.mark.concurrency
@pytest.mark.asyncio
class TestSeatAdmissionConcurrency:
    """Test concurrent seat reservation scenarios"""

    async def test_two_callers_same_pair(self, session_factory, seats, ledger, reservation_payload):
        """Exactly one of two racing callers gets the seat"""
        seat_id = seats["L-3-1"]
        payload = reservation_payload([(seat_id, "day1")])

        results = await asyncio.gather(
            attempt(session_factory, ledger, payload),
            attempt(session_factory, ledger, payload),
        )

        successes = [r for r in results if isinstance(r, Reservation)]
        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert len(successes) == 1
        assert len(conflicts) == 1
        assert conflicts[0].seat_id == seat_id
        assert conflicts[0].day == "day1"
        assert await claims_by_pair(session_factory) == {(seat_id, EventDay.DAY1): 1}

    async def test_many_callers_same_pair(self, session_factory, seats, ledger, reservation_payload):
        payload = reservation_payload([(seats["R-4-4"], "day2")])

        results = await asyncio.gather(*[
            attempt(session_factory, ledger, payload) for _ in range(10)
        ])

        assert sum(isinstance(r, Reservation) for r in results) == 1
        assert sum(isinstance(r, ConflictError) for r in results) == 9

        async with session_factory() as session:
            result = await session.execute(select(func.count(Reservation.id)))
            assert result.scalar() == 1

    async def test_disjoint_requests_all_succeed(self, session_factory, seats, ledger, reservation_payload):
        payloads = [
            reservation_payload([(seats[f"L-{row}-1"], "day1"), (seats[f"L-{row}-1"], "day2")])
            for row in range(3, 9)
        ]

        results = await asyncio.gather(*[
            attempt(session_factory, ledger, payload) for payload in payloads
        ])

        assert all(isinstance(r, Reservation) for r in results)
        assert len({r.ticket_code for r in results}) == len(payloads)
        claims = await claims_by_pair(session_factory)
        assert len(claims) == 12
        assert set(claims.values()) == {1}

    async def test_overlapping_multi_seat_requests_are_atomic(
        self, session_factory, seats, ledger, reservation_payload
    ):
        """Each request is all-or-nothing and no pair is claimed twice"""
        row = [seats[f"R-7-{i}"] for i in range(1, 6)]
        payloads = [
            reservation_payload([(row[i], "day3"), (row[(i + 1) % 5], "day3")])
            for i in range(5)
        ]

        results = await asyncio.gather(*[
            attempt(session_factory, ledger, payload) for payload in payloads
        ])
        winners = [r for r in results if isinstance(r, Reservation)]

        claims = await claims_by_pair(session_factory)
        assert set(claims.values()) == {1}
        assert len(claims) == 2 * len(winners)
        for reservation in winners:
            assert len(reservation.claims) == 2

    async def test_release_and_reclaim_race(self, session_factory, seats, ledger, reservation_payload):
        seat_id = seats["L-10-5"]
        payload = reservation_payload([(seat_id, "day1")])
        first = await attempt(session_factory, ledger, payload)
        assert isinstance(first, Reservation)

        async def release():
            async with session_factory() as session:
                await ledger.release_reservation(session, first.id)

        await asyncio.gather(
            release(),
            attempt(session_factory, ledger, payload),
            attempt(session_factory, ledger, payload),
        )

        claims = await claims_by_pair(session_factory)
        assert claims.get((seat_id, EventDay.DAY1), 0) <= 1

    async def test_concurrent_check_in_admits_once(
        self, session_factory, seats, ledger, reservation_payload
    ):
        reservation = await attempt(
            session_factory, ledger, reservation_payload([(seats["R-9-1"], "day1")])
        )

        async def scan():
            async with session_factory() as session:
                return await ledger.validate_ticket(
                    session, reservation.ticket_code, mark_used=True
                )

        results = await asyncio.gather(*[scan() for _ in range(5)])
        statuses = sorted(r.status for r in results)

        assert statuses == ["already_used"] * 4 + ["used"]
