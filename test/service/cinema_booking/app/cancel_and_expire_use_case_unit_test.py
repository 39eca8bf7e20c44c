"""Unit tests for cancellation, hold expiry sweeps and lazy expiry on read"""

import pytest
import uuid_utils

from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.state.keyed_lock import KeyedLock
from src.service.cinema_booking.app.command.cancel_reservation_use_case import (
    CancelReservationUseCase,
)
from src.service.cinema_booking.app.command.expire_stale_holds_use_case import (
    ExpireStaleHoldsUseCase,
)
from src.service.cinema_booking.app.command.hold_seats_use_case import HoldSeatsUseCase
from src.service.cinema_booking.app.command.pay_reservation_use_case import PayReservationUseCase
from src.service.cinema_booking.app.query.get_reservation_use_case import GetReservationUseCase
from src.service.cinema_booking.app.query.get_seat_map_use_case import GetSeatMapUseCase
from src.service.cinema_booking.domain.enum.payment_method import PaymentMethod
from src.service.cinema_booking.domain.enum.reservation_status import ReservationStatus
from src.service.cinema_booking.domain.enum.seat_state import SeatState
from src.service.cinema_booking.domain.value_object.customer import RegisteredCustomer
from src.service.cinema_booking.driven_adapter.repo.in_memory_persistence_store import (
    InMemoryPersistenceStore,
)
from src.service.cinema_booking.driven_adapter.state.seat_inventory_impl import SeatInventoryImpl
from test.service.cinema_booking.fixtures import HOLD_TTL, SCREENING_ID, FakeClock


CUSTOMER = RegisteredCustomer(user_id=3)


@pytest.mark.unit
class TestCancelReservation:
    @pytest.mark.asyncio
    async def test_cancel_releases_seats(
        self,
        hold_use_case: HoldSeatsUseCase,
        cancel_use_case: CancelReservationUseCase,
        seat_inventory: SeatInventoryImpl,
    ) -> None:
        reservation = await hold_use_case.hold(
            screening_id=SCREENING_ID, seat_ids=['A1', 'A2'], customer=CUSTOMER
        )

        cancelled = await cancel_use_case.cancel(reservation_id=reservation.id)

        assert cancelled.status == ReservationStatus.CANCELLED
        states = await seat_inventory.seat_states(screening_id=SCREENING_ID)
        assert states['A1'] == SeatState.AVAILABLE
        assert states['A2'] == SeatState.AVAILABLE

    @pytest.mark.asyncio
    async def test_cannot_cancel_twice(
        self, hold_use_case: HoldSeatsUseCase, cancel_use_case: CancelReservationUseCase
    ) -> None:
        reservation = await hold_use_case.hold(
            screening_id=SCREENING_ID, seat_ids=['A1'], customer=CUSTOMER
        )
        await cancel_use_case.cancel(reservation_id=reservation.id)

        with pytest.raises(DomainError):
            await cancel_use_case.cancel(reservation_id=reservation.id)

    @pytest.mark.asyncio
    async def test_cannot_cancel_ticketed(
        self,
        hold_use_case: HoldSeatsUseCase,
        pay_use_case: PayReservationUseCase,
        cancel_use_case: CancelReservationUseCase,
        seat_inventory: SeatInventoryImpl,
    ) -> None:
        reservation = await hold_use_case.hold(
            screening_id=SCREENING_ID, seat_ids=['A1'], customer=CUSTOMER
        )
        await pay_use_case.pay(reservation_id=reservation.id, method=PaymentMethod.GCASH)

        with pytest.raises(DomainError):
            await cancel_use_case.cancel(reservation_id=reservation.id)

        states = await seat_inventory.seat_states(screening_id=SCREENING_ID)
        assert states['A1'] == SeatState.BOOKED


@pytest.mark.unit
class TestExpireStaleHolds:
    @pytest.mark.asyncio
    async def test_sweep_expires_only_past_deadline(
        self,
        hold_use_case: HoldSeatsUseCase,
        expire_use_case: ExpireStaleHoldsUseCase,
        store: InMemoryPersistenceStore,
        seat_inventory: SeatInventoryImpl,
        clock: FakeClock,
    ) -> None:
        # Given
        stale = await hold_use_case.hold(
            screening_id=SCREENING_ID, seat_ids=['A1'], customer=CUSTOMER
        )
        clock.advance(minutes=5)
        fresh = await hold_use_case.hold(
            screening_id=SCREENING_ID, seat_ids=['A2'], customer=CUSTOMER
        )
        clock.advance(seconds=HOLD_TTL.total_seconds() - 5 * 60)

        # When
        expired = await expire_use_case.sweep()

        # Then
        assert [reservation.id for reservation in expired] == [stale.id]
        stored_fresh = await store.get_reservation(reservation_id=fresh.id)
        assert stored_fresh is not None
        assert stored_fresh.status == ReservationStatus.AWAITING_PAYMENT
        states = await seat_inventory.seat_states(screening_id=SCREENING_ID)
        assert states['A1'] == SeatState.AVAILABLE
        assert states['A2'] == SeatState.HELD

    @pytest.mark.asyncio
    async def test_sweep_skips_reservation_with_payment_in_flight(
        self,
        hold_use_case: HoldSeatsUseCase,
        expire_use_case: ExpireStaleHoldsUseCase,
        store: InMemoryPersistenceStore,
        reservation_locks: KeyedLock,
        clock: FakeClock,
    ) -> None:
        reservation = await hold_use_case.hold(
            screening_id=SCREENING_ID, seat_ids=['A1'], customer=CUSTOMER
        )
        clock.advance(seconds=HOLD_TTL.total_seconds())

        async with reservation_locks.hold(reservation.id):
            expired = await expire_use_case.sweep()

        assert expired == []
        stored = await store.get_reservation(reservation_id=reservation.id)
        assert stored is not None
        assert stored.status == ReservationStatus.AWAITING_PAYMENT


@pytest.mark.unit
class TestQueries:
    @pytest.mark.asyncio
    async def test_get_reservation_expires_lazily(
        self,
        hold_use_case: HoldSeatsUseCase,
        expire_use_case: ExpireStaleHoldsUseCase,
        store: InMemoryPersistenceStore,
        clock: FakeClock,
    ) -> None:
        reservation = await hold_use_case.hold(
            screening_id=SCREENING_ID, seat_ids=['A1'], customer=CUSTOMER
        )
        use_case = GetReservationUseCase(store=store, expire_stale_holds=expire_use_case)
        clock.advance(seconds=HOLD_TTL.total_seconds())

        fetched = await use_case.get_reservation(reservation_id=reservation.id)

        assert fetched.status == ReservationStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_get_unknown_reservation(
        self, store: InMemoryPersistenceStore, expire_use_case: ExpireStaleHoldsUseCase
    ) -> None:
        use_case = GetReservationUseCase(store=store, expire_stale_holds=expire_use_case)

        with pytest.raises(NotFoundError):
            await use_case.get_reservation(reservation_id=uuid_utils.uuid7())

    @pytest.mark.asyncio
    async def test_seat_map_is_sorted_with_live_states(
        self,
        hold_use_case: HoldSeatsUseCase,
        store: InMemoryPersistenceStore,
        seat_inventory: SeatInventoryImpl,
    ) -> None:
        await hold_use_case.hold(screening_id=SCREENING_ID, seat_ids=['D2'], customer=CUSTOMER)
        use_case = GetSeatMapUseCase(store=store, seat_inventory=seat_inventory)

        screening, seats = await use_case.get_seat_map(screening_id=SCREENING_ID)

        assert screening.id == SCREENING_ID
        assert [seat.id for seat in seats] == ['A1', 'A2', 'A3', 'A4', 'A5', 'D1', 'D2', 'D3']
        assert {seat.id: seat.state for seat in seats}['D2'] == SeatState.HELD
