"""
Unit test fixtures for the booking engine

Everything is wired by hand around one FakeClock and an in-memory store
seeded with two screenings, a small concession stand and a handful of promo
codes.
"""

import pytest

from src.platform.state.keyed_lock import KeyedLock
from src.service.cinema_booking.app.command.cancel_reservation_use_case import (
    CancelReservationUseCase,
)
from src.service.cinema_booking.app.command.expire_stale_holds_use_case import (
    ExpireStaleHoldsUseCase,
)
from src.service.cinema_booking.app.command.hold_seats_use_case import HoldSeatsUseCase
from src.service.cinema_booking.app.command.issue_tickets_use_case import IssueTicketsUseCase
from src.service.cinema_booking.app.command.manage_promo_code_use_case import (
    ManagePromoCodeUseCase,
)
from src.service.cinema_booking.app.command.pay_reservation_use_case import PayReservationUseCase
from src.service.cinema_booking.driven_adapter.notification.mock_notification_service_impl import (
    MockNotificationServiceImpl,
)
from src.service.cinema_booking.driven_adapter.payment.mock_payment_gateway_impl import (
    MockPaymentGatewayImpl,
)
from src.service.cinema_booking.driven_adapter.repo.in_memory_persistence_store import (
    InMemoryPersistenceStore,
)
from src.service.cinema_booking.driven_adapter.state.promo_code_validator_impl import (
    PromoCodeValidatorImpl,
)
from src.service.cinema_booking.driven_adapter.state.seat_inventory_impl import SeatInventoryImpl
from src.service.cinema_booking.driven_adapter.ticket_code_generator_impl import (
    TicketCodeGeneratorImpl,
)
from test.service.cinema_booking.fixtures import HOLD_TTL, FakeClock, seed_catalog


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def store() -> InMemoryPersistenceStore:
    store = InMemoryPersistenceStore()
    await seed_catalog(store)
    return store


@pytest.fixture
def seat_inventory(store: InMemoryPersistenceStore, clock: FakeClock) -> SeatInventoryImpl:
    return SeatInventoryImpl(store=store, clock=clock)


@pytest.fixture
def promo_code_locks() -> KeyedLock:
    return KeyedLock(name='promo_code')


@pytest.fixture
def promo_code_validator(
    store: InMemoryPersistenceStore, promo_code_locks: KeyedLock
) -> PromoCodeValidatorImpl:
    return PromoCodeValidatorImpl(store=store, locks=promo_code_locks)


@pytest.fixture
def manage_promo_use_case(
    store: InMemoryPersistenceStore, promo_code_locks: KeyedLock
) -> ManagePromoCodeUseCase:
    return ManagePromoCodeUseCase(store=store, promo_code_locks=promo_code_locks)


@pytest.fixture
def payment_gateway(clock: FakeClock) -> MockPaymentGatewayImpl:
    return MockPaymentGatewayImpl(clock=clock)


@pytest.fixture
def notification_service() -> MockNotificationServiceImpl:
    return MockNotificationServiceImpl()


@pytest.fixture
def ticket_code_generator(clock: FakeClock) -> TicketCodeGeneratorImpl:
    return TicketCodeGeneratorImpl(clock=clock)


@pytest.fixture
def reservation_locks() -> KeyedLock:
    return KeyedLock(name='reservation')


@pytest.fixture
def hold_use_case(
    store: InMemoryPersistenceStore,
    seat_inventory: SeatInventoryImpl,
    promo_code_validator: PromoCodeValidatorImpl,
    clock: FakeClock,
) -> HoldSeatsUseCase:
    return HoldSeatsUseCase(
        store=store,
        seat_inventory=seat_inventory,
        promo_code_validator=promo_code_validator,
        clock=clock,
        hold_ttl=HOLD_TTL,
        max_seats_per_hold=6,
    )


@pytest.fixture
def issue_tickets_use_case(
    store: InMemoryPersistenceStore,
    ticket_code_generator: TicketCodeGeneratorImpl,
    clock: FakeClock,
) -> IssueTicketsUseCase:
    return IssueTicketsUseCase(
        store=store, ticket_code_generator=ticket_code_generator, clock=clock, max_attempts=5
    )


@pytest.fixture
def pay_use_case(
    store: InMemoryPersistenceStore,
    seat_inventory: SeatInventoryImpl,
    promo_code_validator: PromoCodeValidatorImpl,
    payment_gateway: MockPaymentGatewayImpl,
    notification_service: MockNotificationServiceImpl,
    issue_tickets_use_case: IssueTicketsUseCase,
    reservation_locks: KeyedLock,
    clock: FakeClock,
) -> PayReservationUseCase:
    return PayReservationUseCase(
        store=store,
        seat_inventory=seat_inventory,
        promo_code_validator=promo_code_validator,
        payment_gateway=payment_gateway,
        notification_service=notification_service,
        issue_tickets_use_case=issue_tickets_use_case,
        reservation_locks=reservation_locks,
        clock=clock,
        max_payment_attempts=3,
    )


@pytest.fixture
def cancel_use_case(
    store: InMemoryPersistenceStore,
    seat_inventory: SeatInventoryImpl,
    reservation_locks: KeyedLock,
    clock: FakeClock,
) -> CancelReservationUseCase:
    return CancelReservationUseCase(
        store=store, seat_inventory=seat_inventory, reservation_locks=reservation_locks, clock=clock
    )


@pytest.fixture
def expire_use_case(
    store: InMemoryPersistenceStore,
    seat_inventory: SeatInventoryImpl,
    reservation_locks: KeyedLock,
    clock: FakeClock,
) -> ExpireStaleHoldsUseCase:
    return ExpireStaleHoldsUseCase(
        store=store, seat_inventory=seat_inventory, reservation_locks=reservation_locks, clock=clock
    )
