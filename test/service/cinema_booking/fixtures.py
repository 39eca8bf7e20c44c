"""Shared builders for cinema booking unit tests"""

from datetime import date, datetime, timedelta, timezone
from typing import Iterator

import attrs

from src.service.cinema_booking.domain.entity.concession_entity import Concession
from src.service.cinema_booking.domain.entity.promo_code_entity import PromoCode
from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.domain.entity.seat_entity import Seat
from src.service.cinema_booking.domain.enum.discount_type import DiscountType
from src.service.cinema_booking.domain.enum.seat_type import SeatType
from src.service.cinema_booking.driven_adapter.repo.in_memory_persistence_store import (
    InMemoryPersistenceStore,
)


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
HOLD_TTL = timedelta(minutes=10)

SCREENING_ID = 1
OTHER_SCREENING_ID = 2
STANDARD_PRICE = 10000
DELUXE_PRICE = 15000
STANDARD_SEATS = ['A1', 'A2', 'A3', 'A4', 'A5']
DELUXE_SEATS = ['D1', 'D2', 'D3']

POPCORN = Concession(id=1, name='Popcorn', price=5000, category='Food')
SODA = Concession(id=2, name='Soda', price=3000, category='Drinks')
HOT_DOG = Concession(id=3, name='Hot Dog', price=4500, category='Food', is_available=False)


@attrs.define
class FakeClock:
    now: datetime = NOW

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


def make_screening(screening_id: int = SCREENING_ID) -> Screening:
    return Screening(
        id=screening_id,
        movie_title='Test Movie',
        cinema_name='Cinema 1',
        starts_at=NOW + timedelta(days=1),
        standard_seat_price=STANDARD_PRICE,
        deluxe_seat_price=DELUXE_PRICE,
    )


def make_seats(screening_id: int = SCREENING_ID) -> Iterator[Seat]:
    for seat_id in STANDARD_SEATS:
        yield Seat(
            id=seat_id,
            screening_id=screening_id,
            seat_type=SeatType.STANDARD,
            row=seat_id[0],
            number=int(seat_id[1:]),
        )
    for seat_id in DELUXE_SEATS:
        yield Seat(
            id=seat_id,
            screening_id=screening_id,
            seat_type=SeatType.DELUXE,
            row=seat_id[0],
            number=int(seat_id[1:]),
        )


def make_promo(code: str = 'TENOFF', **overrides: object) -> PromoCode:
    fields: dict = {
        'code': code,
        'discount_type': DiscountType.PERCENTAGE,
        'amount': 10,
        'valid_from': date(2026, 1, 1),
        'valid_until': date(2026, 12, 31),
    }
    fields.update(overrides)
    return PromoCode(**fields)


async def seed_catalog(store: InMemoryPersistenceStore) -> None:
    for screening_id in (SCREENING_ID, OTHER_SCREENING_ID):
        await store.save(entity=make_screening(screening_id))
        for seat in make_seats(screening_id):
            await store.save(entity=seat)

    for item in (POPCORN, SODA, HOT_DOG):
        await store.save(entity=item)

    for promo in (
        make_promo('TENOFF'),
        make_promo('LIMITED', discount_type=DiscountType.FIXED, amount=5000, max_uses=1),
        make_promo('INACTIVE', is_active=False),
        make_promo('OLD', valid_from=date(2025, 1, 1), valid_until=date(2025, 12, 31)),
        make_promo('BIGSPEND', min_purchase_amount=100000),
    ):
        await store.save(entity=promo)
