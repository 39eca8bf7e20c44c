"""
Demo catalog

The catalog is owned by another system; this seeds the in-memory store
with one screening, its seats, a concession stand and a few promo codes so
the API can be exercised locally.
"""

from datetime import date, datetime, timedelta, timezone

from src.service.cinema_booking.app.interface.i_persistence_store import IPersistenceStore
from src.service.cinema_booking.domain.entity.concession_entity import Concession
from src.service.cinema_booking.domain.entity.promo_code_entity import PromoCode
from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.domain.entity.seat_entity import Seat
from src.service.cinema_booking.domain.enum.discount_type import DiscountType
from src.service.cinema_booking.domain.enum.seat_type import SeatType


DEMO_SCREENING_ID = 1
DEMO_ROWS = 'ABCDE'
DEMO_SEATS_PER_ROW = 10
DELUXE_ROWS = frozenset('E')
DEMO_CONCESSIONS = (
    Concession(id=1, name='Small Popcorn', price=8000, category='Food'),
    Concession(id=2, name='Large Popcorn', price=12000, category='Food'),
    Concession(id=3, name='Nachos with Cheese', price=10000, category='Food'),
    Concession(id=4, name='Small Soda', price=6000, category='Drinks'),
    Concession(id=5, name='Large Soda', price=8000, category='Drinks'),
    Concession(
        id=6,
        name='Movie Combo',
        price=18000,
        category='Combo',
        description='Large popcorn and 2 regular sodas',
    ),
    Concession(id=7, name='Hot Dog', price=9000, category='Food', is_available=False),
)


async def seed_demo_catalog(store: IPersistenceStore) -> None:
    today = datetime.now(timezone.utc).date()
    await store.save(
        entity=Screening(
            id=DEMO_SCREENING_ID,
            movie_title='The Grand Premiere',
            cinema_name='Cinema 1',
            starts_at=datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)
            + timedelta(days=1),
            standard_seat_price=10000,
            deluxe_seat_price=15000,
        )
    )
    for row in DEMO_ROWS:
        for number in range(1, DEMO_SEATS_PER_ROW + 1):
            await store.save(
                entity=Seat(
                    id=f'{row}{number}',
                    screening_id=DEMO_SCREENING_ID,
                    seat_type=SeatType.DELUXE if row in DELUXE_ROWS else SeatType.STANDARD,
                    row=row,
                    number=number,
                )
            )
    for item in DEMO_CONCESSIONS:
        await store.save(entity=item)
    for promo in (
        PromoCode(
            code='WELCOME10',
            description='10% off your booking',
            discount_type=DiscountType.PERCENTAGE,
            amount=10,
            valid_from=today - timedelta(days=30),
            valid_until=today + timedelta(days=365),
        ),
        PromoCode(
            code='SAVE100',
            description='100.00 off orders of 500.00 or more',
            discount_type=DiscountType.FIXED,
            amount=10000,
            valid_from=today - timedelta(days=30),
            valid_until=today + timedelta(days=365),
            max_uses=100,
            min_purchase_amount=50000,
        ),
        PromoCode(
            code='EXPIRED20',
            discount_type=DiscountType.PERCENTAGE,
            amount=20,
            valid_from=date(2020, 1, 1),
            valid_until=date(2020, 12, 31),
        ),
    ):
        await store.save(entity=promo)
