"""
Pricing Engine

Pure arithmetic over integer minor-currency units. Seat prices are always
resolved from the Screening record; there is no default price to fall back on.
"""

from typing import Iterable, Optional

from src.service.cinema_booking.domain.entity.promo_code_entity import PromoCode
from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.domain.entity.seat_entity import Seat
from src.service.cinema_booking.domain.enum.discount_type import DiscountType
from src.service.cinema_booking.domain.value_object.concession_line import ConcessionLine
from src.service.cinema_booking.domain.value_object.price_breakdown import PriceBreakdown


def seats_subtotal(seats: Iterable[Seat], screening: Screening) -> int:
    return sum(screening.price_for(seat.seat_type) for seat in seats)


def concessions_subtotal(lines: Iterable[ConcessionLine]) -> int:
    return sum(line.unit_price * line.quantity for line in lines)


def apply_discount(subtotal: int, promo: Optional[PromoCode]) -> int:
    if promo is None or subtotal <= 0:
        return 0
    if promo.discount_type == DiscountType.PERCENTAGE:
        return subtotal * promo.amount // 100
    return min(promo.amount, subtotal)


def calculate(
    *,
    seats: Iterable[Seat],
    screening: Screening,
    concessions: Iterable[ConcessionLine] = (),
    promo: Optional[PromoCode] = None,
) -> PriceBreakdown:
    seat_total = seats_subtotal(seats, screening)
    concession_total = concessions_subtotal(concessions)
    discount = apply_discount(seat_total + concession_total, promo)
    return PriceBreakdown(
        seats_subtotal=seat_total,
        concessions_subtotal=concession_total,
        discount=discount,
        total=max(0, seat_total + concession_total - discount),
    )
