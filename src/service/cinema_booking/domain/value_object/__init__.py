"""Cinema Booking Domain Value Objects"""

from src.service.cinema_booking.domain.value_object.concession_line import ConcessionLine
from src.service.cinema_booking.domain.value_object.customer import (
    Customer,
    GuestCustomer,
    RegisteredCustomer,
)
from src.service.cinema_booking.domain.value_object.hold_token import HoldToken
from src.service.cinema_booking.domain.value_object.price_breakdown import PriceBreakdown

__all__ = [
    'ConcessionLine',
    'Customer',
    'GuestCustomer',
    'HoldToken',
    'PriceBreakdown',
    'RegisteredCustomer',
]
