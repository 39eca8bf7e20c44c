"""
Modules that need dependency injection wiring.
Shared between production and test apps.
"""

from types import ModuleType

from src.service.cinema_booking.app.command import (
    cancel_reservation_use_case,
    hold_seats_use_case,
    manage_promo_code_use_case,
    pay_reservation_use_case,
)
from src.service.cinema_booking.app.query import (
    get_reservation_use_case,
    get_seat_map_use_case,
    list_concessions_use_case,
    list_promo_codes_use_case,
    validate_promo_code_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    hold_seats_use_case,
    pay_reservation_use_case,
    cancel_reservation_use_case,
    get_reservation_use_case,
    get_seat_map_use_case,
    validate_promo_code_use_case,
    manage_promo_code_use_case,
    list_promo_codes_use_case,
    list_concessions_use_case,
]
