"""Cinema Booking Domain Enums"""

from src.service.cinema_booking.domain.enum.discount_type import DiscountType
from src.service.cinema_booking.domain.enum.payment_method import PaymentMethod
from src.service.cinema_booking.domain.enum.promo_invalid_reason import PromoInvalidReason
from src.service.cinema_booking.domain.enum.reservation_status import ReservationStatus
from src.service.cinema_booking.domain.enum.seat_state import SeatState
from src.service.cinema_booking.domain.enum.seat_type import SeatType

__all__ = [
    'DiscountType',
    'PaymentMethod',
    'PromoInvalidReason',
    'ReservationStatus',
    'SeatState',
    'SeatType',
]
