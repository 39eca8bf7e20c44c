"""Application layer DTOs"""

from src.service.cinema_booking.app.dto.payment_dto import GatewayFailure, GatewaySuccess
from src.service.cinema_booking.app.dto.promo_dto import InvalidPromo, PromoRedemption, ValidPromo
from src.service.cinema_booking.app.dto.reservation_dto import (
    BookingConfirmation,
    ConcessionOrder,
    PaymentResult,
)

__all__ = [
    'BookingConfirmation',
    'ConcessionOrder',
    'GatewayFailure',
    'GatewaySuccess',
    'InvalidPromo',
    'PaymentResult',
    'PromoRedemption',
    'ValidPromo',
]
