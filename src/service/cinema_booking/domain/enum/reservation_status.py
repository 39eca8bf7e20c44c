from enum import StrEnum


class ReservationStatus(StrEnum):
    HOLDING = 'holding'
    AWAITING_PAYMENT = 'awaiting_payment'
    PAID = 'paid'
    TICKETED = 'ticketed'
    EXPIRED = 'expired'
    CANCELLED = 'cancelled'
