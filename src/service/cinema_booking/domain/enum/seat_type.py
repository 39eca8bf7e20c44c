from enum import StrEnum


class SeatType(StrEnum):
    STANDARD = 'standard'
    DELUXE = 'deluxe'
