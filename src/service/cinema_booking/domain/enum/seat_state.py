from enum import StrEnum


class SeatState(StrEnum):
    """AVAILABLE < HELD < BOOKED in exclusivity; only SeatInventory moves a seat between them"""

    AVAILABLE = 'available'
    HELD = 'held'
    BOOKED = 'booked'
