import attrs

from src.service.cinema_booking.domain.enum.seat_state import SeatState
from src.service.cinema_booking.domain.enum.seat_type import SeatType


@attrs.define
class Seat:
    id: str  # e.g. 'A1', unique within its screening
    screening_id: int
    seat_type: SeatType = SeatType.STANDARD
    state: SeatState = SeatState.AVAILABLE
    row: str = ''
    number: int = 0
