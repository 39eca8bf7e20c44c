from datetime import datetime

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.cinema_booking.domain.enum.seat_type import SeatType


@attrs.frozen
class Screening:
    """One showing of a movie in a cinema; owned by the catalog, read-only here"""

    id: int
    movie_title: str
    cinema_name: str
    starts_at: datetime
    standard_seat_price: int
    deluxe_seat_price: int

    def __attrs_post_init__(self) -> None:
        if self.standard_seat_price <= 0 or self.deluxe_seat_price <= 0:
            raise DomainError(f'Screening {self.id} seat prices must be positive')

    def price_for(self, seat_type: SeatType) -> int:
        return self.deluxe_seat_price if seat_type == SeatType.DELUXE else self.standard_seat_price
