from typing import List, Optional

import attrs
from uuid_utils import UUID

from src.platform.exception.exceptions import DomainError
from src.service.cinema_booking.domain.entity.payment_entity import Payment
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.entity.ticket_entity import Ticket


@attrs.frozen
class ConcessionOrder:
    """What the customer asks for; the unit price comes from the concession catalog"""

    item_id: int
    quantity: int

    def __attrs_post_init__(self) -> None:
        if self.quantity < 0:
            raise DomainError(f'Concession quantity must be >= 0, got {self.quantity}')


@attrs.frozen
class BookingConfirmation:
    """Snapshot handed to the notification service once a reservation is ticketed"""

    reservation_id: UUID
    screening_id: int
    movie_title: str
    cinema_name: str
    recipient: str
    seat_ids: tuple[str, ...]
    ticket_codes: tuple[str, ...]
    total: int


@attrs.frozen
class PaymentResult:
    reservation: Reservation
    payment: Payment
    tickets: List[Ticket] = attrs.field(factory=list)
    notified: Optional[bool] = None
