"""
Persistence Store Interface

Boundary to durable storage. Relations are by identifier only.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import List, Optional, Union

from uuid_utils import UUID

from src.service.cinema_booking.domain.entity.concession_entity import Concession
from src.service.cinema_booking.domain.entity.payment_entity import Payment
from src.service.cinema_booking.domain.entity.promo_code_entity import PromoCode
from src.service.cinema_booking.domain.entity.refund_instruction_entity import RefundInstruction
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.domain.entity.seat_entity import Seat
from src.service.cinema_booking.domain.entity.ticket_entity import Ticket


Entity = Union[
    Reservation, Seat, PromoCode, Ticket, Payment, RefundInstruction, Screening, Concession
]


class IPersistenceStore(ABC):
    @abstractmethod
    async def save(self, *, entity: Entity) -> None:
        """
        Upsert one entity. Inside `transaction()` the write is staged until
        the block exits cleanly.

        Raises:
            PersistenceError: the store rejected the write
        """
        pass

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """
        All `save` calls made inside the block commit together, or none do.

        Usage:
            async with store.transaction():
                await store.save(entity=ticket)
                await store.save(entity=payment)
        """
        pass

    @abstractmethod
    async def get_screening(self, *, screening_id: int) -> Optional[Screening]:
        pass

    @abstractmethod
    async def load_seats_for_screening(self, *, screening_id: int) -> List[Seat]:
        pass

    @abstractmethod
    async def get_reservation(self, *, reservation_id: UUID) -> Optional[Reservation]:
        pass

    @abstractmethod
    async def list_open_reservations(self) -> List[Reservation]:
        """Reservations still HOLDING or AWAITING_PAYMENT"""
        pass

    @abstractmethod
    async def get_promo_code(self, *, code: str) -> Optional[PromoCode]:
        pass

    @abstractmethod
    async def list_promo_codes(self) -> List[PromoCode]:
        pass

    @abstractmethod
    async def get_concession(self, *, item_id: int) -> Optional[Concession]:
        pass

    @abstractmethod
    async def list_concessions(self) -> List[Concession]:
        pass

    @abstractmethod
    async def find_ticket_code(self, *, code: str) -> bool:
        """True if a persisted ticket already carries `code`"""
        pass

    @abstractmethod
    async def list_tickets_by_reservation(self, *, reservation_id: UUID) -> List[Ticket]:
        pass

    @abstractmethod
    async def get_payments_by_reservation(self, *, reservation_id: UUID) -> List[Payment]:
        pass
