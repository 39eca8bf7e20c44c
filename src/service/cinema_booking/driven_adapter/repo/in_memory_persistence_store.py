"""
In-memory Persistence Store

Default adapter for the persistence boundary. Writes made inside
`transaction()` are staged per task and applied in one step on a clean
exit, so a failure anywhere in the block leaves the store untouched.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Dict, List, Optional

import anyio.lowlevel
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.interface.i_persistence_store import (
    Entity,
    IPersistenceStore,
)
from src.service.cinema_booking.domain.entity.concession_entity import Concession
from src.service.cinema_booking.domain.entity.payment_entity import Payment
from src.service.cinema_booking.domain.entity.promo_code_entity import PromoCode
from src.service.cinema_booking.domain.entity.refund_instruction_entity import RefundInstruction
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.domain.entity.seat_entity import Seat
from src.service.cinema_booking.domain.entity.ticket_entity import Ticket


_staged_writes: ContextVar[Optional[List[Entity]]] = ContextVar('staged_writes', default=None)


class InMemoryPersistenceStore(IPersistenceStore):
    def __init__(self) -> None:
        self._screenings: Dict[int, Screening] = {}
        self._seats: Dict[int, Dict[str, Seat]] = {}
        self._reservations: Dict[UUID, Reservation] = {}
        self._promo_codes: Dict[str, PromoCode] = {}
        self._concessions: Dict[int, Concession] = {}
        self._tickets: Dict[UUID, Ticket] = {}
        self._ticket_codes: set[str] = set()
        self._payments: Dict[UUID, Payment] = {}
        self.refund_instructions: Dict[UUID, RefundInstruction] = {}

    def _apply(self, entity: Entity) -> None:
        if isinstance(entity, Reservation):
            self._reservations[entity.id] = entity
        elif isinstance(entity, Seat):
            self._seats.setdefault(entity.screening_id, {})[entity.id] = entity
        elif isinstance(entity, PromoCode):
            self._promo_codes[entity.code] = entity
        elif isinstance(entity, Ticket):
            self._tickets[entity.id] = entity
            self._ticket_codes.add(entity.code)
        elif isinstance(entity, Payment):
            self._payments[entity.id] = entity
        elif isinstance(entity, RefundInstruction):
            self.refund_instructions[entity.id] = entity
        elif isinstance(entity, Screening):
            self._screenings[entity.id] = entity
        elif isinstance(entity, Concession):
            self._concessions[entity.id] = entity
        else:
            raise TypeError(f'Cannot persist {type(entity).__name__}')

    async def save(self, *, entity: Entity) -> None:
        await anyio.lowlevel.checkpoint()
        staged = _staged_writes.get()
        if staged is not None:
            staged.append(entity)
        else:
            self._apply(entity)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:  # type: ignore[override]
        if _staged_writes.get() is not None:
            # Nested block joins the outer transaction
            yield
            return

        token = _staged_writes.set([])
        try:
            yield
            staged = _staged_writes.get() or []
        finally:
            _staged_writes.reset(token)

        for entity in staged:
            self._apply(entity)
        Logger.base.debug(f'💾 [STORE] Committed {len(staged)} staged writes')

    async def get_screening(self, *, screening_id: int) -> Optional[Screening]:
        await anyio.lowlevel.checkpoint()
        return self._screenings.get(screening_id)

    async def load_seats_for_screening(self, *, screening_id: int) -> List[Seat]:
        await anyio.lowlevel.checkpoint()
        return list(self._seats.get(screening_id, {}).values())

    async def get_reservation(self, *, reservation_id: UUID) -> Optional[Reservation]:
        await anyio.lowlevel.checkpoint()
        return self._reservations.get(reservation_id)

    async def list_open_reservations(self) -> List[Reservation]:
        await anyio.lowlevel.checkpoint()
        return [reservation for reservation in self._reservations.values() if reservation.is_open]

    async def get_promo_code(self, *, code: str) -> Optional[PromoCode]:
        await anyio.lowlevel.checkpoint()
        return self._promo_codes.get(code)

    async def list_promo_codes(self) -> List[PromoCode]:
        await anyio.lowlevel.checkpoint()
        return sorted(self._promo_codes.values(), key=lambda promo: promo.code)

    async def get_concession(self, *, item_id: int) -> Optional[Concession]:
        await anyio.lowlevel.checkpoint()
        return self._concessions.get(item_id)

    async def list_concessions(self) -> List[Concession]:
        await anyio.lowlevel.checkpoint()
        return sorted(self._concessions.values(), key=lambda item: (item.category, item.name))

    async def find_ticket_code(self, *, code: str) -> bool:
        await anyio.lowlevel.checkpoint()
        return code in self._ticket_codes

    async def list_tickets_by_reservation(self, *, reservation_id: UUID) -> List[Ticket]:
        await anyio.lowlevel.checkpoint()
        return [ticket for ticket in self._tickets.values() if ticket.reservation_id == reservation_id]

    async def get_payments_by_reservation(self, *, reservation_id: UUID) -> List[Payment]:
        await anyio.lowlevel.checkpoint()
        return sorted(
            (payment for payment in self._payments.values() if payment.reservation_id == reservation_id),
            key=lambda payment: payment.created_at,
        )
