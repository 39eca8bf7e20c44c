"""
Issue Tickets Use Case - one ticket per booked seat, persisted atomically
"""

from typing import List, Optional

import attrs
from opentelemetry import trace
import uuid_utils

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.cinema_booking.app.interface.i_persistence_store import IPersistenceStore
from src.service.cinema_booking.app.interface.i_ticket_code_generator import ITicketCodeGenerator
from src.service.cinema_booking.domain.booking_errors import CodeGenerationExhaustedError
from src.service.cinema_booking.domain.clock import Clock, utc_now
from src.service.cinema_booking.domain.entity.payment_entity import Payment
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.entity.seat_entity import Seat
from src.service.cinema_booking.domain.entity.ticket_entity import Ticket
from src.service.cinema_booking.domain.enum.seat_state import SeatState


class IssueTicketsUseCase:
    def __init__(
        self,
        *,
        store: IPersistenceStore,
        ticket_code_generator: ITicketCodeGenerator,
        clock: Clock = utc_now,
        max_attempts: Optional[int] = None,
    ) -> None:
        self.store = store
        self.ticket_code_generator = ticket_code_generator
        self.clock = clock
        self.max_attempts = max_attempts or settings.TICKET_CODE_MAX_ATTEMPTS
        self.tracer = trace.get_tracer(__name__)

    async def _unique_code(self, taken: set[str]) -> str:
        for _ in range(self.max_attempts):
            code = self.ticket_code_generator.generate()
            if code not in taken and not await self.store.find_ticket_code(code=code):
                return code
            metrics.ticket_code_collisions.inc()
            Logger.base.warning(f'⚠️ [TICKET] Code collision on {code}, regenerating')
        raise CodeGenerationExhaustedError(self.max_attempts)

    async def booked_seats(self, *, reservation: Reservation) -> List[Seat]:
        seats = await self.store.load_seats_for_screening(screening_id=reservation.screening_id)
        return [
            attrs.evolve(seat, state=SeatState.BOOKED)
            for seat in seats
            if seat.id in reservation.seat_ids
        ]

    @Logger.io
    async def mint_tickets(self, *, reservation: Reservation) -> List[Ticket]:
        """
        Raises:
            CodeGenerationExhaustedError: a seat got no unique code within max_attempts
        """
        now = self.clock()
        minted: set[str] = set()
        tickets: List[Ticket] = []
        for seat_id in reservation.seat_ids:
            code = await self._unique_code(minted)
            minted.add(code)
            tickets.append(
                Ticket(
                    id=uuid_utils.uuid7(),
                    reservation_id=reservation.id,
                    seat_id=seat_id,
                    code=code,
                    issued_at=now,
                )
            )
        return tickets

    @Logger.io
    async def issue(
        self, *, reservation: Reservation, payment: Payment
    ) -> tuple[Reservation, List[Ticket]]:
        """
        Mint tickets for a PAID reservation, then write tickets, payment,
        booked seats and the TICKETED reservation in one transaction.
        """
        with self.tracer.start_as_current_span(
            'use_case.issue_tickets',
            attributes={'reservation.id': str(reservation.id)},
        ):
            tickets = await self.mint_tickets(reservation=reservation)
            ticketed = reservation.mark_as_ticketed(now=self.clock())

            booked = await self.booked_seats(reservation=reservation)

            async with self.store.transaction():
                for ticket in tickets:
                    await self.store.save(entity=ticket)
                await self.store.save(entity=payment)
                for seat in booked:
                    await self.store.save(entity=seat)
                await self.store.save(entity=ticketed)

            metrics.record_tickets_issued(
                screening_id=str(reservation.screening_id), count=len(tickets)
            )
            Logger.base.info(
                f'🎫 [TICKET] Reservation {reservation.id} ticketed: '
                f'{[ticket.code for ticket in tickets]}'
            )
            return ticketed, tickets
