from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.state.keyed_lock import KeyedLock
from src.service.cinema_booking.app.interface.i_persistence_store import IPersistenceStore
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory
from src.service.cinema_booking.domain.clock import Clock, utc_now
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation


class CancelReservationUseCase:
    def __init__(
        self,
        *,
        store: IPersistenceStore,
        seat_inventory: ISeatInventory,
        reservation_locks: KeyedLock,
        clock: Clock = utc_now,
    ) -> None:
        self.store = store
        self.seat_inventory = seat_inventory
        self.reservation_locks = reservation_locks
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        store: IPersistenceStore = Depends(Provide[Container.persistence_store]),
        seat_inventory: ISeatInventory = Depends(Provide[Container.seat_inventory]),
        reservation_locks: KeyedLock = Depends(Provide[Container.reservation_locks]),
    ) -> Self:
        return cls(store=store, seat_inventory=seat_inventory, reservation_locks=reservation_locks)

    @Logger.io
    async def cancel(self, *, reservation_id: UUID) -> Reservation:
        """
        HOLDING / AWAITING_PAYMENT → CANCELLED, seats released.

        Raises:
            NotFoundError: unknown reservation
            DomainError: reservation already paid, ticketed, expired or cancelled
        """
        with self.tracer.start_as_current_span(
            'use_case.cancel_reservation', attributes={'reservation.id': str(reservation_id)}
        ):
            async with self.reservation_locks.hold(reservation_id):
                reservation = await self.store.get_reservation(reservation_id=reservation_id)
                if reservation is None:
                    raise NotFoundError(f'Reservation {reservation_id} not found')

                cancelled = reservation.cancel(now=self.clock())
                # Persist first: a failed write leaves both reservation and hold untouched
                await self.store.save(entity=cancelled)
                await self.seat_inventory.release(token=reservation.hold)
                if reservation.open_payment_reference is not None:
                    Logger.base.critical(
                        f'🚨 [CANCEL] Reservation {reservation_id} cancelled with charge '
                        f'{reservation.open_payment_reference} unanswered; reconcile with the gateway'
                    )

            Logger.base.info(f'🚫 [CANCEL] Reservation {reservation_id} cancelled')
            return cancelled
