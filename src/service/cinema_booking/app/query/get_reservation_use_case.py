from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.state.keyed_lock import KeyedLock
from src.service.cinema_booking.app.command.expire_stale_holds_use_case import (
    ExpireStaleHoldsUseCase,
)
from src.service.cinema_booking.app.interface.i_persistence_store import IPersistenceStore
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory
from src.service.cinema_booking.domain.entity.payment_entity import Payment
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.entity.ticket_entity import Ticket


class GetReservationUseCase:
    def __init__(self, *, store: IPersistenceStore, expire_stale_holds: ExpireStaleHoldsUseCase):
        self.store = store
        self.expire_stale_holds = expire_stale_holds

    @classmethod
    @inject
    def depends(
        cls,
        store: IPersistenceStore = Depends(Provide[Container.persistence_store]),
        seat_inventory: ISeatInventory = Depends(Provide[Container.seat_inventory]),
        reservation_locks: KeyedLock = Depends(Provide[Container.reservation_locks]),
    ) -> Self:
        return cls(
            store=store,
            expire_stale_holds=ExpireStaleHoldsUseCase(
                store=store, seat_inventory=seat_inventory, reservation_locks=reservation_locks
            ),
        )

    @Logger.io
    async def get_reservation(self, *, reservation_id: UUID) -> Reservation:
        reservation = await self.store.get_reservation(reservation_id=reservation_id)
        if reservation is None:
            raise NotFoundError(f'Reservation {reservation_id} not found')
        return await self.expire_stale_holds.expire_if_stale(reservation=reservation)

    @Logger.io
    async def list_tickets(self, *, reservation_id: UUID) -> List[Ticket]:
        await self.get_reservation(reservation_id=reservation_id)
        return await self.store.list_tickets_by_reservation(reservation_id=reservation_id)

    @Logger.io
    async def list_payments(self, *, reservation_id: UUID) -> List[Payment]:
        await self.get_reservation(reservation_id=reservation_id)
        return await self.store.get_payments_by_reservation(reservation_id=reservation_id)
