"""
Expire Stale Holds Use Case

Holds expire lazily on their own; this sweep also moves the owning
reservations to EXPIRED so status queries and seat maps stay current.
"""

from typing import List

from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.platform.state.keyed_lock import KeyedLock
from src.service.cinema_booking.app.interface.i_persistence_store import IPersistenceStore
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory
from src.service.cinema_booking.domain.clock import Clock, utc_now
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation


class ExpireStaleHoldsUseCase:
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

    async def expire_if_stale(self, *, reservation: Reservation) -> Reservation:
        """Return the reservation, moved to EXPIRED if its deadline has passed"""
        if not reservation.is_open or not reservation.is_past_deadline(self.clock()):
            return reservation
        if self.reservation_locks.is_locked(reservation.id):
            # A payment is in flight; it checks the deadline itself
            return reservation

        async with self.reservation_locks.hold(reservation.id):
            current = await self.store.get_reservation(reservation_id=reservation.id)
            if current is None or not current.is_open:
                return current or reservation
            expired = current.expire(now=self.clock())
            await self.store.save(entity=expired)
            await self.seat_inventory.release(token=current.hold)
            if current.open_payment_reference is not None:
                Logger.base.critical(
                    f'🚨 [EXPIRE] Reservation {current.id} expired with charge '
                    f'{current.open_payment_reference} unanswered; reconcile with the gateway'
                )

        Logger.base.info(f'⌛ [EXPIRE] Reservation {reservation.id} expired')
        return expired

    @Logger.io
    async def sweep(self) -> List[Reservation]:
        with self.tracer.start_as_current_span('use_case.expire_stale_holds'):
            await self.seat_inventory.sweep_expired()

            now = self.clock()
            expired: List[Reservation] = []
            for reservation in await self.store.list_open_reservations():
                if not reservation.is_past_deadline(now):
                    continue
                result = await self.expire_if_stale(reservation=reservation)
                if not result.is_open:
                    expired.append(result)
            return expired
