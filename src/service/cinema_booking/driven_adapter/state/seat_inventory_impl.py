"""
In-process Seat Inventory

One seat map per screening, guarded by a per-screening lock. The whole
check-then-mark step of a hold runs inside that lock, so two holds that
overlap are linearized and holds on other screenings never wait.
"""

from datetime import timedelta
import time
from typing import Dict, List

import attrs
from opentelemetry import trace
from uuid_utils import UUID
import uuid_utils

from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.platform.state.keyed_lock import KeyedLock
from src.service.cinema_booking.app.interface.i_persistence_store import IPersistenceStore
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory
from src.service.cinema_booking.domain.booking_errors import HoldExpiredError, SeatUnavailableError
from src.service.cinema_booking.domain.clock import Clock, utc_now
from src.service.cinema_booking.domain.entity.seat_entity import Seat
from src.service.cinema_booking.domain.enum.seat_state import SeatState
from src.service.cinema_booking.domain.value_object.hold_token import HoldToken


@attrs.define
class _SeatMap:
    seats: Dict[str, Seat]
    holds: Dict[UUID, HoldToken] = attrs.field(factory=dict)

    def set_state(self, seat_ids: tuple[str, ...], state: SeatState) -> None:
        for seat_id in seat_ids:
            self.seats[seat_id].state = state


class SeatInventoryImpl(ISeatInventory):
    def __init__(self, *, store: IPersistenceStore, clock: Clock = utc_now) -> None:
        self.store = store
        self.clock = clock
        self._seat_maps: Dict[int, _SeatMap] = {}
        self._locks = KeyedLock(name='screening')
        self.tracer = trace.get_tracer(__name__)

    async def _get_seat_map(self, screening_id: int) -> _SeatMap:
        if (seat_map := self._seat_maps.get(screening_id)) is not None:
            return seat_map

        # Loaded outside the lock; the first completed load wins
        seats = await self.store.load_seats_for_screening(screening_id=screening_id)
        if not seats:
            raise NotFoundError(f'Screening {screening_id} has no seats')
        loaded = _SeatMap(
            seats={
                seat.id: attrs.evolve(
                    seat,
                    # Holds are not persisted, so only BOOKED survives a reload
                    state=SeatState.BOOKED
                    if seat.state == SeatState.BOOKED
                    else SeatState.AVAILABLE,
                )
                for seat in seats
            }
        )
        return self._seat_maps.setdefault(screening_id, loaded)

    def _release_expired(self, screening_id: int, seat_map: _SeatMap) -> List[HoldToken]:
        """Caller holds the screening lock"""
        now = self.clock()
        expired = [token for token in seat_map.holds.values() if token.is_expired(now)]
        for token in expired:
            del seat_map.holds[token.id]
            seat_map.set_state(token.seat_ids, SeatState.AVAILABLE)
            metrics.record_hold_closed(screening_id=str(screening_id), expired=True)
            Logger.base.info(
                f'⌛ [INVENTORY] Hold {token.id} expired, released {list(token.seat_ids)}'
            )
        return expired

    @Logger.io
    async def place_hold(
        self, *, screening_id: int, seat_ids: list[str], ttl: timedelta
    ) -> HoldToken:
        if not seat_ids:
            raise DomainError('At least one seat is required')
        if len(set(seat_ids)) != len(seat_ids):
            raise DomainError('Seat list contains duplicates')

        with self.tracer.start_as_current_span(
            'inventory.place_hold',
            attributes={'screening.id': screening_id, 'seat.count': len(seat_ids)},
        ):
            start = time.perf_counter()
            seat_map = await self._get_seat_map(screening_id)

            async with self._locks.hold(screening_id):
                self._release_expired(screening_id, seat_map)

                unknown = [seat_id for seat_id in seat_ids if seat_id not in seat_map.seats]
                if unknown:
                    raise NotFoundError(
                        f'Seats {unknown} do not belong to screening {screening_id}'
                    )

                conflicting = [
                    seat_id
                    for seat_id in seat_ids
                    if seat_map.seats[seat_id].state != SeatState.AVAILABLE
                ]
                if conflicting:
                    metrics.record_seat_hold(
                        screening_id=str(screening_id),
                        result='conflict',
                        duration=time.perf_counter() - start,
                    )
                    raise SeatUnavailableError(conflicting)

                now = self.clock()
                token = HoldToken(
                    id=uuid_utils.uuid7(),
                    screening_id=screening_id,
                    seat_ids=tuple(seat_ids),
                    created_at=now,
                    expires_at=now + ttl,
                )
                seat_map.set_state(token.seat_ids, SeatState.HELD)
                seat_map.holds[token.id] = token

            metrics.record_seat_hold(
                screening_id=str(screening_id),
                result='success',
                duration=time.perf_counter() - start,
            )
            Logger.base.info(
                f'🔒 [INVENTORY] Hold {token.id} on screening {screening_id}: {seat_ids}'
            )
            return token

    @Logger.io
    async def release(self, *, token: HoldToken) -> None:
        seat_map = self._seat_maps.get(token.screening_id)
        if seat_map is None:
            return

        async with self._locks.hold(token.screening_id):
            self._release_expired(token.screening_id, seat_map)
            if seat_map.holds.pop(token.id, None) is None:
                return
            seat_map.set_state(token.seat_ids, SeatState.AVAILABLE)

        metrics.record_hold_closed(screening_id=str(token.screening_id))
        Logger.base.info(f'🔓 [INVENTORY] Released hold {token.id}')

    @Logger.io
    async def confirm(self, *, token: HoldToken) -> list[str]:
        seat_map = self._seat_maps.get(token.screening_id)
        if seat_map is None:
            raise HoldExpiredError(f'Hold {token.id} is unknown')

        async with self._locks.hold(token.screening_id):
            self._release_expired(token.screening_id, seat_map)
            if seat_map.holds.pop(token.id, None) is None:
                raise HoldExpiredError(f'Hold {token.id} has expired or was already used')
            seat_map.set_state(token.seat_ids, SeatState.BOOKED)

        metrics.record_hold_closed(screening_id=str(token.screening_id))
        Logger.base.info(f'🎟️ [INVENTORY] Confirmed hold {token.id}: {list(token.seat_ids)}')
        return list(token.seat_ids)

    async def sweep_expired(self) -> list[HoldToken]:
        released: list[HoldToken] = []
        for screening_id, seat_map in list(self._seat_maps.items()):
            async with self._locks.hold(screening_id):
                released.extend(self._release_expired(screening_id, seat_map))
        return released

    async def seat_states(self, *, screening_id: int) -> dict[str, SeatState]:
        seat_map = await self._get_seat_map(screening_id)
        async with self._locks.hold(screening_id):
            self._release_expired(screening_id, seat_map)
            return {seat_id: seat.state for seat_id, seat in seat_map.seats.items()}
