from typing import List, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.service.cinema_booking.app.interface.i_persistence_store import IPersistenceStore
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory
from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.domain.entity.seat_entity import Seat


class GetSeatMapUseCase:
    def __init__(self, *, store: IPersistenceStore, seat_inventory: ISeatInventory) -> None:
        self.store = store
        self.seat_inventory = seat_inventory

    @classmethod
    @inject
    def depends(
        cls,
        store: IPersistenceStore = Depends(Provide[Container.persistence_store]),
        seat_inventory: ISeatInventory = Depends(Provide[Container.seat_inventory]),
    ) -> Self:
        return cls(store=store, seat_inventory=seat_inventory)

    async def get_seat_map(self, *, screening_id: int) -> tuple[Screening, List[Seat]]:
        """Seats ordered by row and number, with live state from the inventory"""
        screening = await self.store.get_screening(screening_id=screening_id)
        if screening is None:
            raise NotFoundError(f'Screening {screening_id} not found')

        seats = await self.store.load_seats_for_screening(screening_id=screening_id)
        states = await self.seat_inventory.seat_states(screening_id=screening_id)
        live = [attrs.evolve(seat, state=states.get(seat.id, seat.state)) for seat in seats]
        return screening, sorted(live, key=lambda seat: (seat.row, seat.number, seat.id))
