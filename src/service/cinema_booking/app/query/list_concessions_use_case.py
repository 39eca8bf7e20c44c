from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.service.cinema_booking.app.interface.i_persistence_store import IPersistenceStore
from src.service.cinema_booking.domain.entity.concession_entity import Concession


class ListConcessionsUseCase:
    def __init__(self, *, store: IPersistenceStore) -> None:
        self.store = store

    @classmethod
    @inject
    def depends(
        cls, store: IPersistenceStore = Depends(Provide[Container.persistence_store])
    ) -> Self:
        return cls(store=store)

    async def list_concessions(self, *, available_only: bool = True) -> List[Concession]:
        """Catalog ordered by category, then name"""
        items = await self.store.list_concessions()
        if available_only:
            return [item for item in items if item.is_available]
        return items
