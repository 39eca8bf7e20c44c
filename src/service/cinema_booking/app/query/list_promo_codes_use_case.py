from datetime import date
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.service.cinema_booking.app.interface.i_persistence_store import IPersistenceStore
from src.service.cinema_booking.domain.clock import Clock, utc_now
from src.service.cinema_booking.domain.entity.promo_code_entity import PromoCode


class ListPromoCodesUseCase:
    def __init__(self, *, store: IPersistenceStore, clock: Clock = utc_now) -> None:
        self.store = store
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls, store: IPersistenceStore = Depends(Provide[Container.persistence_store])
    ) -> Self:
        return cls(store=store)

    async def list_promo_codes(
        self, *, active_only: bool = False, as_of: Optional[date] = None
    ) -> List[PromoCode]:
        """
        All codes ordered by code, or with `active_only` just the ones a
        customer could redeem today, soonest to lapse first.
        """
        promos = await self.store.list_promo_codes()
        if not active_only:
            return promos
        today = as_of or self.clock().date()
        return sorted(
            (promo for promo in promos if promo.is_redeemable(today)),
            key=lambda promo: promo.valid_until,
        )

    async def get_promo_code(self, *, code: str) -> PromoCode:
        promo = await self.store.get_promo_code(code=code)
        if promo is None:
            raise NotFoundError(f'Promo code {code} not found')
        return promo
