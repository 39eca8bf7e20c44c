"""
Manage Promo Code Use Case - create, update and deactivate promo codes
"""

from typing import Any, Mapping, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.state.keyed_lock import KeyedLock
from src.service.cinema_booking.app.interface.i_persistence_store import IPersistenceStore
from src.service.cinema_booking.domain.entity.promo_code_entity import PromoCode


UPDATABLE_FIELDS = frozenset(
    {
        'description',
        'discount_type',
        'amount',
        'valid_from',
        'valid_until',
        'max_uses',
        'min_purchase_amount',
        'is_active',
    }
)
NULLABLE_FIELDS = frozenset({'max_uses'})


class ManagePromoCodeUseCase:
    """
    Every write runs under the same per-code lock as redemption, so an update
    always starts from the latest usage counter and never overwrites a
    redemption that raced it. Codes are deactivated, never deleted: held
    reservations still refer to them by code.
    """

    def __init__(self, *, store: IPersistenceStore, promo_code_locks: KeyedLock) -> None:
        self.store = store
        self.promo_code_locks = promo_code_locks

    @classmethod
    @inject
    def depends(
        cls,
        store: IPersistenceStore = Depends(Provide[Container.persistence_store]),
        promo_code_locks: KeyedLock = Depends(Provide[Container.promo_code_locks]),
    ) -> Self:
        return cls(store=store, promo_code_locks=promo_code_locks)

    @Logger.io
    async def create(self, *, promo: PromoCode) -> PromoCode:
        async with self.promo_code_locks.hold(promo.code):
            if await self.store.get_promo_code(code=promo.code) is not None:
                raise ConflictError(f'Promo code {promo.code} already exists')
            created = attrs.evolve(promo, current_uses=0)
            await self.store.save(entity=created)

        Logger.base.info(f'🏷️ [PROMO] Created {created.code}')
        return created

    @Logger.io
    async def update(self, *, code: str, changes: Mapping[str, Any]) -> PromoCode:
        """
        Partial update; fields left out of `changes` keep their value.

        Raises:
            DomainError: unknown field, a null for a required field, or an invalid result
            NotFoundError: no such code
        """
        if unknown := sorted(set(changes) - UPDATABLE_FIELDS):
            raise DomainError(f'Cannot update {", ".join(unknown)} of a promo code')
        nulled = sorted(
            field
            for field, value in changes.items()
            if value is None and field not in NULLABLE_FIELDS
        )
        if nulled:
            raise DomainError(f'{", ".join(nulled)} cannot be empty')

        async with self.promo_code_locks.hold(code):
            promo = await self.store.get_promo_code(code=code)
            if promo is None:
                raise NotFoundError(f'Promo code {code} not found')
            # evolve re-runs the entity checks against the merged values
            updated = attrs.evolve(promo, **changes)
            await self.store.save(entity=updated)

        Logger.base.info(f'🏷️ [PROMO] Updated {code}: {sorted(changes)}')
        return updated

    async def deactivate(self, *, code: str) -> PromoCode:
        return await self.update(code=code, changes={'is_active': False})
