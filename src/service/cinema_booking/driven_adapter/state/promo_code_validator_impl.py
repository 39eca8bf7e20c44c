"""
Promo Code Validator

Usage counters live on the PromoCode records of the persistence store. Every
redeem/rollback reads, checks and writes the counter inside a per-code lock,
so `current_uses` never passes `max_uses` however many redemptions race.
The lock registry is shared with promo code management, so an update can
never interleave with a redemption of the same code.
"""

from datetime import date
from typing import Optional

import attrs
import uuid_utils

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.platform.state.keyed_lock import KeyedLock
from src.service.cinema_booking.app.dto.promo_dto import InvalidPromo, PromoRedemption, ValidPromo
from src.service.cinema_booking.app.interface.i_persistence_store import IPersistenceStore
from src.service.cinema_booking.app.interface.i_promo_code_validator import IPromoCodeValidator
from src.service.cinema_booking.domain.booking_errors import (
    PromoCodeInvalidError,
    UsageExhaustedError,
)
from src.service.cinema_booking.domain.enum.promo_invalid_reason import PromoInvalidReason


class PromoCodeValidatorImpl(IPromoCodeValidator):
    def __init__(self, *, store: IPersistenceStore, locks: Optional[KeyedLock] = None) -> None:
        self.store = store
        self.locks = locks if locks is not None else KeyedLock(name='promo_code')

    @Logger.io
    async def validate(
        self, *, code: str, as_of: date, purchase_total: int
    ) -> ValidPromo | InvalidPromo:
        promo = await self.store.get_promo_code(code=code)
        if promo is None:
            return InvalidPromo(code=code, reason=PromoInvalidReason.NOT_FOUND)
        if not promo.is_active:
            return InvalidPromo(code=code, reason=PromoInvalidReason.INACTIVE)
        if not promo.is_within_date_range(as_of):
            return InvalidPromo(code=code, reason=PromoInvalidReason.OUT_OF_DATE_RANGE)
        if not promo.has_remaining_uses():
            return InvalidPromo(code=code, reason=PromoInvalidReason.USAGE_EXHAUSTED)
        if purchase_total < promo.min_purchase_amount:
            return InvalidPromo(code=code, reason=PromoInvalidReason.BELOW_MINIMUM_PURCHASE)
        return ValidPromo(promo=promo)

    @Logger.io
    async def redeem(self, *, code: str) -> PromoRedemption:
        async with self.locks.hold(code):
            promo = await self.store.get_promo_code(code=code)
            if promo is None:
                raise PromoCodeInvalidError(PromoInvalidReason.NOT_FOUND, code)
            if not promo.has_remaining_uses():
                metrics.record_promo_redemption(result='exhausted')
                raise UsageExhaustedError(code)
            await self.store.save(
                entity=attrs.evolve(promo, current_uses=promo.current_uses + 1)
            )

        metrics.record_promo_redemption(result='redeemed')
        return PromoRedemption(id=uuid_utils.uuid7(), code=code)

    @Logger.io
    async def rollback(self, *, redemption: PromoRedemption) -> None:
        async with self.locks.hold(redemption.code):
            if redemption.rolled_back:
                return
            promo = await self.store.get_promo_code(code=redemption.code)
            if promo is None:
                Logger.base.warning(
                    f'⚠️ [PROMO] Cannot roll back {redemption.code}: code no longer exists'
                )
                return
            await self.store.save(
                entity=attrs.evolve(promo, current_uses=max(0, promo.current_uses - 1))
            )
            redemption.rolled_back = True

        metrics.record_promo_redemption(result='rolled_back')
        Logger.base.info(f'↩️ [PROMO] Rolled back redemption {redemption.id} of {redemption.code}')
