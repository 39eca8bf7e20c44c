from datetime import date
from typing import Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.dto.promo_dto import InvalidPromo
from src.service.cinema_booking.app.interface.i_promo_code_validator import IPromoCodeValidator
from src.service.cinema_booking.domain import pricing_engine
from src.service.cinema_booking.domain.clock import Clock, utc_now
from src.service.cinema_booking.domain.enum.promo_invalid_reason import PromoInvalidReason


@attrs.frozen
class PromoPreview:
    code: str
    valid: bool
    discount: int = 0
    reason: Optional[PromoInvalidReason] = None
    message: str = ''


class ValidatePromoCodeUseCase:
    """Preview a code against a purchase total without consuming it"""

    def __init__(self, *, promo_code_validator: IPromoCodeValidator, clock: Clock = utc_now):
        self.promo_code_validator = promo_code_validator
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        promo_code_validator: IPromoCodeValidator = Depends(
            Provide[Container.promo_code_validator]
        ),
    ) -> Self:
        return cls(promo_code_validator=promo_code_validator)

    @Logger.io
    async def preview(
        self, *, code: str, purchase_total: int, as_of: Optional[date] = None
    ) -> PromoPreview:
        result = await self.promo_code_validator.validate(
            code=code, as_of=as_of or self.clock().date(), purchase_total=purchase_total
        )
        if isinstance(result, InvalidPromo):
            return PromoPreview(
                code=code, valid=False, reason=result.reason, message=result.reason.message
            )
        return PromoPreview(
            code=code,
            valid=True,
            discount=pricing_engine.apply_discount(purchase_total, result.promo),
            message=result.promo.description,
        )
