from abc import ABC, abstractmethod
from datetime import date

from src.service.cinema_booking.app.dto.promo_dto import (
    InvalidPromo,
    PromoRedemption,
    ValidPromo,
)


class IPromoCodeValidator(ABC):
    @abstractmethod
    async def validate(
        self, *, code: str, as_of: date, purchase_total: int
    ) -> ValidPromo | InvalidPromo:
        """
        Check a code without consuming it.

        Checks run in order: not_found, inactive, out_of_date_range,
        usage_exhausted, below_minimum_purchase. The first failing check is
        the reason reported.
        """
        pass

    @abstractmethod
    async def redeem(self, *, code: str) -> PromoRedemption:
        """
        Atomic check-and-increment of the usage counter.

        Raises:
            UsageExhaustedError: current_uses already reached max_uses
            PromoCodeInvalidError: unknown code
        """
        pass

    @abstractmethod
    async def rollback(self, *, redemption: PromoRedemption) -> None:
        """Undo one redemption. Runs at most once per redemption; later calls are no-ops."""
        pass
