from datetime import date
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.cinema_booking.domain.enum.discount_type import DiscountType


@attrs.define
class PromoCode:
    code: str
    discount_type: DiscountType
    amount: int  # percent for PERCENTAGE, minor units for FIXED
    valid_from: date
    valid_until: date
    max_uses: Optional[int] = None  # None: unlimited
    current_uses: int = 0
    min_purchase_amount: int = 0
    is_active: bool = True
    description: str = ''

    def __attrs_post_init__(self) -> None:
        if not self.code.strip():
            raise DomainError('Promo code must not be blank')
        if self.discount_type == DiscountType.PERCENTAGE and not 1 <= self.amount <= 100:
            raise DomainError(f'Percentage promo {self.code} must be 1..100, got {self.amount}')
        if self.discount_type == DiscountType.FIXED and self.amount <= 0:
            raise DomainError(f'Fixed promo {self.code} must be positive, got {self.amount}')
        if self.valid_from > self.valid_until:
            raise DomainError(f'Promo {self.code} valid_from is after valid_until')
        if self.max_uses is not None and self.max_uses < 1:
            raise DomainError(f'Promo {self.code} max_uses must be at least 1, got {self.max_uses}')
        if self.current_uses < 0:
            raise DomainError(f'Promo {self.code} current_uses must be >= 0')
        if self.max_uses is not None and self.current_uses > self.max_uses:
            raise DomainError(
                f'Promo {self.code} already used {self.current_uses} times, '
                f'max_uses cannot be {self.max_uses}'
            )
        if self.min_purchase_amount < 0:
            raise DomainError(f'Promo {self.code} min_purchase_amount must be >= 0')

    def is_within_date_range(self, as_of: date) -> bool:
        return self.valid_from <= as_of <= self.valid_until

    def has_remaining_uses(self) -> bool:
        return self.max_uses is None or self.current_uses < self.max_uses

    def is_redeemable(self, as_of: date) -> bool:
        return self.is_active and self.is_within_date_range(as_of) and self.has_remaining_uses()
