from enum import StrEnum


class PromoInvalidReason(StrEnum):
    NOT_FOUND = 'not_found'
    INACTIVE = 'inactive'
    OUT_OF_DATE_RANGE = 'out_of_date_range'
    USAGE_EXHAUSTED = 'usage_exhausted'
    BELOW_MINIMUM_PURCHASE = 'below_minimum_purchase'

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    PromoInvalidReason.NOT_FOUND: 'Invalid promo code',
    PromoInvalidReason.INACTIVE: 'This promo code is no longer active',
    PromoInvalidReason.OUT_OF_DATE_RANGE: 'This promo code is not valid today',
    PromoInvalidReason.USAGE_EXHAUSTED: 'This promo code has reached its usage limit',
    PromoInvalidReason.BELOW_MINIMUM_PURCHASE: 'Purchase total is below the minimum for this promo code',
}
