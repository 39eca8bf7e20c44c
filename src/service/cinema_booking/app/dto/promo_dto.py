import attrs
from uuid_utils import UUID

from src.service.cinema_booking.domain.entity.promo_code_entity import PromoCode
from src.service.cinema_booking.domain.enum.promo_invalid_reason import PromoInvalidReason


@attrs.frozen
class ValidPromo:
    promo: PromoCode


@attrs.frozen
class InvalidPromo:
    code: str
    reason: PromoInvalidReason


@attrs.define
class PromoRedemption:
    """Receipt of one usage increment; handed back to `rollback` to undo it"""

    id: UUID
    code: str
    rolled_back: bool = False
