from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from src.service.cinema_booking.domain.entity.promo_code_entity import PromoCode
from src.service.cinema_booking.domain.enum.discount_type import DiscountType


class PromoCodeValidateRequest(BaseModel):
    model_config = {'json_schema_extra': {'example': {'code': 'WELCOME10', 'purchase_total': 45000}}}

    code: str
    purchase_total: int = Field(ge=0)


class PromoCodeValidateResponse(BaseModel):
    code: str
    valid: bool
    discount: int
    reason: Optional[str] = None
    message: str


class PromoCodeCreateRequest(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'code': 'SUMMER25',
                'description': '25% off summer screenings',
                'discount_type': 'percentage',
                'amount': 25,
                'valid_from': '2026-06-01',
                'valid_until': '2026-08-31',
                'max_uses': 500,
            }
        }
    }

    code: str = Field(min_length=1)
    description: str = ''
    discount_type: DiscountType
    amount: int
    valid_from: date
    valid_until: date
    max_uses: Optional[int] = Field(default=None, ge=1)
    min_purchase_amount: int = Field(default=0, ge=0)
    is_active: bool = True

    def to_domain(self) -> PromoCode:
        return PromoCode(
            code=self.code,
            description=self.description,
            discount_type=self.discount_type,
            amount=self.amount,
            valid_from=self.valid_from,
            valid_until=self.valid_until,
            max_uses=self.max_uses,
            min_purchase_amount=self.min_purchase_amount,
            is_active=self.is_active,
        )


class PromoCodeUpdateRequest(BaseModel):
    """Only the fields sent are changed; send `max_uses: null` to lift the limit"""

    description: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    amount: Optional[int] = None
    valid_from: Optional[date] = None
    valid_until: Optional[date] = None
    max_uses: Optional[int] = Field(default=None, ge=1)
    min_purchase_amount: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class PromoCodeResponse(BaseModel):
    code: str
    description: str
    discount_type: str
    amount: int
    valid_from: date
    valid_until: date
    max_uses: Optional[int] = None
    current_uses: int
    min_purchase_amount: int
    is_active: bool

    @classmethod
    def from_entity(cls, promo: PromoCode) -> 'PromoCodeResponse':
        return cls(
            code=promo.code,
            description=promo.description,
            discount_type=promo.discount_type.value,
            amount=promo.amount,
            valid_from=promo.valid_from,
            valid_until=promo.valid_until,
            max_uses=promo.max_uses,
            current_uses=promo.current_uses,
            min_purchase_amount=promo.min_purchase_amount,
            is_active=promo.is_active,
        )
