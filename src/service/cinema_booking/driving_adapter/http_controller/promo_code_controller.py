from typing import List

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.command.manage_promo_code_use_case import (
    ManagePromoCodeUseCase,
)
from src.service.cinema_booking.app.query.list_promo_codes_use_case import ListPromoCodesUseCase
from src.service.cinema_booking.app.query.validate_promo_code_use_case import (
    ValidatePromoCodeUseCase,
)
from src.service.cinema_booking.driving_adapter.http_controller.schema.promo_code_schema import (
    PromoCodeCreateRequest,
    PromoCodeResponse,
    PromoCodeUpdateRequest,
    PromoCodeValidateRequest,
    PromoCodeValidateResponse,
)


router = APIRouter()


@router.post('/validate')
@Logger.io
async def validate_promo_code(
    request: PromoCodeValidateRequest,
    use_case: ValidatePromoCodeUseCase = Depends(ValidatePromoCodeUseCase.depends),
) -> PromoCodeValidateResponse:
    """Preview only: the code is not consumed"""
    preview = await use_case.preview(code=request.code, purchase_total=request.purchase_total)
    return PromoCodeValidateResponse(
        code=preview.code,
        valid=preview.valid,
        discount=preview.discount,
        reason=preview.reason.value if preview.reason else None,
        message=preview.message,
    )


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_promo_code(
    request: PromoCodeCreateRequest,
    use_case: ManagePromoCodeUseCase = Depends(ManagePromoCodeUseCase.depends),
) -> PromoCodeResponse:
    promo = await use_case.create(promo=request.to_domain())
    return PromoCodeResponse.from_entity(promo)


@router.get('')
@Logger.io
async def list_promo_codes(
    active_only: bool = False,
    use_case: ListPromoCodesUseCase = Depends(ListPromoCodesUseCase.depends),
) -> List[PromoCodeResponse]:
    promos = await use_case.list_promo_codes(active_only=active_only)
    return [PromoCodeResponse.from_entity(promo) for promo in promos]


@router.get('/{code}')
@Logger.io
async def get_promo_code(
    code: str,
    use_case: ListPromoCodesUseCase = Depends(ListPromoCodesUseCase.depends),
) -> PromoCodeResponse:
    return PromoCodeResponse.from_entity(await use_case.get_promo_code(code=code))


@router.patch('/{code}')
@Logger.io
async def update_promo_code(
    code: str,
    request: PromoCodeUpdateRequest,
    use_case: ManagePromoCodeUseCase = Depends(ManagePromoCodeUseCase.depends),
) -> PromoCodeResponse:
    promo = await use_case.update(code=code, changes=request.model_dump(exclude_unset=True))
    return PromoCodeResponse.from_entity(promo)


@router.patch('/{code}/deactivate')
@Logger.io
async def deactivate_promo_code(
    code: str,
    use_case: ManagePromoCodeUseCase = Depends(ManagePromoCodeUseCase.depends),
) -> PromoCodeResponse:
    return PromoCodeResponse.from_entity(await use_case.deactivate(code=code))
