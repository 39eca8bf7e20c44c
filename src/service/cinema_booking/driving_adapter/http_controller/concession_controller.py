from typing import List

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.query.list_concessions_use_case import ListConcessionsUseCase
from src.service.cinema_booking.driving_adapter.http_controller.schema.concession_schema import (
    ConcessionResponse,
)


router = APIRouter()


@router.get('')
@Logger.io
async def list_concessions(
    include_unavailable: bool = False,
    use_case: ListConcessionsUseCase = Depends(ListConcessionsUseCase.depends),
) -> List[ConcessionResponse]:
    items = await use_case.list_concessions(available_only=not include_unavailable)
    return [ConcessionResponse.from_entity(item) for item in items]
