from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.query.get_seat_map_use_case import GetSeatMapUseCase
from src.service.cinema_booking.driving_adapter.http_controller.schema.screening_schema import (
    SeatMapResponse,
    SeatSchema,
)


router = APIRouter()


@router.get('/{screening_id}/seats')
@Logger.io
async def get_seat_map(
    screening_id: int,
    use_case: GetSeatMapUseCase = Depends(GetSeatMapUseCase.depends),
) -> SeatMapResponse:
    screening, seats = await use_case.get_seat_map(screening_id=screening_id)
    return SeatMapResponse(
        screening_id=screening.id,
        movie_title=screening.movie_title,
        cinema_name=screening.cinema_name,
        starts_at=screening.starts_at,
        standard_seat_price=screening.standard_seat_price,
        deluxe_seat_price=screening.deluxe_seat_price,
        seats=[
            SeatSchema(
                id=seat.id,
                row=seat.row,
                number=seat.number,
                seat_type=seat.seat_type.value,
                state=seat.state.value,
            )
            for seat in seats
        ],
    )
