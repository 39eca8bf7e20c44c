from typing import List

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.cinema_booking.app.command.cancel_reservation_use_case import (
    CancelReservationUseCase,
)
from src.service.cinema_booking.app.command.hold_seats_use_case import HoldSeatsUseCase
from src.service.cinema_booking.app.command.pay_reservation_use_case import PayReservationUseCase
from src.service.cinema_booking.app.query.get_reservation_use_case import GetReservationUseCase
from src.service.cinema_booking.driving_adapter.http_controller.schema.reservation_schema import (
    PaymentRequest,
    PaymentResponse,
    PaymentSchema,
    ReservationCreateRequest,
    ReservationResponse,
    TicketSchema,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_reservation(
    request: ReservationCreateRequest,
    use_case: HoldSeatsUseCase = Depends(HoldSeatsUseCase.depends),
) -> ReservationResponse:
    with tracer.start_as_current_span('controller.create_reservation') as span:
        span.set_attribute('screening.id', request.screening_id)
        reservation = await use_case.hold(
            screening_id=request.screening_id,
            seat_ids=request.seat_ids,
            customer=request.customer.to_domain(),
            concessions=[line.to_domain() for line in request.concessions],
            promo_code=request.promo_code,
        )
        span.set_attribute('reservation.id', str(reservation.id))
        return ReservationResponse.from_entity(reservation)


@router.get('/{reservation_id}')
@Logger.io
async def get_reservation(
    reservation_id: UtilsUUID7,
    use_case: GetReservationUseCase = Depends(GetReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.get_reservation(reservation_id=reservation_id)
    return ReservationResponse.from_entity(reservation)


@router.post('/{reservation_id}/pay')
@Logger.io
async def pay_reservation(
    reservation_id: UtilsUUID7,
    request: PaymentRequest,
    use_case: PayReservationUseCase = Depends(PayReservationUseCase.depends),
) -> PaymentResponse:
    result = await use_case.pay(
        reservation_id=reservation_id,
        method=request.method,
        amount=request.amount,
        card_token=request.card_token,
    )
    return PaymentResponse.from_result(result)


@router.patch('/{reservation_id}/cancel')
@Logger.io
async def cancel_reservation(
    reservation_id: UtilsUUID7,
    use_case: CancelReservationUseCase = Depends(CancelReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.cancel(reservation_id=reservation_id)
    return ReservationResponse.from_entity(reservation)


@router.get('/{reservation_id}/tickets')
@Logger.io
async def list_reservation_tickets(
    reservation_id: UtilsUUID7,
    use_case: GetReservationUseCase = Depends(GetReservationUseCase.depends),
) -> List[TicketSchema]:
    tickets = await use_case.list_tickets(reservation_id=reservation_id)
    return [TicketSchema.from_entity(ticket) for ticket in tickets]


@router.get('/{reservation_id}/payments')
@Logger.io
async def list_reservation_payments(
    reservation_id: UtilsUUID7,
    use_case: GetReservationUseCase = Depends(GetReservationUseCase.depends),
) -> List[PaymentSchema]:
    payments = await use_case.list_payments(reservation_id=reservation_id)
    return [PaymentSchema.from_entity(payment) for payment in payments]
