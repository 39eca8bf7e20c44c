from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from src.platform.types import UtilsUUID7
from src.service.cinema_booking.app.dto.reservation_dto import ConcessionOrder, PaymentResult
from src.service.cinema_booking.domain.entity.payment_entity import Payment
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.entity.ticket_entity import Ticket
from src.service.cinema_booking.domain.enum.payment_method import PaymentMethod
from src.service.cinema_booking.domain.value_object.customer import (
    Customer,
    GuestCustomer,
    RegisteredCustomer,
)


class RegisteredCustomerSchema(BaseModel):
    type: Literal['registered'] = 'registered'
    user_id: int

    def to_domain(self) -> Customer:
        return RegisteredCustomer(user_id=self.user_id)


class GuestCustomerSchema(BaseModel):
    type: Literal['guest'] = 'guest'
    name: str
    email: str
    phone: str

    def to_domain(self) -> Customer:
        return GuestCustomer(name=self.name, email=self.email, phone=self.phone)


CustomerSchema = Annotated[
    Union[RegisteredCustomerSchema, GuestCustomerSchema], Field(discriminator='type')
]


class ConcessionOrderSchema(BaseModel):
    item_id: int
    quantity: int = Field(ge=0)

    def to_domain(self) -> ConcessionOrder:
        return ConcessionOrder(item_id=self.item_id, quantity=self.quantity)


class ConcessionLineSchema(BaseModel):
    item_id: int
    name: str
    unit_price: int
    quantity: int


class ReservationCreateRequest(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'screening_id': 1,
                'seat_ids': ['A1', 'A2'],
                'customer': {'type': 'registered', 'user_id': 42},
                'concessions': [{'item_id': 1, 'quantity': 2}],
                'promo_code': 'WELCOME10',
            }
        }
    }

    screening_id: int
    seat_ids: List[str] = Field(min_length=1)
    customer: CustomerSchema
    concessions: List[ConcessionOrderSchema] = []
    promo_code: Optional[str] = None


class PriceSchema(BaseModel):
    seats_subtotal: int
    concessions_subtotal: int
    discount: int
    total: int


class ReservationResponse(BaseModel):
    id: UtilsUUID7
    screening_id: int
    status: str
    seat_ids: List[str]
    concessions: List[ConcessionLineSchema]
    promo_code: Optional[str] = None
    price: Optional[PriceSchema] = None
    payment_attempts: int
    requires_operator_review: bool
    expires_at: datetime
    created_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, reservation: Reservation) -> 'ReservationResponse':
        price = reservation.price
        return cls(
            id=reservation.id,
            screening_id=reservation.screening_id,
            status=reservation.status.value,
            seat_ids=list(reservation.seat_ids),
            concessions=[
                ConcessionLineSchema(
                    item_id=line.item_id,
                    name=line.name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                )
                for line in reservation.concessions
            ],
            promo_code=reservation.promo_code,
            price=PriceSchema(
                seats_subtotal=price.seats_subtotal,
                concessions_subtotal=price.concessions_subtotal,
                discount=price.discount,
                total=price.total,
            )
            if price
            else None,
            payment_attempts=reservation.payment_attempts,
            requires_operator_review=reservation.requires_operator_review,
            expires_at=reservation.deadline,
            created_at=reservation.created_at,
            paid_at=reservation.paid_at,
        )


class PaymentRequest(BaseModel):
    model_config = {
        'json_schema_extra': {'example': {'method': 'credit_card', 'card_token': 'tok_visa'}}
    }

    method: PaymentMethod
    amount: Optional[int] = None
    card_token: Optional[str] = None


class PaymentSchema(BaseModel):
    id: UtilsUUID7
    amount: int
    method: str
    reference: str
    success: bool
    transaction_ref: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, payment: Payment) -> 'PaymentSchema':
        return cls(
            id=payment.id,
            amount=payment.amount,
            method=payment.method.value,
            reference=payment.reference,
            success=payment.success,
            transaction_ref=payment.transaction_ref,
            failure_reason=payment.failure_reason,
            created_at=payment.created_at,
        )


class TicketSchema(BaseModel):
    id: UtilsUUID7
    seat_id: str
    code: str
    issued_at: datetime
    is_used: bool

    @classmethod
    def from_entity(cls, ticket: Ticket) -> 'TicketSchema':
        return cls(
            id=ticket.id,
            seat_id=ticket.seat_id,
            code=ticket.code,
            issued_at=ticket.issued_at,
            is_used=ticket.is_used,
        )


class PaymentResponse(BaseModel):
    reservation: ReservationResponse
    payment: PaymentSchema
    tickets: List[TicketSchema]
    notified: Optional[bool] = None

    @classmethod
    def from_result(cls, result: PaymentResult) -> 'PaymentResponse':
        return cls(
            reservation=ReservationResponse.from_entity(result.reservation),
            payment=PaymentSchema.from_entity(result.payment),
            tickets=[TicketSchema.from_entity(ticket) for ticket in result.tickets],
            notified=result.notified,
        )
