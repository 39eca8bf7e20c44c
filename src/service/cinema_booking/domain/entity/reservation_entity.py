from datetime import datetime
from typing import List, Optional

import attrs
from uuid_utils import UUID

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.domain.enum.reservation_status import ReservationStatus
from src.service.cinema_booking.domain.value_object.concession_line import ConcessionLine
from src.service.cinema_booking.domain.value_object.customer import Customer
from src.service.cinema_booking.domain.value_object.hold_token import HoldToken
from src.service.cinema_booking.domain.value_object.price_breakdown import PriceBreakdown


OPEN_STATUSES = frozenset({ReservationStatus.HOLDING, ReservationStatus.AWAITING_PAYMENT})


@attrs.define
class Reservation:
    """
    Reservation aggregate

    HOLDING → AWAITING_PAYMENT → PAID → TICKETED, with EXPIRED and CANCELLED
    as terminal failure states. Every transition returns an evolved copy;
    an illegal transition raises DomainError and leaves the original untouched.
    """

    id: UUID
    screening_id: int
    customer: Customer
    hold: HoldToken
    concessions: List[ConcessionLine] = attrs.field(factory=list)
    promo_code: Optional[str] = None
    price: Optional[PriceBreakdown] = None
    status: ReservationStatus = ReservationStatus.HOLDING
    payment_attempts: int = 0
    # Charge sent to the gateway with no definite answer yet; reused on retry
    open_payment_reference: Optional[str] = None
    requires_operator_review: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        id: UUID,
        customer: Customer,
        hold: HoldToken,
        concessions: List[ConcessionLine],
        promo_code: Optional[str],
        now: datetime,
    ) -> 'Reservation':
        return cls(
            id=id,
            screening_id=hold.screening_id,
            customer=customer,
            hold=hold,
            # Lines ordered with quantity 0 are not part of the order
            concessions=[line for line in concessions if line.quantity > 0],
            promo_code=promo_code,
            status=ReservationStatus.HOLDING,
            created_at=now,
            updated_at=now,
        )

    @property
    def seat_ids(self) -> tuple[str, ...]:
        return self.hold.seat_ids

    @property
    def deadline(self) -> datetime:
        return self.hold.expires_at

    @property
    def total(self) -> int:
        return self.price.total if self.price else 0

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_STATUSES

    def is_past_deadline(self, now: datetime) -> bool:
        return self.hold.is_expired(now)

    def _require(self, *allowed: ReservationStatus, action: str) -> None:
        if self.status not in allowed:
            raise DomainError(f'Cannot {action} a reservation that is {self.status}')

    @Logger.io
    def await_payment(self, *, price: PriceBreakdown, now: datetime) -> 'Reservation':
        self._require(ReservationStatus.HOLDING, action='price')
        return attrs.evolve(
            self, price=price, status=ReservationStatus.AWAITING_PAYMENT, updated_at=now
        )

    def record_payment_attempt(self, *, reference: str, now: datetime) -> 'Reservation':
        self._require(ReservationStatus.AWAITING_PAYMENT, action='pay for')
        if self.open_payment_reference is not None:
            raise DomainError(
                f'Charge {self.open_payment_reference} is still open for reservation {self.id}'
            )
        return attrs.evolve(
            self,
            payment_attempts=self.payment_attempts + 1,
            open_payment_reference=reference,
            updated_at=now,
        )

    def close_payment_attempt(self, *, now: datetime) -> 'Reservation':
        """The gateway gave a definite answer; the next attempt gets a fresh reference"""
        return attrs.evolve(self, open_payment_reference=None, updated_at=now)

    @Logger.io
    def reprice(
        self, *, price: PriceBreakdown, promo_code: Optional[str], now: datetime
    ) -> 'Reservation':
        self._require(ReservationStatus.AWAITING_PAYMENT, action='reprice')
        return attrs.evolve(
            self,
            price=price,
            promo_code=promo_code,
            open_payment_reference=None,
            updated_at=now,
        )

    @Logger.io
    def mark_as_paid(self, *, now: datetime) -> 'Reservation':
        self._require(ReservationStatus.AWAITING_PAYMENT, action='mark as paid')
        return attrs.evolve(
            self,
            status=ReservationStatus.PAID,
            open_payment_reference=None,
            paid_at=now,
            updated_at=now,
        )

    @Logger.io
    def mark_as_ticketed(self, *, now: datetime) -> 'Reservation':
        self._require(ReservationStatus.PAID, action='ticket')
        return attrs.evolve(self, status=ReservationStatus.TICKETED, updated_at=now)

    @Logger.io
    def flag_for_operator_review(self, *, now: datetime) -> 'Reservation':
        self._require(ReservationStatus.PAID, action='flag')
        return attrs.evolve(self, requires_operator_review=True, updated_at=now)

    @Logger.io
    def expire(self, *, now: datetime) -> 'Reservation':
        self._require(*OPEN_STATUSES, action='expire')
        return attrs.evolve(self, status=ReservationStatus.EXPIRED, updated_at=now)

    @Logger.io
    def cancel(self, *, now: datetime) -> 'Reservation':
        self._require(*OPEN_STATUSES, action='cancel')
        return attrs.evolve(self, status=ReservationStatus.CANCELLED, updated_at=now)
