from datetime import datetime
from typing import Optional

import attrs
from uuid_utils import UUID
import uuid_utils

from src.service.cinema_booking.domain.enum.payment_method import PaymentMethod


@attrs.define
class Payment:
    id: UUID
    reservation_id: UUID
    amount: int
    method: PaymentMethod
    reference: str  # idempotency key sent to the gateway
    success: bool
    created_at: datetime
    transaction_ref: Optional[str] = None
    failure_reason: Optional[str] = None

    @classmethod
    def succeeded(
        cls,
        *,
        reservation_id: UUID,
        amount: int,
        method: PaymentMethod,
        reference: str,
        transaction_ref: Optional[str],
        now: datetime,
    ) -> 'Payment':
        return cls(
            id=uuid_utils.uuid7(),
            reservation_id=reservation_id,
            amount=amount,
            method=method,
            reference=reference,
            success=True,
            transaction_ref=transaction_ref,
            created_at=now,
        )

    @classmethod
    def failed(
        cls,
        *,
        reservation_id: UUID,
        amount: int,
        method: PaymentMethod,
        reference: str,
        failure_reason: str,
        now: datetime,
    ) -> 'Payment':
        return cls(
            id=uuid_utils.uuid7(),
            reservation_id=reservation_id,
            amount=amount,
            method=method,
            reference=reference,
            success=False,
            failure_reason=failure_reason,
            created_at=now,
        )
