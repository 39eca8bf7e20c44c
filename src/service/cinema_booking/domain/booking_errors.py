"""
Booking error taxonomy

Every error maps 1:1 onto an HTTP status through `CustomBaseError.status_code`.
`context` is merged into the JSON error body by the exception handler.
"""

from typing import Any, Iterable

from src.platform.exception.exceptions import ConflictError, CustomBaseError, DomainError
from src.service.cinema_booking.domain.enum.promo_invalid_reason import PromoInvalidReason


class SeatUnavailableError(ConflictError):
    """Recoverable: caller picks different seats"""

    def __init__(self, seat_ids: Iterable[str]) -> None:
        self.seat_ids = sorted(seat_ids)
        self.context: dict[str, Any] = {'seat_ids': self.seat_ids}
        super().__init__(f'Seats not available: {", ".join(self.seat_ids)}')


class HoldExpiredError(CustomBaseError):
    """Recoverable: caller must start a new hold"""

    def __init__(self, message: str = 'Seat hold has expired') -> None:
        super().__init__(message, 410)


class ConcessionUnavailableError(DomainError):
    def __init__(self, item_ids: Iterable[int]) -> None:
        self.item_ids = sorted(item_ids)
        self.context: dict[str, Any] = {'item_ids': self.item_ids}
        super().__init__(
            f'Concessions not available: {", ".join(map(str, self.item_ids))}', 422
        )


class PromoCodeInvalidError(DomainError):
    def __init__(self, reason: PromoInvalidReason, code: str | None = None) -> None:
        self.reason = reason
        self.code = code
        self.context: dict[str, Any] = {'reason': str(reason)}
        super().__init__(reason.message, 422)


class UsageExhaustedError(PromoCodeInvalidError):
    def __init__(self, code: str | None = None) -> None:
        super().__init__(PromoInvalidReason.USAGE_EXHAUSTED, code)


class PaymentFailedError(CustomBaseError):
    """Recoverable: seats stay held until the caller retries, cancels or the hold expires"""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        self.context: dict[str, Any] = {'reason': reason}
        super().__init__(f'Payment failed: {reason}', 402)


class PaymentGatewayUnavailableError(CustomBaseError):
    """The charge outcome is unknown; a retry resumes the same charge reference"""

    def __init__(self, reference: str) -> None:
        self.reference = reference
        self.context: dict[str, Any] = {'reference': reference}
        super().__init__(f'Payment gateway did not answer for {reference}, retry to resume', 503)


class PaymentAttemptsExhaustedError(DomainError):
    def __init__(self, max_attempts: int) -> None:
        super().__init__(f'Maximum of {max_attempts} payment attempts reached', 429)


class PaymentAmountMismatchError(CustomBaseError):
    """A defect, never retried"""

    def __init__(self, *, expected: int, actual: int) -> None:
        super().__init__(f'Payment amount {actual} does not match reservation total {expected}', 500)


class CodeGenerationExhaustedError(CustomBaseError):
    """Fatal for the reservation; money was taken, an operator must reconcile"""

    def __init__(self, attempts: int) -> None:
        super().__init__(f'Could not mint a unique ticket code after {attempts} attempts', 500)


class PersistenceError(CustomBaseError):
    def __init__(self, message: str = 'Persistence store unavailable') -> None:
        super().__init__(message, 503)
