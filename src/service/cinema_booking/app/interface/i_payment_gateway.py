from abc import ABC, abstractmethod

from src.service.cinema_booking.app.dto.payment_dto import GatewayFailure, GatewaySuccess
from src.service.cinema_booking.domain.enum.payment_method import PaymentMethod


class IPaymentGateway(ABC):
    """
    External, unreliable payment provider.

    `charge` must be idempotent on `reference`: a repeated call with a
    reference that already succeeded returns the original transaction.
    """

    @abstractmethod
    async def charge(
        self, *, amount: int, method: PaymentMethod, reference: str, card_token: str | None = None
    ) -> GatewaySuccess | GatewayFailure:
        pass

    @abstractmethod
    async def refund(self, *, transaction_ref: str, amount: int) -> None:
        pass
