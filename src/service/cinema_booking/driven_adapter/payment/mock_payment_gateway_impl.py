"""
Mock Payment Gateway

Stand-in for the external provider. Charges succeed unless the card token is
on the decline list; a reference that already succeeded returns the original
transaction, so retried submissions never charge twice.
"""

import secrets
from typing import Callable, Dict, FrozenSet

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.dto.payment_dto import GatewayFailure, GatewaySuccess
from src.service.cinema_booking.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema_booking.domain.clock import Clock, utc_now
from src.service.cinema_booking.domain.enum.payment_method import PaymentMethod


DEFAULT_DECLINED_CARD_TOKENS = frozenset({'tok_declined', 'tok_insufficient_funds'})


class MockPaymentGatewayImpl(IPaymentGateway):
    def __init__(
        self,
        *,
        declined_card_tokens: FrozenSet[str] = DEFAULT_DECLINED_CARD_TOKENS,
        clock: Clock = utc_now,
        digits: Callable[[], int] = lambda: secrets.randbelow(1_000_000),
    ) -> None:
        self.declined_card_tokens = declined_card_tokens
        self.clock = clock
        self.digits = digits
        self.charges: Dict[str, GatewaySuccess] = {}
        self.charged_amounts: Dict[str, int] = {}
        self.refunds: Dict[str, int] = {}

    def _new_transaction_ref(self) -> str:
        return f'{settings.PAYMENT_REFERENCE_PREFIX}-{self.clock():%Y%m%d}-{self.digits():06d}'

    @Logger.io
    async def charge(
        self, *, amount: int, method: PaymentMethod, reference: str, card_token: str | None = None
    ) -> GatewaySuccess | GatewayFailure:
        if (previous := self.charges.get(reference)) is not None:
            Logger.base.info(f'🔁 [GATEWAY] Duplicate charge for {reference}, returning original')
            return previous

        if card_token in self.declined_card_tokens:
            return GatewayFailure(reason='Card declined')
        if amount <= 0:
            return GatewayFailure(reason='Amount must be positive')

        success = GatewaySuccess(transaction_ref=self._new_transaction_ref())
        self.charges[reference] = success
        self.charged_amounts[success.transaction_ref] = amount
        Logger.base.info(
            f'💳 [GATEWAY] Charged {amount} via {method} ({success.transaction_ref})'
        )
        return success

    @Logger.io
    async def refund(self, *, transaction_ref: str, amount: int) -> None:
        self.refunds[transaction_ref] = self.refunds.get(transaction_ref, 0) + amount
        Logger.base.info(f'💸 [GATEWAY] Refunded {amount} on {transaction_ref}')
