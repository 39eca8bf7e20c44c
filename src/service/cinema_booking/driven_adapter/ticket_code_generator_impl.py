import secrets
from typing import Callable

from src.platform.config.core_setting import settings
from src.service.cinema_booking.app.interface.i_ticket_code_generator import ITicketCodeGenerator
from src.service.cinema_booking.domain.clock import Clock, utc_now


class TicketCodeGeneratorImpl(ITicketCodeGenerator):
    """
    `TICK-yyyymmdd-XXXXXXXXXXXX`: 48 bits from the injected entropy source,
    hex encoded. Tests pass a deterministic `entropy` to force collisions.
    """

    ENTROPY_BYTES = 6

    def __init__(
        self,
        *,
        entropy: Callable[[int], bytes] = secrets.token_bytes,
        clock: Clock = utc_now,
        prefix: str | None = None,
    ) -> None:
        self.entropy = entropy
        self.clock = clock
        self.prefix = prefix or settings.TICKET_CODE_PREFIX

    def generate(self) -> str:
        return f'{self.prefix}-{self.clock():%Y%m%d}-{self.entropy(self.ENTROPY_BYTES).hex().upper()}'
