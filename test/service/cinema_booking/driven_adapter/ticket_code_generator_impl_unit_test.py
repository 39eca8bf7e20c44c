import re

import pytest

from src.service.cinema_booking.driven_adapter.ticket_code_generator_impl import (
    TicketCodeGeneratorImpl,
)
from test.service.cinema_booking.fixtures import FakeClock


@pytest.mark.unit
class TestTicketCodeGenerator:
    def test_format(self, clock: FakeClock) -> None:
        generator = TicketCodeGeneratorImpl(clock=clock, entropy=lambda n: bytes(range(n)))

        assert generator.generate() == 'TICK-20260301-000102030405'

    def test_random_codes_differ(self, ticket_code_generator: TicketCodeGeneratorImpl) -> None:
        codes = {ticket_code_generator.generate() for _ in range(100)}

        assert len(codes) == 100
        assert all(re.fullmatch(r'TICK-\d{8}-[0-9A-F]{12}', code) for code in codes)
