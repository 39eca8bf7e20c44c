"""
Seat Inventory Interface

Single source of truth for seat state per screening.
"""

from abc import ABC, abstractmethod
from datetime import timedelta

from src.service.cinema_booking.domain.enum.seat_state import SeatState
from src.service.cinema_booking.domain.value_object.hold_token import HoldToken


class ISeatInventory(ABC):
    """
    Every mutator runs as one atomic step over the whole seat set it touches:
    either all requested seats change state or none do. Holds past their
    deadline are released by the next operation that inspects them, and an
    expired hold never becomes valid again.
    """

    @abstractmethod
    async def place_hold(
        self, *, screening_id: int, seat_ids: list[str], ttl: timedelta
    ) -> HoldToken:
        """
        Move every requested seat AVAILABLE → HELD.

        Raises:
            SeatUnavailableError: with the conflicting seat ids; nothing changed
            NotFoundError: a seat id is not part of the screening
            DomainError: empty or duplicated seat list
        """
        pass

    @abstractmethod
    async def release(self, *, token: HoldToken) -> None:
        """HELD → AVAILABLE for the token's seats. No-op if already released, expired or confirmed."""
        pass

    @abstractmethod
    async def confirm(self, *, token: HoldToken) -> list[str]:
        """
        HELD → BOOKED for the token's seats.

        Returns:
            The booked seat ids

        Raises:
            HoldExpiredError: token expired or was already released/confirmed
        """
        pass

    @abstractmethod
    async def sweep_expired(self) -> list[HoldToken]:
        """Release every hold past its deadline; returns the released tokens."""
        pass

    @abstractmethod
    async def seat_states(self, *, screening_id: int) -> dict[str, SeatState]:
        pass
