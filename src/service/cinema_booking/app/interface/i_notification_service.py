from abc import ABC, abstractmethod

from src.service.cinema_booking.app.dto.reservation_dto import BookingConfirmation


class INotificationService(ABC):
    @abstractmethod
    async def send_booking_confirmation(self, *, summary: BookingConfirmation) -> bool:
        """Best effort; False or an exception never rolls back the reservation."""
        pass
