from typing import List

from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.dto.reservation_dto import BookingConfirmation
from src.service.cinema_booking.app.interface.i_notification_service import INotificationService


class MockNotificationServiceImpl(INotificationService):
    """Logs the confirmation and keeps it in an outbox instead of sending e-mail"""

    def __init__(self) -> None:
        self.outbox: List[BookingConfirmation] = []

    async def send_booking_confirmation(self, *, summary: BookingConfirmation) -> bool:
        self.outbox.append(summary)
        Logger.base.info(
            f'📧 [NOTIFY] Booking {summary.reservation_id} confirmed for {summary.recipient}: '
            f'{", ".join(summary.ticket_codes)}'
        )
        return True
