"""Cinema Booking Application Interfaces"""

from src.service.cinema_booking.app.interface.i_notification_service import INotificationService
from src.service.cinema_booking.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema_booking.app.interface.i_persistence_store import IPersistenceStore
from src.service.cinema_booking.app.interface.i_promo_code_validator import IPromoCodeValidator
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory
from src.service.cinema_booking.app.interface.i_ticket_code_generator import ITicketCodeGenerator

__all__ = [
    'INotificationService',
    'IPaymentGateway',
    'IPersistenceStore',
    'IPromoCodeValidator',
    'ISeatInventory',
    'ITicketCodeGenerator',
]
