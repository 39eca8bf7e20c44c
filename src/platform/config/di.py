"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.state.keyed_lock import KeyedLock
from src.service.cinema_booking.driven_adapter.notification.mock_notification_service_impl import (
    MockNotificationServiceImpl,
)
from src.service.cinema_booking.driven_adapter.payment.mock_payment_gateway_impl import (
    MockPaymentGatewayImpl,
)
from src.service.cinema_booking.driven_adapter.repo.in_memory_persistence_store import (
    InMemoryPersistenceStore,
)
from src.service.cinema_booking.driven_adapter.state.promo_code_validator_impl import (
    PromoCodeValidatorImpl,
)
from src.service.cinema_booking.driven_adapter.state.seat_inventory_impl import SeatInventoryImpl
from src.service.cinema_booking.driven_adapter.ticket_code_generator_impl import (
    TicketCodeGeneratorImpl,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Persistence boundary
    persistence_store = providers.Singleton(InMemoryPersistenceStore)

    # Shared mutable state (one instance per process)
    seat_inventory = providers.Singleton(SeatInventoryImpl, store=persistence_store)
    promo_code_locks = providers.Singleton(KeyedLock, name='promo_code')
    promo_code_validator = providers.Singleton(
        PromoCodeValidatorImpl, store=persistence_store, locks=promo_code_locks
    )
    reservation_locks = providers.Singleton(KeyedLock, name='reservation')

    # External collaborators
    payment_gateway = providers.Singleton(MockPaymentGatewayImpl)
    notification_service = providers.Singleton(MockNotificationServiceImpl)
    ticket_code_generator = providers.Singleton(TicketCodeGeneratorImpl)


container = Container()


def setup() -> None:
    container.config_service()
    container.persistence_store()


def cleanup() -> None:
    container.reset_singletons()
