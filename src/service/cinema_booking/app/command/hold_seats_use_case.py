"""
Hold Seats Use Case - price the order, validate the promo code, claim the seats
"""

from datetime import timedelta
from typing import Iterable, List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
import uuid_utils

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.dto.promo_dto import InvalidPromo
from src.service.cinema_booking.app.dto.reservation_dto import ConcessionOrder
from src.service.cinema_booking.app.interface.i_persistence_store import IPersistenceStore
from src.service.cinema_booking.app.interface.i_promo_code_validator import IPromoCodeValidator
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory
from src.service.cinema_booking.domain import pricing_engine
from src.service.cinema_booking.domain.booking_errors import (
    ConcessionUnavailableError,
    PersistenceError,
    PromoCodeInvalidError,
    UsageExhaustedError,
)
from src.service.cinema_booking.domain.clock import Clock, utc_now
from src.service.cinema_booking.domain.entity.promo_code_entity import PromoCode
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.enum.promo_invalid_reason import PromoInvalidReason
from src.service.cinema_booking.domain.value_object.concession_line import ConcessionLine
from src.service.cinema_booking.domain.value_object.customer import Customer


class HoldSeatsUseCase:
    """
    Flow:
    1. Resolve the screening, the requested seats and the concession prices
    2. Validate the promo code (optimistic; it is redeemed only after payment)
    3. Place the hold - an invalid code never touches inventory
    4. Create the reservation and move it to AWAITING_PAYMENT with its price
    5. Persist; on failure the hold is released and PersistenceError raised
    """

    def __init__(
        self,
        *,
        store: IPersistenceStore,
        seat_inventory: ISeatInventory,
        promo_code_validator: IPromoCodeValidator,
        clock: Clock = utc_now,
        hold_ttl: Optional[timedelta] = None,
        max_seats_per_hold: Optional[int] = None,
    ) -> None:
        self.store = store
        self.seat_inventory = seat_inventory
        self.promo_code_validator = promo_code_validator
        self.clock = clock
        self.hold_ttl = hold_ttl if hold_ttl is not None else timedelta(seconds=settings.HOLD_TTL_SECONDS)
        self.max_seats_per_hold = max_seats_per_hold or settings.MAX_SEATS_PER_HOLD
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        store: IPersistenceStore = Depends(Provide[Container.persistence_store]),
        seat_inventory: ISeatInventory = Depends(Provide[Container.seat_inventory]),
        promo_code_validator: IPromoCodeValidator = Depends(
            Provide[Container.promo_code_validator]
        ),
    ) -> Self:
        return cls(
            store=store, seat_inventory=seat_inventory, promo_code_validator=promo_code_validator
        )

    async def _resolve_promo(self, *, code: str, purchase_total: int) -> PromoCode:
        result = await self.promo_code_validator.validate(
            code=code, as_of=self.clock().date(), purchase_total=purchase_total
        )
        if isinstance(result, InvalidPromo):
            if result.reason == PromoInvalidReason.USAGE_EXHAUSTED:
                raise UsageExhaustedError(code)
            raise PromoCodeInvalidError(result.reason, code)
        return result.promo

    async def _price_concessions(self, orders: Iterable[ConcessionOrder]) -> List[ConcessionLine]:
        quantities: dict[int, int] = {}
        for order in orders:
            if order.quantity > 0:
                quantities[order.item_id] = quantities.get(order.item_id, 0) + order.quantity

        lines: List[ConcessionLine] = []
        unavailable: List[int] = []
        for item_id, quantity in quantities.items():
            item = await self.store.get_concession(item_id=item_id)
            if item is None or not item.is_available:
                unavailable.append(item_id)
                continue
            lines.append(
                ConcessionLine(
                    item_id=item.id, name=item.name, unit_price=item.price, quantity=quantity
                )
            )
        if unavailable:
            raise ConcessionUnavailableError(unavailable)
        return lines

    @Logger.io
    async def hold(
        self,
        *,
        screening_id: int,
        seat_ids: list[str],
        customer: Customer,
        concessions: Iterable[ConcessionOrder] = (),
        promo_code: Optional[str] = None,
    ) -> Reservation:
        with self.tracer.start_as_current_span(
            'use_case.hold_seats',
            attributes={'screening.id': screening_id, 'seat.count': len(seat_ids)},
        ):
            if len(seat_ids) > self.max_seats_per_hold:
                raise DomainError(f'Maximum {self.max_seats_per_hold} seats per reservation')

            screening = await self.store.get_screening(screening_id=screening_id)
            if screening is None:
                raise NotFoundError(f'Screening {screening_id} not found')

            seats_by_id = {
                seat.id: seat
                for seat in await self.store.load_seats_for_screening(screening_id=screening_id)
            }
            if unknown := [seat_id for seat_id in seat_ids if seat_id not in seats_by_id]:
                raise NotFoundError(f'Seats {unknown} do not belong to screening {screening_id}')
            seats = [seats_by_id[seat_id] for seat_id in seat_ids]
            lines = await self._price_concessions(concessions)

            promo = None
            if promo_code:
                undiscounted = pricing_engine.calculate(
                    seats=seats, screening=screening, concessions=lines
                )
                promo = await self._resolve_promo(
                    code=promo_code, purchase_total=undiscounted.subtotal
                )
            price = pricing_engine.calculate(
                seats=seats, screening=screening, concessions=lines, promo=promo
            )

            token = await self.seat_inventory.place_hold(
                screening_id=screening_id, seat_ids=seat_ids, ttl=self.hold_ttl
            )

            now = self.clock()
            reservation = Reservation.create(
                id=uuid_utils.uuid7(),
                customer=customer,
                hold=token,
                concessions=lines,
                promo_code=promo.code if promo else None,
                now=now,
            ).await_payment(price=price, now=now)

            try:
                await self.store.save(entity=reservation)
            except Exception as e:
                await self.seat_inventory.release(token=token)
                Logger.base.error(
                    f'❌ [HOLD] Could not persist reservation {reservation.id}, hold released: {e}'
                )
                if isinstance(e, PersistenceError):
                    raise
                raise PersistenceError(f'Could not persist reservation: {e}') from e

            Logger.base.info(
                f'🎯 [HOLD] Reservation {reservation.id} awaiting payment of {price.total} '
                f'until {token.expires_at.isoformat()}'
            )
            return reservation
