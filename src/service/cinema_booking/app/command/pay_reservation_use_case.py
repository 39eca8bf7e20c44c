"""
Pay Reservation Use Case - charge, redeem, confirm, ticket, notify
"""

from typing import Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID
import uuid_utils

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.platform.state.keyed_lock import KeyedLock
from src.service.cinema_booking.app.command.issue_tickets_use_case import IssueTicketsUseCase
from src.service.cinema_booking.app.dto.payment_dto import GatewayFailure
from src.service.cinema_booking.app.dto.promo_dto import PromoRedemption
from src.service.cinema_booking.app.dto.reservation_dto import BookingConfirmation, PaymentResult
from src.service.cinema_booking.app.interface.i_notification_service import INotificationService
from src.service.cinema_booking.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema_booking.app.interface.i_persistence_store import IPersistenceStore
from src.service.cinema_booking.app.interface.i_promo_code_validator import IPromoCodeValidator
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory
from src.service.cinema_booking.app.interface.i_ticket_code_generator import ITicketCodeGenerator
from src.service.cinema_booking.domain import pricing_engine
from src.service.cinema_booking.domain.booking_errors import (
    CodeGenerationExhaustedError,
    HoldExpiredError,
    PaymentAmountMismatchError,
    PaymentAttemptsExhaustedError,
    PaymentFailedError,
    PaymentGatewayUnavailableError,
    UsageExhaustedError,
)
from src.service.cinema_booking.domain.clock import Clock, utc_now
from src.service.cinema_booking.domain.entity.payment_entity import Payment
from src.service.cinema_booking.domain.entity.refund_instruction_entity import RefundInstruction
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.entity.ticket_entity import Ticket
from src.service.cinema_booking.domain.enum.payment_method import PaymentMethod
from src.service.cinema_booking.domain.enum.reservation_status import ReservationStatus
from src.service.cinema_booking.domain.value_object.customer import GuestCustomer


class PayReservationUseCase:
    """
    Drives an AWAITING_PAYMENT reservation to TICKETED.

    Payments for one reservation are serialized by a per-reservation lock.
    The gateway is called outside any inventory lock; the charge reference
    is derived from the reservation id and attempt number, so a resubmitted
    attempt is idempotent at the gateway. A reference only moves on after a
    definite answer: if the gateway raises, the next call resumes the same
    reference instead of charging again. A zero total never reaches the gateway.

    Compensation:
    - charge declined: attempt counted, seats stay held, PaymentFailedError
    - no answer from the gateway: reference kept open, PaymentGatewayUnavailableError
    - promo exhausted after charge: refund, drop the promo, reprice, UsageExhaustedError
    - hold expired after charge: refund, roll back the redemption, EXPIRED, HoldExpiredError
    - no unique ticket code: stays PAID, flagged for an operator, refund instruction saved
    """

    def __init__(
        self,
        *,
        store: IPersistenceStore,
        seat_inventory: ISeatInventory,
        promo_code_validator: IPromoCodeValidator,
        payment_gateway: IPaymentGateway,
        notification_service: INotificationService,
        issue_tickets_use_case: IssueTicketsUseCase,
        reservation_locks: KeyedLock,
        clock: Clock = utc_now,
        max_payment_attempts: Optional[int] = None,
    ) -> None:
        self.store = store
        self.seat_inventory = seat_inventory
        self.promo_code_validator = promo_code_validator
        self.payment_gateway = payment_gateway
        self.notification_service = notification_service
        self.issue_tickets_use_case = issue_tickets_use_case
        self.reservation_locks = reservation_locks
        self.clock = clock
        self.max_payment_attempts = max_payment_attempts or settings.MAX_PAYMENT_ATTEMPTS
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
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        notification_service: INotificationService = Depends(
            Provide[Container.notification_service]
        ),
        ticket_code_generator: ITicketCodeGenerator = Depends(
            Provide[Container.ticket_code_generator]
        ),
        reservation_locks: KeyedLock = Depends(Provide[Container.reservation_locks]),
    ) -> Self:
        return cls(
            store=store,
            seat_inventory=seat_inventory,
            promo_code_validator=promo_code_validator,
            payment_gateway=payment_gateway,
            notification_service=notification_service,
            issue_tickets_use_case=IssueTicketsUseCase(
                store=store, ticket_code_generator=ticket_code_generator
            ),
            reservation_locks=reservation_locks,
        )

    def payment_reference(self, reservation_id: UUID, attempt: int) -> str:
        return f'{settings.PAYMENT_REFERENCE_PREFIX}-{reservation_id}-{attempt}'

    @Logger.io
    async def pay(
        self,
        *,
        reservation_id: UUID,
        method: PaymentMethod,
        amount: Optional[int] = None,
        card_token: Optional[str] = None,
    ) -> PaymentResult:
        with self.tracer.start_as_current_span(
            'use_case.pay_reservation',
            attributes={'reservation.id': str(reservation_id), 'payment.method': str(method)},
        ):
            async with self.reservation_locks.hold(reservation_id):
                return await self._pay(
                    reservation_id=reservation_id,
                    method=method,
                    amount=amount,
                    card_token=card_token,
                )

    async def _pay(
        self,
        *,
        reservation_id: UUID,
        method: PaymentMethod,
        amount: Optional[int],
        card_token: Optional[str],
    ) -> PaymentResult:
        reservation = await self.store.get_reservation(reservation_id=reservation_id)
        if reservation is None:
            raise NotFoundError(f'Reservation {reservation_id} not found')

        if reservation.status == ReservationStatus.EXPIRED:
            raise HoldExpiredError(f'Reservation {reservation_id} has expired')
        if reservation.status != ReservationStatus.AWAITING_PAYMENT:
            raise DomainError(f'Reservation {reservation_id} is {reservation.status}')

        now = self.clock()
        if reservation.is_past_deadline(now):
            await self.seat_inventory.release(token=reservation.hold)
            await self.store.save(entity=reservation.expire(now=now))
            raise HoldExpiredError(f'Reservation {reservation_id} has expired')

        total = reservation.total
        if amount is not None and amount != total:
            raise PaymentAmountMismatchError(expected=total, actual=amount)

        if reservation.open_payment_reference is not None:
            reference = reservation.open_payment_reference
            Logger.base.info(f'🔁 [PAY] Resuming open charge {reference} for {reservation.id}')
        else:
            if reservation.payment_attempts >= self.max_payment_attempts:
                raise PaymentAttemptsExhaustedError(self.max_payment_attempts)
            reference = self.payment_reference(reservation.id, reservation.payment_attempts + 1)
            reservation = reservation.record_payment_attempt(reference=reference, now=now)
            await self.store.save(entity=reservation)

        if total == 0:
            # Fully discounted: nothing to collect
            payment = Payment.succeeded(
                reservation_id=reservation.id,
                amount=0,
                method=method,
                reference=reference,
                transaction_ref=None,
                now=self.clock(),
            )
        else:
            payment = await self._charge(
                reservation=reservation,
                total=total,
                method=method,
                reference=reference,
                card_token=card_token,
            )
        metrics.record_payment(method=str(method), result='success')

        redemption = await self._redeem_promo(reservation=reservation, payment=payment)
        await self._confirm_hold(reservation=reservation, payment=payment, redemption=redemption)

        paid = reservation.mark_as_paid(now=self.clock())
        try:
            await self.store.save(entity=paid)
        except Exception as e:
            Logger.base.critical(
                f'🚨 [PAY] Reservation {paid.id} charged ({payment.transaction_ref}) '
                f'and seats booked, but PAID could not be persisted: {e}'
            )
            raise

        ticketed, tickets = await self._issue_tickets(reservation=paid, payment=payment)
        notified = await self._notify(reservation=ticketed, tickets=tickets)
        return PaymentResult(
            reservation=ticketed, payment=payment, tickets=tickets, notified=notified
        )

    async def _charge(
        self,
        *,
        reservation: Reservation,
        total: int,
        method: PaymentMethod,
        reference: str,
        card_token: Optional[str],
    ) -> Payment:
        """
        Raises:
            PaymentFailedError: the gateway declined; the next attempt gets a new reference
            PaymentGatewayUnavailableError: no definite answer; the reference stays open
        """
        try:
            outcome = await self.payment_gateway.charge(
                amount=total, method=method, reference=reference, card_token=card_token
            )
        except Exception as e:
            metrics.record_payment(method=str(method), result='unknown')
            Logger.base.warning(
                f'⚠️ [PAY] No answer from the gateway for {reference}, '
                f'keeping it open for the next attempt: {e!r}'
            )
            raise PaymentGatewayUnavailableError(reference) from e

        if isinstance(outcome, GatewayFailure):
            metrics.record_payment(method=str(method), result='failure')
            now = self.clock()
            async with self.store.transaction():
                await self.store.save(
                    entity=Payment.failed(
                        reservation_id=reservation.id,
                        amount=total,
                        method=method,
                        reference=reference,
                        failure_reason=outcome.reason,
                        now=now,
                    )
                )
                await self.store.save(entity=reservation.close_payment_attempt(now=now))
            raise PaymentFailedError(outcome.reason)

        return Payment.succeeded(
            reservation_id=reservation.id,
            amount=total,
            method=method,
            reference=reference,
            transaction_ref=outcome.transaction_ref,
            now=self.clock(),
        )

    async def _refund(self, *, payment: Payment, reason: str) -> Payment:
        if payment.transaction_ref is not None:
            await self.payment_gateway.refund(
                transaction_ref=payment.transaction_ref, amount=payment.amount
            )
            metrics.record_payment(method=str(payment.method), result='refunded')
        refunded = attrs.evolve(payment, success=False, failure_reason=f'Refunded: {reason}')
        await self.store.save(entity=refunded)
        return refunded

    async def _redeem_promo(
        self, *, reservation: Reservation, payment: Payment
    ) -> Optional[PromoRedemption]:
        if not reservation.promo_code:
            return None
        try:
            return await self.promo_code_validator.redeem(code=reservation.promo_code)
        except UsageExhaustedError:
            # Code ran out between hold and payment: customer pays full price on retry
            await self._refund(payment=payment, reason='promo code usage exhausted')
            screening = await self.store.get_screening(screening_id=reservation.screening_id)
            seats = await self.store.load_seats_for_screening(
                screening_id=reservation.screening_id
            )
            if screening is None:
                raise NotFoundError(f'Screening {reservation.screening_id} not found')
            price = pricing_engine.calculate(
                seats=[seat for seat in seats if seat.id in reservation.seat_ids],
                screening=screening,
                concessions=reservation.concessions,
            )
            await self.store.save(
                entity=reservation.reprice(price=price, promo_code=None, now=self.clock())
            )
            Logger.base.warning(
                f'⚠️ [PAY] Promo {reservation.promo_code} exhausted for {reservation.id}, '
                f'repriced to {price.total}'
            )
            raise

    async def _confirm_hold(
        self,
        *,
        reservation: Reservation,
        payment: Payment,
        redemption: Optional[PromoRedemption],
    ) -> None:
        try:
            await self.seat_inventory.confirm(token=reservation.hold)
        except HoldExpiredError:
            await self._refund(payment=payment, reason='seat hold expired')
            if redemption is not None:
                await self.promo_code_validator.rollback(redemption=redemption)
            await self.seat_inventory.release(token=reservation.hold)
            await self.store.save(entity=reservation.expire(now=self.clock()))
            Logger.base.warning(
                f'⚠️ [PAY] Hold of {reservation.id} expired during payment, charge refunded'
            )
            raise

    async def _issue_tickets(
        self, *, reservation: Reservation, payment: Payment
    ) -> tuple[Reservation, list[Ticket]]:
        try:
            return await self.issue_tickets_use_case.issue(reservation=reservation, payment=payment)
        except CodeGenerationExhaustedError:
            now = self.clock()
            booked = await self.issue_tickets_use_case.booked_seats(reservation=reservation)
            async with self.store.transaction():
                await self.store.save(entity=payment)
                for seat in booked:
                    await self.store.save(entity=seat)
                await self.store.save(entity=reservation.flag_for_operator_review(now=now))
                if payment.amount > 0:
                    await self.store.save(
                        entity=RefundInstruction(
                            id=uuid_utils.uuid7(),
                            reservation_id=reservation.id,
                            amount=payment.amount,
                            transaction_ref=payment.transaction_ref or '',
                            reason='Ticket code generation exhausted',
                            created_at=now,
                        )
                    )
            Logger.base.critical(
                f'🚨 [PAY] Reservation {reservation.id} paid ({payment.transaction_ref}) but no '
                f'tickets could be issued; seats {list(reservation.seat_ids)} stay booked '
                f'pending operator review'
            )
            raise

    async def _notify(self, *, reservation: Reservation, tickets: list[Ticket]) -> bool:
        screening = await self.store.get_screening(screening_id=reservation.screening_id)
        customer = reservation.customer
        summary = BookingConfirmation(
            reservation_id=reservation.id,
            screening_id=reservation.screening_id,
            movie_title=screening.movie_title if screening else '',
            cinema_name=screening.cinema_name if screening else '',
            recipient=customer.email
            if isinstance(customer, GuestCustomer)
            else f'user:{customer.user_id}',
            seat_ids=reservation.seat_ids,
            ticket_codes=tuple(ticket.code for ticket in tickets),
            total=reservation.total,
        )
        try:
            return await self.notification_service.send_booking_confirmation(summary=summary)
        except Exception as e:
            # Best effort: the reservation is already TICKETED
            Logger.base.warning(f'⚠️ [NOTIFY] Confirmation for {reservation.id} failed: {e}')
            return False
