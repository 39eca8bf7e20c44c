"""Unit tests for PromoCodeValidatorImpl"""

from datetime import date

import anyio
import pytest

from src.service.cinema_booking.app.dto.promo_dto import InvalidPromo, PromoRedemption, ValidPromo
from src.service.cinema_booking.domain.booking_errors import UsageExhaustedError
from src.service.cinema_booking.domain.enum.promo_invalid_reason import PromoInvalidReason
from src.service.cinema_booking.driven_adapter.repo.in_memory_persistence_store import (
    InMemoryPersistenceStore,
)
from src.service.cinema_booking.driven_adapter.state.promo_code_validator_impl import (
    PromoCodeValidatorImpl,
)
from test.service.cinema_booking.fixtures import make_promo


AS_OF = date(2026, 3, 1)


@pytest.mark.unit
class TestValidate:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ('code', 'reason'),
        [
            ('NOPE', PromoInvalidReason.NOT_FOUND),
            ('INACTIVE', PromoInvalidReason.INACTIVE),
            ('OLD', PromoInvalidReason.OUT_OF_DATE_RANGE),
            ('BIGSPEND', PromoInvalidReason.BELOW_MINIMUM_PURCHASE),
        ],
    )
    async def test_invalid_codes_report_reason(
        self, promo_code_validator: PromoCodeValidatorImpl, code: str, reason: PromoInvalidReason
    ) -> None:
        result = await promo_code_validator.validate(code=code, as_of=AS_OF, purchase_total=20000)

        assert result == InvalidPromo(code=code, reason=reason)

    @pytest.mark.asyncio
    async def test_valid_code(self, promo_code_validator: PromoCodeValidatorImpl) -> None:
        result = await promo_code_validator.validate(
            code='TENOFF', as_of=AS_OF, purchase_total=20000
        )

        assert isinstance(result, ValidPromo)
        assert result.promo.code == 'TENOFF'

    @pytest.mark.asyncio
    async def test_validity_dates_are_inclusive(
        self, promo_code_validator: PromoCodeValidatorImpl
    ) -> None:
        first = await promo_code_validator.validate(
            code='TENOFF', as_of=date(2026, 1, 1), purchase_total=1
        )
        last = await promo_code_validator.validate(
            code='TENOFF', as_of=date(2026, 12, 31), purchase_total=1
        )

        assert isinstance(first, ValidPromo)
        assert isinstance(last, ValidPromo)

    @pytest.mark.asyncio
    async def test_checks_run_in_order(
        self, store: InMemoryPersistenceStore, promo_code_validator: PromoCodeValidatorImpl
    ) -> None:
        # Given: inactive, out of range, used up and below minimum all at once
        await store.save(
            entity=make_promo(
                'BROKEN',
                is_active=False,
                valid_from=date(2020, 1, 1),
                valid_until=date(2020, 1, 2),
                max_uses=1,
                current_uses=1,
                min_purchase_amount=10**9,
            )
        )

        result = await promo_code_validator.validate(code='BROKEN', as_of=AS_OF, purchase_total=1)

        # Then: the first failing check wins
        assert isinstance(result, InvalidPromo)
        assert result.reason == PromoInvalidReason.INACTIVE

    @pytest.mark.asyncio
    async def test_exhausted_before_minimum_purchase(
        self, store: InMemoryPersistenceStore, promo_code_validator: PromoCodeValidatorImpl
    ) -> None:
        await store.save(
            entity=make_promo('USEDUP', max_uses=2, current_uses=2, min_purchase_amount=10**9)
        )

        result = await promo_code_validator.validate(code='USEDUP', as_of=AS_OF, purchase_total=1)

        assert isinstance(result, InvalidPromo)
        assert result.reason == PromoInvalidReason.USAGE_EXHAUSTED

    @pytest.mark.asyncio
    async def test_validate_does_not_consume(
        self, store: InMemoryPersistenceStore, promo_code_validator: PromoCodeValidatorImpl
    ) -> None:
        for _ in range(3):
            await promo_code_validator.validate(code='LIMITED', as_of=AS_OF, purchase_total=20000)

        promo = await store.get_promo_code(code='LIMITED')
        assert promo is not None
        assert promo.current_uses == 0


@pytest.mark.unit
class TestRedeem:
    @pytest.mark.asyncio
    async def test_concurrent_redemptions_never_exceed_max_uses(
        self, store: InMemoryPersistenceStore, promo_code_validator: PromoCodeValidatorImpl
    ) -> None:
        # Given: 3 uses left, 8 concurrent redeemers
        await store.save(entity=make_promo('RACE', max_uses=3))
        redeemed: list[PromoRedemption] = []
        exhausted: list[UsageExhaustedError] = []

        async def attempt() -> None:
            try:
                redeemed.append(await promo_code_validator.redeem(code='RACE'))
            except UsageExhaustedError as e:
                exhausted.append(e)

        # When
        async with anyio.create_task_group() as tg:
            for _ in range(8):
                tg.start_soon(attempt)

        # Then
        assert len(redeemed) == 3
        assert len(exhausted) == 5
        promo = await store.get_promo_code(code='RACE')
        assert promo is not None
        assert promo.current_uses == 3

    @pytest.mark.asyncio
    async def test_unlimited_code_always_redeems(
        self, store: InMemoryPersistenceStore, promo_code_validator: PromoCodeValidatorImpl
    ) -> None:
        for _ in range(5):
            await promo_code_validator.redeem(code='TENOFF')

        promo = await store.get_promo_code(code='TENOFF')
        assert promo is not None
        assert promo.current_uses == 5

    @pytest.mark.asyncio
    async def test_rollback_frees_a_use_exactly_once(
        self, store: InMemoryPersistenceStore, promo_code_validator: PromoCodeValidatorImpl
    ) -> None:
        # Given
        redemption = await promo_code_validator.redeem(code='LIMITED')
        with pytest.raises(UsageExhaustedError):
            await promo_code_validator.redeem(code='LIMITED')

        # When: rolled back twice
        await promo_code_validator.rollback(redemption=redemption)
        await promo_code_validator.rollback(redemption=redemption)

        # Then
        promo = await store.get_promo_code(code='LIMITED')
        assert promo is not None
        assert promo.current_uses == 0
        assert isinstance(await promo_code_validator.redeem(code='LIMITED'), PromoRedemption)
        assert redemption.rolled_back

    @pytest.mark.asyncio
    async def test_no_per_code_state_outlives_the_call(
        self, promo_code_validator: PromoCodeValidatorImpl
    ) -> None:
        for _ in range(20):
            redemption = await promo_code_validator.redeem(code='TENOFF')
            await promo_code_validator.rollback(redemption=redemption)

        assert len(promo_code_validator.locks) == 0
