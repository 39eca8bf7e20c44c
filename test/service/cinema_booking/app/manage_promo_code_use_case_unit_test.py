"""Unit tests for promo code management and listing"""

from datetime import date

import anyio
import pytest

from src.platform.exception.exceptions import ConflictError, DomainError, NotFoundError
from src.service.cinema_booking.app.command.manage_promo_code_use_case import (
    ManagePromoCodeUseCase,
)
from src.service.cinema_booking.app.dto.promo_dto import InvalidPromo
from src.service.cinema_booking.app.query.list_promo_codes_use_case import ListPromoCodesUseCase
from src.service.cinema_booking.domain.booking_errors import UsageExhaustedError
from src.service.cinema_booking.domain.enum.discount_type import DiscountType
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
class TestCreatePromoCode:
    @pytest.mark.asyncio
    async def test_create_starts_unused(
        self, manage_promo_use_case: ManagePromoCodeUseCase, store: InMemoryPersistenceStore
    ) -> None:
        created = await manage_promo_use_case.create(
            promo=make_promo('SPRING', current_uses=3, max_uses=10)
        )

        assert created.current_uses == 0
        assert await store.get_promo_code(code='SPRING') == created

    @pytest.mark.asyncio
    async def test_duplicate_code_conflicts(
        self, manage_promo_use_case: ManagePromoCodeUseCase
    ) -> None:
        with pytest.raises(ConflictError):
            await manage_promo_use_case.create(promo=make_promo('TENOFF'))

    @pytest.mark.parametrize(
        'overrides',
        [
            {'amount': 0},
            {'amount': 101},
            {'discount_type': DiscountType.FIXED, 'amount': -5},
            {'valid_from': date(2026, 12, 31), 'valid_until': date(2026, 1, 1)},
            {'max_uses': 0},
            {'min_purchase_amount': -1},
        ],
        ids=['zero-percent', 'over-100-percent', 'negative-fixed', 'reversed-dates', 'no-uses',
             'negative-minimum'],
    )
    def test_invalid_promo_is_refused(self, overrides: dict) -> None:
        with pytest.raises(DomainError):
            make_promo('BAD', **overrides)


@pytest.mark.unit
class TestUpdatePromoCode:
    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(
        self, manage_promo_use_case: ManagePromoCodeUseCase
    ) -> None:
        updated = await manage_promo_use_case.update(
            code='TENOFF', changes={'amount': 15, 'description': '15% off'}
        )

        assert updated.amount == 15
        assert updated.description == '15% off'
        assert updated.discount_type == DiscountType.PERCENTAGE
        assert updated.valid_until == date(2026, 12, 31)

    @pytest.mark.asyncio
    async def test_update_is_validated_against_merged_values(
        self, manage_promo_use_case: ManagePromoCodeUseCase, store: InMemoryPersistenceStore
    ) -> None:
        # A 5000 fixed amount is not a valid percentage
        with pytest.raises(DomainError):
            await manage_promo_use_case.update(
                code='LIMITED', changes={'discount_type': DiscountType.PERCENTAGE}
            )

        promo = await store.get_promo_code(code='LIMITED')
        assert promo is not None
        assert promo.discount_type == DiscountType.FIXED

    @pytest.mark.asyncio
    async def test_max_uses_cannot_drop_below_uses_already_made(
        self,
        manage_promo_use_case: ManagePromoCodeUseCase,
        promo_code_validator: PromoCodeValidatorImpl,
    ) -> None:
        await manage_promo_use_case.update(code='TENOFF', changes={'max_uses': 5})
        for _ in range(3):
            await promo_code_validator.redeem(code='TENOFF')

        with pytest.raises(DomainError):
            await manage_promo_use_case.update(code='TENOFF', changes={'max_uses': 2})

        lifted = await manage_promo_use_case.update(code='TENOFF', changes={'max_uses': None})
        assert lifted.max_uses is None
        assert lifted.current_uses == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'changes',
        [{'current_uses': 0}, {'code': 'OTHER'}, {'amount': None}],
        ids=['usage-counter', 'code', 'null-amount'],
    )
    async def test_protected_fields_are_refused(
        self, manage_promo_use_case: ManagePromoCodeUseCase, changes: dict
    ) -> None:
        with pytest.raises(DomainError):
            await manage_promo_use_case.update(code='TENOFF', changes=changes)

    @pytest.mark.asyncio
    async def test_unknown_code(self, manage_promo_use_case: ManagePromoCodeUseCase) -> None:
        with pytest.raises(NotFoundError):
            await manage_promo_use_case.update(code='NOPE', changes={'amount': 5})

    @pytest.mark.asyncio
    async def test_updates_racing_redemptions_never_lose_a_use(
        self,
        manage_promo_use_case: ManagePromoCodeUseCase,
        promo_code_validator: PromoCodeValidatorImpl,
        store: InMemoryPersistenceStore,
    ) -> None:
        # Given: 5 uses left, redemptions and description edits interleaved
        await store.save(entity=make_promo('RACE', max_uses=5))
        exhausted: list[UsageExhaustedError] = []

        async def redeem() -> None:
            try:
                await promo_code_validator.redeem(code='RACE')
            except UsageExhaustedError as e:
                exhausted.append(e)

        async def edit(n: int) -> None:
            await manage_promo_use_case.update(code='RACE', changes={'description': f'edit {n}'})

        # When
        async with anyio.create_task_group() as tg:
            for n in range(8):
                tg.start_soon(redeem)
                tg.start_soon(edit, n)

        # Then
        promo = await store.get_promo_code(code='RACE')
        assert promo is not None
        assert promo.current_uses == 5
        assert len(exhausted) == 3

    @pytest.mark.asyncio
    async def test_deactivated_code_no_longer_validates(
        self,
        manage_promo_use_case: ManagePromoCodeUseCase,
        promo_code_validator: PromoCodeValidatorImpl,
    ) -> None:
        deactivated = await manage_promo_use_case.deactivate(code='TENOFF')

        assert not deactivated.is_active
        result = await promo_code_validator.validate(
            code='TENOFF', as_of=AS_OF, purchase_total=20000
        )
        assert result == InvalidPromo(code='TENOFF', reason=PromoInvalidReason.INACTIVE)


@pytest.mark.unit
class TestListPromoCodes:
    @pytest.mark.asyncio
    async def test_all_codes_by_code(self, store: InMemoryPersistenceStore) -> None:
        promos = await ListPromoCodesUseCase(store=store).list_promo_codes()

        assert [promo.code for promo in promos] == [
            'BIGSPEND',
            'INACTIVE',
            'LIMITED',
            'OLD',
            'TENOFF',
        ]

    @pytest.mark.asyncio
    async def test_active_only_skips_unredeemable_codes(
        self, store: InMemoryPersistenceStore, promo_code_validator: PromoCodeValidatorImpl
    ) -> None:
        await promo_code_validator.redeem(code='LIMITED')  # its only use
        await store.save(entity=make_promo('SOON_OVER', valid_until=date(2026, 4, 1)))

        promos = await ListPromoCodesUseCase(store=store).list_promo_codes(
            active_only=True, as_of=AS_OF
        )

        assert [promo.code for promo in promos][0] == 'SOON_OVER'
        assert {promo.code for promo in promos} == {'SOON_OVER', 'BIGSPEND', 'TENOFF'}

    @pytest.mark.asyncio
    async def test_get_unknown_code(self, store: InMemoryPersistenceStore) -> None:
        with pytest.raises(NotFoundError):
            await ListPromoCodesUseCase(store=store).get_promo_code(code='NOPE')
