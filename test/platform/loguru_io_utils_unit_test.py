import pytest

from src.platform.logging.loguru_io_utils import (
    mask_sensitive,
    should_mask_keyword,
    truncate_content,
)


@pytest.mark.unit
class TestMasking:
    def test_masks_sensitive_fields_in_repr(self) -> None:
        text = "GuestCustomer(name='Ana', email='ana@example.com', phone='0917')"

        masked = mask_sensitive(text)

        assert 'ana@example.com' not in masked
        assert '0917' not in masked
        assert "name='Ana'" in masked

    def test_leaves_clean_data_untouched(self) -> None:
        data = {'seat_ids': ['A1']}

        assert mask_sensitive(data) is data

    def test_masks_keyword_arguments(self) -> None:
        assert should_mask_keyword('card_token', 'tok_visa') == '********'
        assert should_mask_keyword('method', 'gcash') == 'gcash'


@pytest.mark.unit
def test_truncates_long_content() -> None:
    truncated = truncate_content('x' * 5000)

    assert truncated.startswith('x' * 1000)
    assert 'truncated 4000 chars' in truncated
