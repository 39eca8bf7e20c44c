import attrs

from src.platform.exception.exceptions import DomainError


@attrs.frozen
class ConcessionLine:
    item_id: int
    name: str
    unit_price: int  # minor units
    quantity: int

    def __attrs_post_init__(self) -> None:
        if self.quantity < 0:
            raise DomainError(f'Concession quantity must be >= 0, got {self.quantity}')
        if self.unit_price < 0:
            raise DomainError(f'Concession unit price must be >= 0, got {self.unit_price}')
