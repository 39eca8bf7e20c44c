import attrs

from src.platform.exception.exceptions import DomainError


@attrs.define
class Concession:
    """Catalog item sold alongside tickets; the catalog is the only source of its price"""

    id: int
    name: str
    price: int  # minor units
    category: str = ''
    description: str = ''
    is_available: bool = True

    def __attrs_post_init__(self) -> None:
        if self.price < 0:
            raise DomainError(f'Concession {self.name} price must be >= 0, got {self.price}')
