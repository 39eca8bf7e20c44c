from typing import Union

import attrs

from src.platform.exception.exceptions import DomainError


@attrs.frozen
class RegisteredCustomer:
    user_id: int


@attrs.frozen
class GuestCustomer:
    name: str
    email: str
    phone: str

    def __attrs_post_init__(self) -> None:
        missing = [field for field in ('name', 'email', 'phone') if not getattr(self, field).strip()]
        if missing:
            raise DomainError(f'Guest reservation requires {", ".join(missing)}')


# Resolved once when the reservation is created
Customer = Union[RegisteredCustomer, GuestCustomer]
