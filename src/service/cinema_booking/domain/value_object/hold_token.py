from datetime import datetime

import attrs
from uuid_utils import UUID


@attrs.frozen
class HoldToken:
    """
    Claim on a set of seats of one screening until `expires_at`.

    The inventory only records which seats a token covers; business meaning
    (customer, price) lives on the Reservation that owns the token.
    """

    id: UUID
    screening_id: int
    seat_ids: tuple[str, ...]
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        # ttl = 0 means the token is born expired
        return now >= self.expires_at
