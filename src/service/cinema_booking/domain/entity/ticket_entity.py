from datetime import datetime

import attrs
from uuid_utils import UUID


@attrs.frozen
class Ticket:
    id: UUID
    reservation_id: UUID
    seat_id: str
    code: str
    issued_at: datetime
    is_used: bool = False
