from datetime import datetime

import attrs
from uuid_utils import UUID


@attrs.frozen
class RefundInstruction:
    """Money was taken but tickets could not be delivered; an operator settles it"""

    id: UUID
    reservation_id: UUID
    amount: int
    transaction_ref: str
    reason: str
    created_at: datetime
