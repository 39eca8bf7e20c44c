"""
Background hold sweeper

Runs inside the app lifespan task group. Correctness never depends on it
(holds expire lazily); it keeps seat maps and reservation status fresh
for observers.
"""

import anyio

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.command.expire_stale_holds_use_case import (
    ExpireStaleHoldsUseCase,
)


async def run_hold_sweeper(
    *, use_case: ExpireStaleHoldsUseCase, interval_seconds: float | None = None
) -> None:
    interval = interval_seconds or settings.HOLD_SWEEP_INTERVAL_SECONDS
    Logger.base.info(f'🧹 [Sweeper] Started, interval={interval}s')
    while True:
        await anyio.sleep(interval)
        try:
            expired = await use_case.sweep()
        except Exception as e:
            # Keep sweeping; the next pass retries whatever failed
            Logger.base.exception(f'❌ [Sweeper] Sweep failed: {e}')
            continue
        if expired:
            Logger.base.info(f'🧹 [Sweeper] Expired {len(expired)} reservations')
