"""Periodic background sync of a cart store"""

import asyncio
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class CartSyncTask:
    """
    Re-syncs a cart store with storage on a fixed interval.

    The task is cancellable: stopping it cancels the pending sleep or the
    in-flight sync and waits for the cancellation to finish.
    """

    def __init__(self, store, interval_seconds: float):
        self.store = store
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start syncing; no-op when already running"""
        if self.running:
            return
        self._task = asyncio.create_task(
            self._run(), name=f"cart-sync-{self.store.state.company_id}"
        )
        logger.info(
            f"Cart sync started for {self.store.state.company_id} "
            f"every {self.interval_seconds}s"
        )

    async def stop(self) -> None:
        if self._task is None:
            return

        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Cart sync stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                result = await self.store.sync()
            except Exception:
                logger.exception("Cart sync crashed, retrying on next interval")
                continue
            if not result.success:
                logger.warning(f"Cart sync failed: {result.error_message}")
