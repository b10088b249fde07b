"""Tests for the periodic background sync task."""

import asyncio

from partner_cart.models.cart import CartState
from partner_cart.store.cart_store import CartOperationResult
from partner_cart.store.sync import CartSyncTask


class FakeStore:
    def __init__(self, mode="ok"):
        self.mode = mode
        self.calls = 0
        self.state = CartState(company_id="comp-001")

    async def sync(self):
        self.calls += 1
        if self.mode == "raise":
            raise RuntimeError("boom")
        if self.mode == "fail":
            return CartOperationResult(success=False, state=self.state, error_message="Failed to load cart")
        return CartOperationResult(success=True, state=self.state)


def run_for(task, seconds):
    async def scenario():
        task.start()
        await asyncio.sleep(seconds)
        running = task.running
        await task.stop()
        return running

    return asyncio.run(scenario())


class TestCartSyncTask:
    def test_syncs_on_interval(self):
        store = FakeStore()
        task = CartSyncTask(store, interval_seconds=0.01)

        assert run_for(task, 0.1)
        assert store.calls >= 2
        assert not task.running

    def test_no_sync_before_first_interval(self):
        store = FakeStore()
        run_for(CartSyncTask(store, interval_seconds=10), 0.02)
        assert store.calls == 0

    def test_keeps_running_after_errors(self):
        for mode in ("fail", "raise"):
            store = FakeStore(mode)
            task = CartSyncTask(store, interval_seconds=0.01)
            assert run_for(task, 0.1)
            assert store.calls >= 2

    def test_start_twice_keeps_one_task(self):
        store = FakeStore()
        task = CartSyncTask(store, interval_seconds=0.01)

        async def scenario():
            task.start()
            first = task._task
            task.start()
            same = task._task is first
            await task.stop()
            return same

        assert asyncio.run(scenario())

    def test_stop_without_start(self):
        task = CartSyncTask(FakeStore(), interval_seconds=1)
        asyncio.run(task.stop())
        assert not task.running

    def test_no_syncs_after_stop(self):
        store = FakeStore()
        task = CartSyncTask(store, interval_seconds=0.01)

        async def scenario():
            task.start()
            await asyncio.sleep(0.05)
            await task.stop()
            stopped_at = store.calls
            await asyncio.sleep(0.05)
            return stopped_at

        stopped_at = asyncio.run(scenario())
        assert store.calls == stopped_at
