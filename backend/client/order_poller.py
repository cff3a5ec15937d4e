"""
Order status poller — keeps a customer's order list fresh without server push.

Runs as an asyncio background task:
    - reads the customer order list once per interval (5s by default)
    - each result replaces the previous snapshot (no merging)
    - reads never overlap: the next tick waits for the previous response and
      starts no earlier than one interval after the previous tick started
    - a failed tick is logged and reported through `on_error`; polling
      continues on the next interval
    - stop() (or leaving the `async with` block) cancels the task

Usage:
    async with OrderApiClient(base_url, get_token) as api:
        async with OrderStatusPoller(api, on_update=render) as poller:
            ...
"""
import asyncio
import logging
from typing import Callable, Optional

from client.order_api import OrderApiClient
from config import settings

logger = logging.getLogger(__name__)


class OrderStatusPoller:
    def __init__(
        self,
        api: OrderApiClient,
        *,
        interval_seconds: Optional[float] = None,
        on_update: Optional[Callable[[list[dict]], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        self.api = api
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None
            else settings.order_poll_interval_seconds
        )
        if self.interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._on_update = on_update
        self._on_error = on_error
        self._task: Optional[asyncio.Task] = None
        self._orders: Optional[list[dict]] = None
        self.ticks = 0
        self.errors_count = 0
        self.last_error: Optional[Exception] = None

    # ── Snapshot ────────────────────────────────────────────────────

    @property
    def orders(self) -> Optional[list[dict]]:
        """Latest order list, or None before the first successful read."""
        return self._orders

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ── Polling ─────────────────────────────────────────────────────

    async def poll_once(self) -> list[dict]:
        """Read the order list once and replace the snapshot."""
        orders = await self.api.get_my_orders()
        self._orders = orders
        self.ticks += 1
        if self._on_update:
            self._notify(self._on_update, orders)
        return orders

    async def _run(self):
        loop = asyncio.get_running_loop()
        logger.info(f"Order poller started (every {self.interval_seconds}s)")
        while True:
            started = loop.time()
            try:
                await self.poll_once()
            except Exception as e:
                self.errors_count += 1
                self.last_error = e
                logger.warning(f"Order poll failed, retrying next interval: {e}")
                if self._on_error:
                    self._notify(self._on_error, e)
            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, self.interval_seconds - elapsed))

    def _notify(self, callback: Callable, arg) -> None:
        # Listener failures must not stop polling.
        try:
            callback(arg)
        except Exception:
            logger.exception("Order poller callback raised")

    # ── Lifecycle ───────────────────────────────────────────────────

    async def start(self):
        if self.running:
            logger.warning("Order poller already running")
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self):
        task, self._task = self._task, None
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        elif task and not task.cancelled() and task.exception():
            logger.error(f"Order poller had died: {task.exception()}")
        logger.info("Order poller stopped")

    async def __aenter__(self) -> "OrderStatusPoller":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
