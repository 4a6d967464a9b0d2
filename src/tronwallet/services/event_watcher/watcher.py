"""Block-polling watcher for contract invocations."""

import asyncio
import inspect
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable

from tronwallet.core.config import get_settings
from tronwallet.core.exceptions import EventDecodeError, TransportError
from tronwallet.infrastructure.blockchain.address import Address
from tronwallet.infrastructure.blockchain.client import ChainClient
from tronwallet.infrastructure.blockchain.events import InvocationParser
from tronwallet.infrastructure.blockchain.models import Block, EventFilter, TransactionEvent
from tronwallet.infrastructure.blockchain.units import to_display

logger = logging.getLogger(__name__)


class WatcherState(str, Enum):
    """Event watcher state."""

    STOPPED = "stopped"
    RUNNING = "running"
    RECONNECTING = "reconnecting"
    ERROR = "error"


@dataclass
class WatcherConfig:
    """Configuration for the event watcher."""

    # Delay after every fetched (or not yet produced) block
    poll_interval: float = 0.1

    # Base delay after a failed fetch, multiplied by the attempt number
    reconnect_delay: float = 1.0

    # Consecutive failed fetches of one height before giving up
    max_reconnect_attempts: int = 5

    # Decimals used to scale transferred values
    token_decimals: int = 6

    @classmethod
    def from_settings(cls) -> "WatcherConfig":
        settings = get_settings()
        return cls(
            poll_interval=settings.watcher_poll_interval,
            reconnect_delay=settings.watcher_reconnect_delay,
            max_reconnect_attempts=settings.watcher_max_reconnect_attempts,
            token_decimals=settings.token_decimals,
        )


@dataclass
class WatcherStats:
    """Statistics for the event watcher."""

    state: WatcherState = WatcherState.STOPPED
    current_block: int = 0
    blocks_scanned: int = 0
    events_emitted: int = 0
    decode_errors: int = 0
    callback_errors: int = 0
    fetch_errors: int = 0
    last_error: str = ""
    started_at: datetime | None = None


EventCallback = Callable[[TransactionEvent], Awaitable[None] | None]


class EventWatcher:
    """Polls blocks in height order and emits matching contract invocations.

    Features:
    - Strictly sequential: one block at a time, no fetch-ahead
    - Heights advance only after a block was fetched and fully scanned
    - Not-yet-produced blocks are retried at the same height
    - Undecodable transactions are skipped without stopping the loop
    - Transport failures retried with linear backoff, then raised
    - Explicit stop signal instead of a terminal block height
    """

    def __init__(
        self,
        client: ChainClient,
        config: WatcherConfig | None = None,
    ):
        """Initialize event watcher.

        Args:
            client: Chain client used for block fetches
            config: Watcher configuration (defaults from settings)
        """
        self.client = client
        self.config = config or WatcherConfig.from_settings()
        self.parser = InvocationParser()

        self._stats = WatcherStats()
        self._task: asyncio.Task | None = None
        self._stop_event = asyncio.Event()

    @property
    def state(self) -> WatcherState:
        return self._stats.state

    @property
    def stats(self) -> WatcherStats:
        return self._stats

    async def start(
        self,
        contract_address: str | Address,
        event_name: str,
        callback: EventCallback,
        start_block: int | None = None,
    ) -> asyncio.Task:
        """Run ``watch`` in its own task."""
        if self._task and not self._task.done():
            logger.warning("Event watcher is already running")
            return self._task

        self._task = asyncio.create_task(
            self.watch(contract_address, event_name, callback, start_block)
        )
        return self._task

    async def stop(self) -> None:
        """Signal the loop to stop and wait for its task to finish."""
        self._stop_event.set()

        # Called from inside the loop: the stop event ends it after this block
        if self._task and self._task is not asyncio.current_task():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        self._stats.state = WatcherState.STOPPED
        logger.info("Event watcher stopped")

    async def watch(
        self,
        contract_address: str | Address,
        event_name: str,
        callback: EventCallback,
        start_block: int | None = None,
    ) -> None:
        """Invoke ``callback`` for every matching invocation until stopped.

        Args:
            contract_address: Contract to match
            event_name: Method signature, e.g. ``transfer(address,uint256)``
            callback: Plain function or coroutine function
            start_block: First height to scan (default: latest block)
        """
        event_filter = EventFilter.create(contract_address, event_name)
        async for event in self.stream(event_filter, start_block):
            await self._dispatch(callback, event)

    async def stream(
        self, event_filter: EventFilter, start_block: int | None = None
    ) -> AsyncIterator[TransactionEvent]:
        """Yield matching invocations block by block until stopped."""
        self._stop_event.clear()
        height = (
            start_block
            if start_block is not None
            else await self.client.get_latest_block_number()
        )
        self._stats.state = WatcherState.RUNNING
        self._stats.started_at = datetime.now(timezone.utc)
        self._stats.current_block = height
        logger.info(
            f"Watching {event_filter.contract_address} "
            f"method 0x{event_filter.method_id.hex()} from block {height}"
        )

        failures = 0
        try:
            while not self._stop_event.is_set():
                try:
                    block = await self.client.get_block(height)
                except TransportError as e:
                    failures += 1
                    self._stats.fetch_errors += 1
                    self._stats.last_error = str(e)
                    if failures >= self.config.max_reconnect_attempts:
                        logger.error(f"Giving up on block {height} after {failures} attempts: {e}")
                        self._stats.state = WatcherState.ERROR
                        raise

                    self._stats.state = WatcherState.RECONNECTING
                    delay = self.config.reconnect_delay * failures
                    logger.warning(
                        f"Fetching block {height} failed (attempt {failures}), "
                        f"retrying in {delay}s: {e}"
                    )
                    await self._wait(delay)
                    continue

                failures = 0
                self._stats.state = WatcherState.RUNNING

                if block is None:
                    # Not produced or replicated yet
                    await self._wait(self.config.poll_interval)
                    continue

                for event in self._scan_block(block, height, event_filter):
                    yield event

                self._stats.blocks_scanned += 1
                height += 1
                self._stats.current_block = height
                await self._wait(self.config.poll_interval)
        finally:
            if self._stats.state != WatcherState.ERROR:
                self._stats.state = WatcherState.STOPPED

    async def _wait(self, delay: float) -> None:
        """Sleep for ``delay`` seconds, returning early once stop is requested."""
        if delay <= 0:
            await asyncio.sleep(0)
            return
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass

    def _scan_block(
        self, block: Block, height: int, event_filter: EventFilter
    ) -> list[TransactionEvent]:
        """Decode every trigger-contract invocation of a block once."""
        events: list[TransactionEvent] = []
        for transaction in block.transactions:
            tx_id = transaction.get("txID", "") if isinstance(transaction, dict) else ""
            try:
                events.extend(self._scan_transaction(transaction, tx_id, height, event_filter))
            except EventDecodeError as e:
                self._stats.decode_errors += 1
                logger.debug(f"Skipping transaction {tx_id} in block {height}: {e}")
        return events

    def _scan_transaction(
        self,
        transaction: dict[str, Any],
        tx_id: str,
        height: int,
        event_filter: EventFilter,
    ) -> list[TransactionEvent]:
        events = []
        for value in self.parser.trigger_contracts(transaction):
            invocation = self.parser.decode_invocation(value)
            if not event_filter.matches(invocation.contract_address, invocation.method_id):
                continue
            events.append(
                TransactionEvent(
                    tx_hash=tx_id,
                    block_number=height,
                    from_address=invocation.from_address,
                    to_address=invocation.to_address,
                    value=to_display(invocation.value, self.config.token_decimals),
                    contract_address=invocation.contract_address,
                    method_id=invocation.method_id,
                )
            )
        return events

    async def _dispatch(self, callback: EventCallback, event: TransactionEvent) -> None:
        try:
            result = callback(event)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            self._stats.callback_errors += 1
            self._stats.last_error = str(e)
            logger.error(f"Event callback error for {event.tx_hash}: {e}")
            return

        self._stats.events_emitted += 1
