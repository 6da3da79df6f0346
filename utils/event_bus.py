# --------------------------------------------------------------------
# utils/event_bus.py
# --------------------------------------------------------------------
"""A super-light, asyncio-based pub/sub. One instance per running loop;
whoever builds the webhook server owns the bus and hands it around."""
from __future__ import annotations
import asyncio
import logging
from collections import defaultdict
from typing import Awaitable, Callable, Dict, List, Optional, Union

_Handler = Callable[[object], Union[Awaitable[None], None]]

logger = logging.getLogger(__name__)


class EventBus:
    def __init__(self) -> None:
        self._subs: Dict[str, List[_Handler]] = defaultdict(list)
        self._q: Optional[asyncio.Queue] = None
        # background task started lazily on first publish
        self._task: Optional[asyncio.Task] = None

    # -------------------------------------------------------------- #
    def subscribe(self, topic: str, fn: _Handler) -> None:
        self._subs[topic].append(fn)

    def publish(self, topic: str, payload: object) -> None:
        """Queue ``payload`` for delivery; must be called from a running loop."""
        if self._task is None:
            self._q = asyncio.Queue()
            self._task = asyncio.get_running_loop().create_task(self._worker())
        self._q.put_nowait((topic, payload))

    async def join(self) -> None:
        """Wait until everything published so far has been delivered."""
        if self._q is not None:
            await self._q.join()

    async def close(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self._q = None

    # -------------------------------------------------------------- #
    async def _worker(self) -> None:
        while True:
            topic, payload = await self._q.get()
            try:
                for fn in self._subs.get(topic, []):
                    try:
                        res = fn(payload)
                        if asyncio.iscoroutine(res):
                            await res
                    except Exception:  # keep bus alive
                        logger.exception("event handler for %r failed", topic)
            finally:
                self._q.task_done()
