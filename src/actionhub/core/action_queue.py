# src/actionhub/core/action_queue.py
from __future__ import annotations

import asyncio
import threading
from collections import deque
from typing import Any, Deque, Optional, Sequence, Tuple

from actionhub.core import log
from actionhub.core.contracts import ActionRef, check_payload
from actionhub.core.metrics import inc_counter, set_gauge
from actionhub.core.registry import ActionRegistry


class ActionQueue:
    """Thread-safe front for ActionRegistry.post.

    Any thread may ``put``; one worker thread drains items in FIFO order and
    dispatches them through the registry, so handler ordering and failure
    isolation are the same as a direct post.
    """

    def __init__(self, registry: ActionRegistry, maxlen: int = 1024, daemon: bool = True,
                 name: str = "actionhub.queue"):
        self.registry = registry
        self.daemon = daemon
        self.name = name
        self.l = log.get(name)
        self._maxlen = int(maxlen)
        self._items: Deque[Tuple[ActionRef, Tuple[Any, ...]]] = deque()
        self._cond = threading.Condition()
        self._busy = False
        self._running = False
        self._th: threading.Thread | None = None

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._th = threading.Thread(target=self._loop, name="ActionQueue", daemon=self.daemon)
        self._th.start()
        self.l.info("queue start (daemon=%s maxlen=%d)", self.daemon, self._maxlen)

    def stop(self, timeout: float = 1.0) -> None:
        """Drain pending items, then stop the worker."""
        if not self._running:
            return
        with self._cond:
            self._running = False
            self._cond.notify_all()
        if self._th and threading.current_thread() is not self._th:
            self._th.join(timeout=timeout)
        self._th = None
        self.l.info("queue stop")

    def put(self, action: ActionRef, data: Optional[Sequence[Any]] = ()) -> None:
        """Enqueue a post; drops the oldest pending item when full."""
        payload = check_payload(data)
        with self._cond:
            if len(self._items) >= self._maxlen:
                self._items.popleft()
                inc_counter("queue_drops_total", queue=self.name)
                self.l.warning("queue full (maxlen=%d), dropped oldest action", self._maxlen)
            self._items.append((action, payload))
            set_gauge("queue_depth", float(len(self._items)), queue=self.name)
            self._cond.notify()

    def depth(self) -> int:
        with self._cond:
            return len(self._items)

    def idle(self) -> bool:
        with self._cond:
            return not self._items and not self._busy

    def _loop(self) -> None:
        while True:
            with self._cond:
                while self._running and not self._items:
                    self._cond.wait(timeout=0.1)
                if not self._items:
                    return
                action, payload = self._items.popleft()
                self._busy = True
                set_gauge("queue_depth", float(len(self._items)), queue=self.name)
            try:
                self.registry.post(action, payload)
            except Exception as e:
                # bad identifiers surface here rather than in the caller's thread
                self.l.error("queued post failed action=%r err=%s", action, e, exc_info=True)
            finally:
                with self._cond:
                    self._busy = False

    async def wait_idle(self, poll_interval: float = 0.01) -> None:
        """Await until every queued action has been dispatched.

        Raises RuntimeError if items are pending and the worker is not running.
        """
        while not self.idle():
            if not self._running:
                raise RuntimeError("ActionQueue.wait_idle: worker not started")
            await asyncio.sleep(poll_interval)
