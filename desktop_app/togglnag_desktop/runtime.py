"""Event-Loop-Thread, dem der gesamte Erinnerungszustand gehört."""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable, Coroutine, Optional

logger = logging.getLogger(__name__)


class CoreRunner:
    """Betreibt einen asyncio-Loop in einem Daemon-Thread.

    Der GUI-Thread greift nie direkt auf den Controller-Zustand zu, sondern
    übergibt Coroutines und Callbacks an diesen Loop.
    """

    def __init__(self, name: str = "togglnag-core") -> None:
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def start(self) -> None:
        self._thread.start()

    def _run(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def submit(self, coro: Coroutine[Any, Any, Any],
               on_error: Optional[Callable[[BaseException], None]] = None) -> Future:
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        if on_error is not None:
            def _report(done: Future) -> None:
                if done.cancelled():
                    return
                exc = done.exception()
                if exc is not None:
                    on_error(exc)

            future.add_done_callback(_report)
        return future

    def call(self, callback: Callable[..., Any], *args: Any) -> None:
        self.loop.call_soon_threadsafe(callback, *args)

    async def _cancel_pending(self) -> None:
        current = asyncio.current_task()
        tasks = [task for task in asyncio.all_tasks() if task is not current]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def stop(self, timeout: float = 5.0) -> None:
        if not self.running:
            return
        try:
            self.submit(self._cancel_pending()).result(timeout)
        except Exception:
            logger.exception("Pending tasks did not shut down cleanly")
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout)
        if not self._thread.is_alive():
            self.loop.close()


__all__ = ["CoreRunner"]
