import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

from core.errors import StoreFailure

logger = logging.getLogger(__name__)

PollCallback = Callable[[], Union[None, Awaitable[None]]]


class PeriodicTask:
    """Cancelable timer-driven loop.

    Runs ``fn`` immediately, then every ``interval_seconds``. Blocking
    callbacks run off the event loop. Failures are logged and the loop
    keeps going; nothing is retried early.
    """

    def __init__(self, interval_seconds: float, fn: PollCallback, name: Optional[str] = None):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.interval_seconds = interval_seconds
        self.name = name or getattr(fn, "__name__", "periodic-task")
        self._fn = fn
        self._task: Optional[asyncio.Task] = None
        self.runs = 0
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name=self.name)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def run_once(self) -> None:
        self.runs += 1
        try:
            if inspect.iscoroutinefunction(self._fn):
                await self._fn()
            else:
                await asyncio.to_thread(self._fn)
        except StoreFailure as e:
            self.failures += 1
            logger.warning(f"[{self.name}] store failure during poll: {e.detail}")
        except Exception:
            self.failures += 1
            logger.exception(f"[{self.name}] error in iteration")

    async def _loop(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval_seconds)
