"""Debounced search-as-you-type.

`DebouncedQueryController` turns one `submit()` per keystroke into at most one
lookup per quiet period. Every lookup is tagged with a sequence number and only
the result of the most recently issued lookup is delivered; anything that
completes after a newer lookup has been issued is dropped.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)

Lookup = Callable[[str], Awaitable[Any]]
ResultCallback = Callable[[str, Any], None]
ErrorCallback = Callable[[str, Exception], None]
ClearCallback = Callable[[], None]


class DebouncedQueryController:
    def __init__(self,
                 lookup: Lookup,
                 on_results: ResultCallback,
                 on_clear: ClearCallback = None,
                 on_error: ErrorCallback = None,
                 quiet_period: float = 0.6,
                 loop: asyncio.AbstractEventLoop = None):
        if quiet_period < 0:
            raise ValueError("quiet_period must not be negative")
        self._lookup = lookup
        self._on_results = on_results
        self._on_clear = on_clear
        self._on_error = on_error
        self.quiet_period = quiet_period
        self._loop = loop
        self._timer: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()
        self._last_text: Optional[str] = None
        self._sequence = 0
        self._disposed = False

    @property
    def sequence(self) -> int:
        """Tag of the most recently issued lookup."""
        return self._sequence

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def has_pending(self) -> bool:
        return self._timer is not None or bool(self._tasks)

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def submit(self, text: str):
        if self._disposed:
            logger.debug("Ignoring input submitted after dispose")
            return
        if text == self._last_text:
            return
        self._last_text = text
        self._cancel_timer()

        if text == "":
            # Anything still in flight belongs to text the user has erased
            self._sequence += 1
            if self._on_clear is not None:
                self._on_clear()
            return

        self._timer = self._get_loop().call_later(self.quiet_period, self._fire, text)

    def supersede(self):
        """Drop the armed timer and every lookup issued so far without touching the last text."""
        self._cancel_timer()
        self._sequence += 1

    def _fire(self, text: str):
        self._timer = None
        if self._disposed:
            return
        self._sequence += 1
        sequence = self._sequence
        logger.debug(f"Issuing lookup #{sequence} for {text!r}")

        task = self._get_loop().create_task(self._run(sequence, text))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _is_current(self, sequence: int) -> bool:
        return not self._disposed and sequence == self._sequence

    async def _run(self, sequence: int, text: str):
        try:
            result = await self._lookup(text)
        except Exception as e:
            if not self._is_current(sequence):
                logger.debug(f"Dropping failure of stale lookup #{sequence} for {text!r}: {str(e)}")
                return
            logger.error(f"Lookup for {text!r} failed: {str(e)}")
            if self._on_error is not None:
                self._on_error(text, e)
            return

        if not self._is_current(sequence):
            logger.debug(f"Discarding stale result #{sequence} for {text!r} (latest is #{self._sequence})")
            return
        self._on_results(text, result)

    async def wait_idle(self):
        """Wait until no quiet-period timer is armed and no lookup is running."""
        while self.has_pending:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
                # let the done callbacks drop finished tasks
                await asyncio.sleep(0)
            else:
                await asyncio.sleep(self.quiet_period / 2 or 0.001)

    def dispose(self):
        if self._disposed:
            return
        self._disposed = True
        self._cancel_timer()
        for task in list(self._tasks):
            task.cancel()
        logger.debug("Debounced query controller disposed")
