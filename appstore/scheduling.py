"""Fixed-interval scheduling on the running asyncio loop.

:func:`run_every` arms a background task that awaits a callback, sleeps for
the interval, and repeats. It returns a :class:`PeriodicTask` handle whose
:meth:`~PeriodicTask.cancel` stops future ticks without interrupting a
callback that is already running.

Usage
-----
::

    task = run_every(300.0, registry.refresh, run_instantly=False)
    ...
    task.cancel()

"""

from __future__ import annotations

import asyncio
import contextlib
import typing as typ

from appstore.logging import get_logger, log_exception

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    type Callback = cabc.Callable[[], cabc.Awaitable[object]]

logger = get_logger(__name__)


class Scheduler(typ.Protocol):
    """Callable signature shared by :func:`run_every` and test doubles."""

    def __call__(
        self,
        interval_s: float,
        callback: Callback,
        *,
        run_instantly: bool = False,
    ) -> PeriodicTask: ...


class PeriodicTask:
    """Handle on a repeating callback started by :func:`run_every`.

    Ticks never overlap: the interval is measured from the end of one
    callback to the start of the next. Exceptions raised by the callback are
    logged and do not stop the loop.
    """

    def __init__(
        self,
        interval_s: float,
        callback: Callback,
        *,
        run_instantly: bool = False,
        name: str | None = None,
    ) -> None:
        """Validate the interval and start the loop on the running event loop.

        Raises
        ------
        ValueError
            If ``interval_s`` is not positive.
        RuntimeError
            If no event loop is running.

        """
        if interval_s <= 0:
            msg = f"interval_s must be positive, got: {interval_s}"
            raise ValueError(msg)
        self.interval_s = interval_s
        self._callback = callback
        self._run_instantly = run_instantly
        self._stopped = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=name or "periodic-task"
        )

    @property
    def cancelled(self) -> bool:
        """Return True once :meth:`cancel` has been called."""
        return self._stopped.is_set()

    @property
    def done(self) -> bool:
        """Return True when the loop has exited."""
        return self._task.done()

    def cancel(self) -> None:
        """Stop scheduling ticks; a running callback completes first."""
        self._stopped.set()

    async def wait(self) -> None:
        """Wait for the loop to exit after :meth:`cancel`."""
        await self._task

    async def _run(self) -> None:
        if self._run_instantly:
            await self._tick()
        while not self._stopped.is_set():
            if await self._sleep():
                return
            await self._tick()

    async def _sleep(self) -> bool:
        """Sleep one interval; return True if cancelled meanwhile."""
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._stopped.wait(), timeout=self.interval_s)
        return self._stopped.is_set()

    async def _tick(self) -> None:
        try:
            await self._callback()
        except Exception as exc:  # noqa: BLE001 - keep the schedule alive
            log_exception(logger, "Periodic callback failed", exc)


def run_every(
    interval_s: float,
    callback: Callback,
    *,
    run_instantly: bool = False,
) -> PeriodicTask:
    """Invoke ``callback`` every ``interval_s`` seconds until cancelled.

    Parameters
    ----------
    interval_s
        Seconds to wait between the end of one call and the start of the next.
    callback
        Coroutine function taking no arguments.
    run_instantly
        Invoke the callback once immediately instead of waiting a full
        interval first.

    Returns
    -------
    PeriodicTask
        Handle whose ``cancel()`` stops future invocations.

    """
    return PeriodicTask(interval_s, callback, run_instantly=run_instantly)
