"""Process-wide registry of failure exporters.

Exporters are named callbacks invoked with ``(error, meta)`` for every
captured failure. Dispatch is fire-and-forget: each callback runs in its own
detached asyncio task, so a slow or failing exporter never delays or alters
the HTTP response.
"""

import asyncio
import inspect
import threading
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import asdict, dataclass
from typing import Any, Union

import structlog
from starlette.concurrency import run_in_threadpool

from crashless.errors.exceptions import DomainError

logger = structlog.get_logger()


@dataclass(frozen=True)
class RequestMeta:
    """Describes the request a failure was captured on."""

    method: str
    path: str
    status: int

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


Observer = Callable[[DomainError, RequestMeta], Union[None, Awaitable[None]]]


class ExporterRegistry:
    """Named exporter callbacks plus the tasks currently running them.

    Registration replaces an existing entry of the same name. Entries are only
    removed by an explicit :meth:`clear`. A lock guards the mapping because
    sync handlers, and therefore registrations, may run on threadpool workers.
    """

    def __init__(self) -> None:
        self._exporters: dict[str, Observer] = {}
        self._lock = threading.Lock()
        self._pending: set[asyncio.Task[None]] = set()

    def register(self, name: str, callback: Observer) -> None:
        if not callable(callback):
            raise TypeError(f"Exporter {name!r} must be callable")
        with self._lock:
            self._exporters[name] = callback

    def clear(self) -> None:
        with self._lock:
            self._exporters.clear()

    def snapshot(self) -> list[tuple[str, Observer]]:
        with self._lock:
            return list(self._exporters.items())

    @property
    def names(self) -> list[str]:
        with self._lock:
            return list(self._exporters)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._exporters

    def __len__(self) -> int:
        with self._lock:
            return len(self._exporters)

    def dispatch(
        self,
        error: DomainError,
        meta: RequestMeta,
        *,
        extra: Iterable[tuple[str, Observer]] = (),
        report_failures: bool = True,
    ) -> list[asyncio.Task[None]]:
        """Schedule every exporter, plus ``extra`` observers, without awaiting them.

        Must be called from a running event loop.

        Args:
            error: The normalized failure.
            meta: Method, path and status of the failing request.
            extra: Additional ``(name, callback)`` pairs, e.g. a telemetry hook.
            report_failures: Log observers that raise. Failures are swallowed
                either way.

        Returns:
            The scheduled tasks, one per observer.
        """
        loop = asyncio.get_running_loop()
        tasks = []
        for name, callback in [*extra, *self.snapshot()]:
            task = loop.create_task(
                _notify(name, callback, error, meta, report_failures),
                name=f"crashless-observer-{name}",
            )
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            tasks.append(task)
        return tasks

    async def drain(self) -> None:
        """Wait for every observer task still in flight."""
        while True:
            in_flight = [task for task in self._pending if not task.done()]
            if not in_flight:
                return
            await asyncio.gather(*in_flight, return_exceptions=True)


async def _notify(
    name: str,
    callback: Observer,
    error: DomainError,
    meta: RequestMeta,
    report_failures: bool,
) -> None:
    try:
        if inspect.iscoroutinefunction(callback):
            result = callback(error, meta)
        else:
            result = await run_in_threadpool(callback, error, meta)
        if inspect.isawaitable(result):
            await result
    except Exception:
        if report_failures:
            logger.warning("observer_failed", observer=name, code=error.code, exc_info=True)


exporter_registry = ExporterRegistry()


def register_exporter(name: str, callback: Observer) -> None:
    """Register ``callback`` under ``name`` on the process-wide registry."""
    exporter_registry.register(name, callback)
