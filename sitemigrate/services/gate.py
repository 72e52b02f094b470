"""A one-shot barrier over a fixed set of named asynchronous loads."""

import asyncio
import logging
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


class ReadinessGate:
    """Opens exactly once, after every named load has signalled completion.

    Each name must be signalled once; the gate is a join, so a single
    completed load never opens it while another is still pending. A load
    that fails releases the waiters with its error instead.
    """

    def __init__(self, names: Iterable[str]) -> None:
        self._pending = set(names)
        self._released = asyncio.Event()
        self._error: Optional[BaseException] = None
        if not self._pending:
            self._released.set()

    @property
    def is_open(self) -> bool:
        return self._released.is_set() and self._error is None

    @property
    def pending(self) -> frozenset:
        return frozenset(self._pending)

    def signal(self, name: str) -> None:
        if name not in self._pending:
            raise ValueError(f"Unexpected or repeated readiness signal: {name!r}")
        self._pending.discard(name)
        logger.debug("Input %r ready, %d pending", name, len(self._pending))
        if not self._pending:
            self._released.set()

    def fail(self, error: BaseException) -> None:
        """Release every waiter with *error*; only the first failure is kept."""
        if self._released.is_set():
            return
        self._error = error
        self._released.set()

    async def wait(self) -> None:
        """Suspend until every load is done, re-raising a load's failure."""
        await self._released.wait()
        if self._error is not None:
            raise self._error
