"""Progress channel between a running migration and its observers.

The migrator sends, in order, every method name it is about to invoke
(forward or compensating) and every error it encounters. The channel is a
side channel: the run's outcome is its return value, not anything here.

Backpressure:
    The channel is unbounded by default, so a slow or absent consumer never
    stalls a run. When created with ``maxsize > 0``, ``send`` blocks the
    migrator until a consumer makes room. That is the only point at which a
    run can wait on its observers.

Example::

    channel = ProgressChannel()
    migrator.migrate(migration, channel)
    for message in channel.drain():
        print(message)
"""

from __future__ import annotations

import queue
from collections.abc import Iterable, Iterator
from typing import Protocol

ProgressMessage = str | Exception


class _Closed:
    def __repr__(self) -> str:
        return "<closed>"


_CLOSED = _Closed()


class ProgressSink(Protocol):
    """Anything the migrator can report progress to."""

    def send(self, message: ProgressMessage) -> None: ...


class ProgressChannel:
    """Ordered FIFO of progress messages backed by ``queue.Queue``."""

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: queue.Queue[ProgressMessage | _Closed] = queue.Queue(maxsize)
        self._closed = False

    @property
    def maxsize(self) -> int:
        return self._queue.maxsize

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, message: ProgressMessage) -> None:
        """Append ``message``; blocks while a bounded channel is full."""
        if self._closed:
            raise RuntimeError("send on closed progress channel")
        self._queue.put(message)

    def close(self) -> None:
        """Mark the end of the stream; iterating consumers stop after it."""
        if not self._closed:
            self._closed = True
            self._queue.put(_CLOSED)

    def get(self, timeout: float | None = None) -> ProgressMessage | None:
        """Next message, or ``None`` once the channel is closed and drained.

        Raises ``queue.Empty`` if ``timeout`` elapses first.
        """
        message = self._queue.get(timeout=timeout)
        if message is _CLOSED:
            # keep the marker for other consumers
            self._queue.put(_CLOSED)
            return None
        return message

    def drain(self) -> list[ProgressMessage]:
        """Remove and return every message currently queued, without blocking."""
        messages: list[ProgressMessage] = []
        while True:
            try:
                message = self._queue.get_nowait()
            except queue.Empty:
                return messages
            if message is _CLOSED:
                self._queue.put(_CLOSED)
                return messages
            messages.append(message)

    def __iter__(self) -> Iterator[ProgressMessage]:
        while True:
            message = self.get()
            if message is None:
                return
            yield message


def method_names(messages: Iterable[ProgressMessage]) -> list[str]:
    """The method-name messages, in order."""
    return [m for m in messages if isinstance(m, str)]


def errors(messages: Iterable[ProgressMessage]) -> list[Exception]:
    """The error messages, in order."""
    return [m for m in messages if isinstance(m, Exception)]


__all__ = [
    "ProgressChannel",
    "ProgressMessage",
    "ProgressSink",
    "method_names",
    "errors",
]
