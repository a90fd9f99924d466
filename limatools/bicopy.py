"""Bidirectional copying between two connected streams."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Any

log = logging.getLogger(__name__)

_CHUNK = 32 * 1024
_POLL_INTERVAL = 0.05


def _read(stream: Any) -> bytes:
    if hasattr(stream, "recv"):
        return stream.recv(_CHUNK)
    reader = getattr(stream, "read1", None) or stream.read
    return reader(_CHUNK)


def _write(stream: Any, data: bytes) -> None:
    if hasattr(stream, "sendall"):
        stream.sendall(data)
        return
    view = memoryview(data)
    while view:
        written = stream.write(view)
        view = view[len(view) if written is None else written :]
    flush = getattr(stream, "flush", None)
    if flush is not None:
        flush()


def _shutdown(stream: Any, how: int) -> None:
    shutdown = getattr(stream, "shutdown", None)
    if shutdown is None:
        return
    try:
        shutdown(how)
    except OSError as exc:
        log.debug("failed to shut down stream: %s", exc)


def _broker(to: Any, source: Any, counts: list[int], index: int) -> None:
    try:
        while True:
            chunk = _read(source)
            if not chunk:
                break
            _write(to, chunk)
            counts[index] += len(chunk)
    except (OSError, ValueError) as exc:
        log.debug("failed to copy: %s", exc)
    _shutdown(source, socket.SHUT_RD)
    _shutdown(to, socket.SHUT_WR)


def _close(stream: Any) -> None:
    _shutdown(stream, socket.SHUT_RDWR)
    close = getattr(stream, "close", None)
    if close is None:
        return
    try:
        close()
    except OSError as exc:
        log.debug("failed to close stream: %s", exc)


def bicopy(x: Any, y: Any, quit: threading.Event | None = None) -> tuple[int, int]:
    """Copy data between *x* and *y* in both directions until both sides end.

    Streams may be sockets or binary file objects. Copying stops early when
    *quit* is set. Both streams are closed on return. Returns the number of
    bytes copied from x to y and from y to x.
    """
    counts = [0, 0]
    workers = [
        threading.Thread(target=_broker, args=(y, x, counts, 0), daemon=True),
        threading.Thread(target=_broker, args=(x, y, counts, 1), daemon=True),
    ]
    finished = threading.Event()

    def _wait_all() -> None:
        for worker in workers:
            worker.join()
        finished.set()

    for worker in workers:
        worker.start()
    threading.Thread(target=_wait_all, daemon=True).start()

    if quit is None:
        finished.wait()
    else:
        while not finished.wait(_POLL_INTERVAL):
            if quit.is_set():
                break

    _close(x)
    _close(y)
    finished.wait()
    return counts[0], counts[1]