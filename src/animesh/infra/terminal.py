"""Infrastructure: wall clock and single-key terminal input.

These are the production implementations of the
:class:`~animesh.core.protocols.Clock` and
:class:`~animesh.core.protocols.KeySource` protocols used by the
countdown loop.

Rules
-----
* The terminal is switched to cbreak mode only inside the
  :class:`TerminalKeySource` context and always restored on exit.
* Ctrl+C keeps raising ``KeyboardInterrupt`` (cbreak, not raw mode).
* When stdin is not a TTY, :meth:`TerminalKeySource.poll` never
  reports a key.
"""

from __future__ import annotations

import os
import select
import sys
import time
from typing import Any, TextIO

ESC: bytes = b"\x1b"
ESCAPE_SEQUENCE_TIMEOUT: float = 0.01
"""Seconds to wait for the rest of an escape sequence after Esc."""


class SystemClock:
    """:class:`Clock` backed by :func:`time.time` and :func:`time.sleep`."""

    def now(self) -> float:
        return time.time()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


def _is_tty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError, OSError):
        return False


class TerminalKeySource:
    """Non-blocking key reader for the controlling terminal.

    Usage::

        with TerminalKeySource() as keys:
            key = keys.poll()
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream: TextIO = stream if stream is not None else sys.stdin
        self._saved_attrs: Any = None
        self._active: bool = False

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> TerminalKeySource:
        if not _is_tty(self._stream):
            return self
        if os.name == "nt":
            self._active = True
            return self

        import termios
        import tty

        fd = self._stream.fileno()
        self._saved_attrs = termios.tcgetattr(fd)
        tty.setcbreak(fd)
        self._active = True
        return self

    def __exit__(self, *_args: object) -> None:
        if self._saved_attrs is not None:
            import termios

            termios.tcsetattr(
                self._stream.fileno(),
                termios.TCSADRAIN,
                self._saved_attrs,
            )
            self._saved_attrs = None
        self._active = False

    # ------------------------------------------------------------------
    # KeySource
    # ------------------------------------------------------------------

    def poll(self) -> str | None:
        """Return one pending key without blocking, or ``None``."""
        if not self._active:
            return None

        if os.name == "nt":
            import msvcrt

            if msvcrt.kbhit():
                return msvcrt.getwch()
            return None

        fd = self._stream.fileno()
        ready, _, _ = select.select([fd], [], [], 0)
        if not ready:
            return None
        return _read_key(fd)


def _read_key(fd: int) -> str | None:
    """Read one key from a readable *fd*.

    A lone Esc is returned as ``"\\x1b"``; an escape sequence (arrow and
    function keys) is consumed whole and reported as no key.
    """
    data = os.read(fd, 1)
    if not data:
        return None
    if data == ESC and _drain(fd, ESCAPE_SEQUENCE_TIMEOUT):
        return None
    return data.decode(errors="ignore") or None


def _drain(fd: int, timeout: float) -> bytes:
    """Read whatever arrives on *fd* within *timeout*, then all that is pending."""
    pending = b""
    wait = timeout
    while select.select([fd], [], [], wait)[0]:
        chunk = os.read(fd, 32)
        if not chunk:
            break
        pending += chunk
        wait = 0
    return pending
