"""Keyboard decoding for the fork browser.

``read_key`` turns raw stdin bytes into the tokens ``forkview.keys`` binds:
arrow names, ``ENTER_CR``/``ENTER_LF``, ``CTRL_C``, ``ESC``, or the typed
character itself. The runtime loop folds the two Enter tokens into one press.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25

# Bytes read past a lone ESC, replayed on the next call.
_PENDING_BYTES: list[bytes] = []

_CONTROL_TOKENS: dict[bytes, str] = {
    # Raw mode disables ISIG, so Ctrl+C arrives as a byte.
    b"\x03": "CTRL_C",
    b"\r": "ENTER_CR",
    b"\n": "ENTER_LF",
}
# CSI (``ESC [``) and SS3 (``ESC O``) arrows, depending on cursor-key mode.
_SEQUENCE_INTRODUCERS = frozenset({b"[", b"O"})
_ARROW_TOKENS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
}


def _next_byte(fd: int, timeout_ms: int | None) -> bytes | None:
    """Return one byte, or ``None`` on timeout or EOF; ``None`` timeout blocks."""
    if timeout_ms is not None:
        ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
    return os.read(fd, 1) or None


def _decode_escape(fd: int) -> str:
    introducer = _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if introducer is None:
        return "ESC"
    if introducer not in _SEQUENCE_INTRODUCERS:
        _PENDING_BYTES.append(introducer)
        return "ESC"
    final = _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    return _ARROW_TOKENS.get(final, "ESC") if final is not None else "ESC"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token, or ``""`` when ``timeout_ms`` elapses first."""
    ch = _PENDING_BYTES.pop(0) if _PENDING_BYTES else _next_byte(fd, timeout_ms)
    if ch is None:
        return ""
    if ch in _CONTROL_TOKENS:
        return _CONTROL_TOKENS[ch]
    if ch == b"\x1b":
        return _decode_escape(fd)
    return ch.decode("utf-8", errors="replace")


__all__ = ["ESC_SEQUENCE_TIMEOUT_MS", "read_key"]
