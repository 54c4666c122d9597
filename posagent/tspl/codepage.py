"""Transcoding of text to the Windows-1252 byte set used by TSPL label printers."""

from __future__ import annotations

import logging
import threading

_log = logging.getLogger(__name__)

_PASSTHROUGH_CONTROLS = frozenset("\n\r\t")


def _build_high_table() -> dict[str, bytes]:
    """Map every character CP1252 defines in 0x80-0xFF to its single byte."""
    table: dict[str, bytes] = {}
    for code in range(0x80, 0x100):
        raw = bytes([code])
        try:
            table[raw.decode("cp1252")] = raw
        except UnicodeDecodeError:
            # 0x81, 0x8D, 0x8F, 0x90 and 0x9D carry no glyph.
            continue
    return table


_HIGH_TABLE = _build_high_table()

_warned: set[str] = set()
_warned_lock = threading.Lock()


def _warn_unknown(ch: str) -> None:
    """Log a replaced character, at most once per character per process."""
    with _warned_lock:
        if ch in _warned:
            return
        _warned.add(ch)
    _log.warning(
        "tspl: character not representable in CP1252, replaced with '?' "
        "(char=%r, codepoint=U+%04X)",
        ch,
        ord(ch),
    )


def _encode_char(ch: str) -> bytes:
    code = ord(ch)
    if 0x20 <= code <= 0x7E or ch in _PASSTHROUGH_CONTROLS:
        return bytes([code])
    mapped = _HIGH_TABLE.get(ch)
    if mapped is not None:
        return mapped
    _warn_unknown(ch)
    return b"?"


def to_cp1252(s: str) -> bytes:
    """Convert text to CP1252 bytes.

    Printable ASCII, tab, LF and CR pass through unchanged; characters
    CP1252 defines use their codepoint; anything else (Arabic, CJK,
    other control characters) becomes ``?`` and is logged once.
    """
    return b"".join(_encode_char(ch) for ch in s)