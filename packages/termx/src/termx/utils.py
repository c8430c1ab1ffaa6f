"""
Terminal text utilities.

Provides:
- strip_ansi(): remove SGR and other CSI sequences
- visible_width(): terminal column width of a string, ANSI-aware
- truncate_to_width(): truncate with ellipsis, ANSI-aware
- pad_to_width(): right-pad to a column width
"""
from __future__ import annotations

import re
import unicodedata

from wcwidth import wcwidth

_ANSI_CSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z~]")
_ANSI_OSC_RE = re.compile(r"\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)")

_RESET = "\x1b[0m"


def strip_ansi(text: str) -> str:
    if "\x1b" not in text:
        return text
    return _ANSI_OSC_RE.sub("", _ANSI_CSI_RE.sub("", text))


def _char_width(ch: str) -> int:
    w = wcwidth(ch)
    if w < 0:
        # Control characters take no columns
        return 0
    return w


def visible_width(text: str) -> int:
    """
    Calculate the visible terminal column width of a string.
    ANSI escape codes are ignored; tabs count as three columns.
    """
    if not text:
        return 0
    if all(0x20 <= ord(c) <= 0x7E for c in text):
        return len(text)
    clean = strip_ansi(text).replace("\t", "   ")
    return sum(_char_width(c) for c in clean)


def _tokens(text: str) -> list[tuple[str, bool]]:
    """Split text into (chunk, is_escape) pairs."""
    tokens: list[tuple[str, bool]] = []
    pos = 0
    for m in _ANSI_CSI_RE.finditer(text):
        if m.start() > pos:
            tokens.append((text[pos:m.start()], False))
        tokens.append((m.group(0), True))
        pos = m.end()
    if pos < len(text):
        tokens.append((text[pos:], False))
    return tokens


def truncate_to_width(
    text: str,
    max_width: int,
    ellipsis: str = "…",
    pad: bool = False,
) -> str:
    """
    Truncate text to max_width columns, adding ellipsis if needed.
    ANSI codes are preserved but don't count toward width.
    """
    if max_width <= 0:
        return ""
    text_visible = visible_width(text)
    if text_visible <= max_width:
        return pad_to_width(text, max_width) if pad else text

    ellipsis_width = visible_width(ellipsis)
    target_width = max_width - ellipsis_width
    if target_width <= 0:
        return ellipsis[:max_width]

    result: list[str] = []
    current = 0
    has_escape = False
    for chunk, is_escape in _tokens(text):
        if is_escape:
            result.append(chunk)
            has_escape = True
            continue
        for ch in chunk:
            w = _char_width(ch) if not unicodedata.combining(ch) else 0
            if current + w > target_width:
                break
            result.append(ch)
            current += w
        else:
            continue
        break

    truncated = "".join(result) + (_RESET if has_escape else "") + ellipsis
    return pad_to_width(truncated, max_width) if pad else truncated


def pad_to_width(text: str, width: int) -> str:
    return text + " " * max(0, width - visible_width(text))
