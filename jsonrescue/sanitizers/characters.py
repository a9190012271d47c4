# jsonrescue/sanitizers/characters.py
"""
Character-level cleanup outside string literals.
"""
from __future__ import annotations

from .base import Sanitizer, SanitizerResult

ZERO_WIDTH = frozenset("\u200b\u200c\u200d\u2060\ufeff")
CURLY_DOUBLE_OPEN = frozenset("\u201c\u201d\u201e\u201f")
CURLY_DOUBLE_CLOSE = "\u201d"
CURLY_SINGLE = frozenset("\u2018\u2019")
ALLOWED_CONTROL = frozenset("\t\n\r")


def _is_stray_control(ch: str) -> bool:
    code = ord(ch)
    return (code < 0x20 and ch not in ALLOWED_CONTROL) or code == 0x7F


class NormalizeCharacters(Sanitizer):
    """
    Drop control and zero-width characters and convert curly quotes to ASCII.

    Only text outside ASCII string literals is touched. A literal opened by a
    curly quote is treated as a string and closed by the matching curly quote,
    so both quotes become ASCII.
    """

    name = "normalize_characters"
    description = "Removed stray control characters and normalized curly quotes"

    def apply(self, text: str) -> SanitizerResult:
        out = []
        removed = 0
        curly_quotes = 0
        in_str = False
        curly_str = False
        esc = False

        for ch in text:
            if in_str:
                if esc:
                    esc = False
                elif ch == "\\":
                    esc = True
                elif ch == '"':
                    in_str = curly_str = False
                elif curly_str and ch == CURLY_DOUBLE_CLOSE:
                    in_str = curly_str = False
                    curly_quotes += 1
                    out.append('"')
                    continue
                out.append(ch)
                continue

            if ch == '"':
                in_str = True
                out.append(ch)
            elif ch in CURLY_DOUBLE_OPEN:
                in_str = curly_str = True
                curly_quotes += 1
                out.append('"')
            elif ch in CURLY_SINGLE:
                curly_quotes += 1
                out.append("'")
            elif ch in ZERO_WIDTH or _is_stray_control(ch):
                removed += 1
            else:
                out.append(ch)

        diagnostics = []
        if removed:
            diagnostics.append(f"Removed {removed} control/zero-width character(s)")
        if curly_quotes:
            diagnostics.append(f"Converted {curly_quotes} curly quote(s) to ASCII")
        return self.result(text, "".join(out), diagnostics)
