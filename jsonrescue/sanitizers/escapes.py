# jsonrescue/sanitizers/escapes.py
"""
Escape-sequence repair inside string literals.

Only invalid sequences are rewritten; every escape JSON accepts is copied
through untouched. Text outside strings is never modified.
"""
from __future__ import annotations
import re
from typing import Dict, List

from ..core.scanner import find_string_end
from .base import Sanitizer, SanitizerResult

VALID_SIMPLE_ESCAPES = frozenset('"\\/bfnrt')
HEX4_RE = re.compile(r"[0-9a-fA-F]{4}")
CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}

# character after an odd backslash run -> replacement for the whole run
OVER_ESCAPED = {
    "'": "'",
    "0": "\\u0000",
    ",": ",",
    ")": ")",
}


def _fix_string_body(body: str, counts: Dict[str, int]) -> str:
    out: List[str] = []
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch == "\\":
            j = i
            while j < n and body[j] == "\\":
                j += 1
            run = j - i
            nxt = body[j] if j < n else ""
            if run % 2 == 0 or nxt == "":
                # paired backslashes, or a dangling one left for truncation repair
                out.append(body[i:j])
                i = j
                continue
            pairs = body[i:j - 1]
            if nxt in VALID_SIMPLE_ESCAPES:
                out.append(body[i:j + 1])
                i = j + 1
            elif nxt == "u" and HEX4_RE.match(body, j + 1):
                out.append(body[i:j + 5])
                i = j + 5
            elif nxt in OVER_ESCAPED:
                out.append(OVER_ESCAPED[nxt])
                counts["over-escaped"] += 1
                i = j + 1
            elif nxt == " ":
                out.append(pairs + " ")
                counts["invalid"] += 1
                i = j + 1
            else:
                # keep the backslash as a literal character
                out.append(pairs + "\\\\" + nxt)
                counts["invalid"] += 1
                i = j + 1
        elif ord(ch) < 0x20:
            out.append(CONTROL_ESCAPES.get(ch, f"\\u{ord(ch):04x}"))
            counts["control"] += 1
            i += 1
        else:
            out.append(ch)
            i += 1
    return "".join(out)


class FixEscapeSequences(Sanitizer):
    """
    Repair over-escaped and invalid escapes and raw control characters.

    - An odd backslash run before `'` or `0` is over-escaping: it becomes
      `'` or `\\u0000`; before `,` or `)` it is dropped
    - `\\ ` becomes a space
    - Any other invalid escape, including `\\u` without four hex digits,
      keeps its backslash as a literal (`\\\\`)
    - Raw control characters are escaped
    """

    name = "fix_escape_sequences"
    description = "Repaired invalid escape sequences inside strings"

    def apply(self, text: str) -> SanitizerResult:
        if "\\" not in text and not any(ord(c) < 0x20 for c in text):
            return self.unchanged(text)

        counts = {"over-escaped": 0, "invalid": 0, "control": 0}
        out: List[str] = []
        i = 0
        n = len(text)
        while i < n:
            q = text.find('"', i)
            if q == -1:
                out.append(text[i:])
                break
            out.append(text[i:q + 1])
            end = find_string_end(text, q)
            if end is None:
                out.append(_fix_string_body(text[q + 1:], counts))
                break
            out.append(_fix_string_body(text[q + 1:end], counts))
            out.append('"')
            i = end + 1

        diagnostics = [f"Fixed {count} {kind} sequence(s)" for kind, count in counts.items() if count]
        return self.result(text, "".join(out), diagnostics)
