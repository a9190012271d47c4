# jsonrescue/sanitizers/literals.py
"""
Fixes JavaScript-isms outside string literals: bare property names and the
`undefined` literal.
"""
from __future__ import annotations
import re

from ..core.scanner import map_outside_strings
from .base import Sanitizer, SanitizerResult

UNQUOTED_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_$][A-Za-z0-9_$-]*)(\s*:)")
UNDEFINED_RE = re.compile(r'(?<!")\bundefined\b(?!")')


class FixUnquotedLiterals(Sanitizer):

    name = "fix_unquoted_literals"
    description = "Quoted bare property names and replaced undefined with null"

    def apply(self, text: str) -> SanitizerResult:
        counts = {"keys": 0, "undefined": 0}

        def quote_key(m: re.Match) -> str:
            counts["keys"] += 1
            return f'{m.group(1)}"{m.group(2)}"{m.group(3)}'

        def fix_segment(seg: str) -> str:
            seg = UNQUOTED_KEY_RE.sub(quote_key, seg)
            seg, n = UNDEFINED_RE.subn("null", seg)
            counts["undefined"] += n
            return seg

        fixed = map_outside_strings(text, fix_segment)

        diagnostics = []
        if counts["keys"]:
            diagnostics.append(f"Quoted {counts['keys']} unquoted property name(s)")
        if counts["undefined"]:
            diagnostics.append(f"Replaced {counts['undefined']} undefined value(s) with null")
        return self.result(text, fixed, diagnostics)
