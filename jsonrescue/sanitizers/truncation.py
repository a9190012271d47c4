# jsonrescue/sanitizers/truncation.py
"""
Completes JSON that was cut off mid-document.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import List, Optional

from ..core.extractor import PAIRS
from ..core.scanner import find_string_end
from .base import Sanitizer, SanitizerResult

EXPECT_KEY = "expect_key"
AFTER_KEY = "after_key"
EXPECT_VALUE = "expect_value"
AFTER_VALUE = "after_value"
IN_EXPRESSION = "in_expression"

BARE_TOKEN_RE = re.compile(r"[A-Za-z0-9_.+\-$]+")
COMPLETE_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?$")
KEYWORDS = frozenset({"true", "false", "null"})
DANGLING_ESCAPE_RE = re.compile(r"(?<!\\)(?:\\\\)*(\\(?:u[0-9a-fA-F]{0,3})?)$")


@dataclass
class _Frame:
    kind: str
    state: str
    safe_end: int  # text index just past the last complete member

    def member_done(self, end: int) -> None:
        self.state = AFTER_VALUE
        self.safe_end = end


def _is_complete_literal(token: str) -> bool:
    return token in KEYWORDS or bool(COMPLETE_NUMBER_RE.match(token))


def _close_string_body(body: str) -> str:
    m = DANGLING_ESCAPE_RE.search(body)
    if m:
        body = body[:m.start(1)]
    return body


class CompleteTruncatedStructures(Sanitizer):
    """
    Close whatever the generator left open.

    The incomplete trailing member of the innermost open structure (a
    dangling key, colon, comma, partial literal or partial number) is
    dropped, an open string value is closed, and the missing closers are
    appended innermost first.
    """

    name = "complete_truncated_structures"
    description = "Completed truncated JSON structure"

    def apply(self, text: str) -> SanitizerResult:
        stack: List[_Frame] = []
        open_string: Optional[int] = None
        open_string_is_key = False
        i = 0
        n = len(text)

        while i < n:
            ch = text[i]
            frame = stack[-1] if stack else None

            if ch == '"':
                end = find_string_end(text, i)
                is_key = frame is not None and frame.kind == "{" and frame.state == EXPECT_KEY
                if end is None:
                    open_string = i
                    open_string_is_key = is_key
                    break
                if is_key:
                    frame.state = AFTER_KEY
                elif frame is not None:
                    frame.member_done(end + 1)
                i = end + 1
                continue

            if ch in PAIRS:
                stack.append(_Frame(ch, EXPECT_KEY if ch == "{" else EXPECT_VALUE, i + 1))
            elif ch in "}]":
                if stack:
                    stack.pop()
                    if stack:
                        stack[-1].member_done(i + 1)
            elif ch == ":":
                if frame is not None:
                    frame.state = EXPECT_VALUE
            elif ch == ",":
                if frame is not None:
                    frame.state = EXPECT_KEY if frame.kind == "{" else EXPECT_VALUE
            elif BARE_TOKEN_RE.match(ch):
                token = BARE_TOKEN_RE.match(text, i).group(0)
                end = i + len(token)
                if frame is not None:
                    if frame.kind == "{" and frame.state == EXPECT_KEY:
                        frame.state = AFTER_KEY
                    elif _is_complete_literal(token):
                        frame.member_done(end)
                    else:
                        frame.state = IN_EXPRESSION
                i = end
                continue
            i += 1

        if not stack and open_string is None:
            return self.unchanged(text)

        diagnostics = []
        if open_string is not None and not open_string_is_key:
            body = _close_string_body(text[open_string + 1:])
            completed = text[:open_string + 1] + body + '"'
            diagnostics.append("Closed unterminated string")
        elif stack and (open_string is not None or stack[-1].state != AFTER_VALUE):
            completed = text[:stack[-1].safe_end]
            if completed.rstrip() != text.rstrip():
                diagnostics.append(f"Dropped incomplete trailing member {text[len(completed):].strip()[:40]!r}")
        else:
            completed = text

        completed = completed.rstrip()
        closers = "".join(PAIRS[frame.kind] for frame in reversed(stack))
        if closers:
            diagnostics.append(f"Appended closing delimiters {closers!r}")
        return self.result(text, completed + closers, diagnostics)
