# jsonrescue/sanitizers/commas.py
"""
Comma repair: inserts separators between adjacent members and drops
separators left before a closing delimiter.
"""
from __future__ import annotations
import re

from ..core.scanner import find_string_end, map_outside_strings
from .base import Sanitizer, SanitizerResult

EXPECT_KEY = "expect_key"
AFTER_KEY = "after_key"
EXPECT_VALUE = "expect_value"
AFTER_VALUE = "after_value"
IN_EXPRESSION = "in_expression"

BARE_TOKEN_RE = re.compile(r"[A-Za-z0-9_.+\-$]+")
NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?$")
KEYWORDS = frozenset({"true", "false", "null"})
TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


def _is_terminal_token(token: str) -> bool:
    return token in KEYWORDS or bool(NUMBER_RE.match(token))


def _followed_by_colon(text: str, pos: int) -> bool:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos < len(text) and text[pos] == ":"


class AddMissingCommas(Sanitizer):
    """
    Insert a comma between a completed value and the next member.

    Tracks, per open container, whether the last member is complete. A new
    array element, or a new `"key":` in an object, that follows a complete
    value across whitespace gets a comma right after that value.
    """

    name = "add_missing_commas"
    description = "Added missing commas between members"

    def apply(self, text: str) -> SanitizerResult:
        out = []
        frames = []  # [kind, state]
        value_end = 0
        inserted = 0
        i = 0
        n = len(text)

        def gap_is_blank() -> bool:
            gap = "".join(out[value_end:])
            return bool(gap) and gap.isspace()

        def insert_comma() -> None:
            nonlocal inserted
            out.insert(value_end, ",")
            inserted += 1

        def value_done() -> None:
            nonlocal value_end
            if frames:
                frames[-1][1] = AFTER_VALUE
            value_end = len(out)

        while i < n:
            ch = text[i]
            frame = frames[-1] if frames else None

            if ch == '"':
                end = find_string_end(text, i)
                if end is None:
                    out.append(text[i:])
                    break
                is_key = frame is not None and frame[0] == "{" and frame[1] in (EXPECT_KEY, AFTER_VALUE)
                if frame is not None and frame[1] == AFTER_VALUE and gap_is_blank():
                    if frame[0] == "[" or _followed_by_colon(text, end + 1):
                        insert_comma()
                out.append(text[i:end + 1])
                i = end + 1
                if is_key:
                    frame[1] = AFTER_KEY
                else:
                    value_done()
                continue

            if ch in "{[":
                if frame is not None and frame[0] == "[" and frame[1] == AFTER_VALUE and gap_is_blank():
                    insert_comma()
                out.append(ch)
                frames.append([ch, EXPECT_KEY if ch == "{" else EXPECT_VALUE])
            elif ch in "}]":
                out.append(ch)
                if frames:
                    frames.pop()
                value_done()
            elif ch == ":":
                out.append(ch)
                if frame is not None:
                    frame[1] = EXPECT_VALUE
            elif ch == ",":
                out.append(ch)
                if frame is not None:
                    frame[1] = EXPECT_KEY if frame[0] == "{" else EXPECT_VALUE
            elif BARE_TOKEN_RE.match(ch):
                token = BARE_TOKEN_RE.match(text, i).group(0)
                if token.startswith("+"):
                    # concatenation operator, possibly glued to an identifier
                    out.append(token)
                    if frame is not None:
                        frame[1] = EXPECT_VALUE if token == "+" else IN_EXPRESSION
                    i += len(token)
                    continue
                if frame is not None and frame[0] == "[" and frame[1] == AFTER_VALUE and gap_is_blank():
                    insert_comma()
                out.append(token)
                i += len(token)
                if frame is None:
                    continue
                if frame[0] == "{" and frame[1] in (EXPECT_KEY, AFTER_VALUE):
                    frame[1] = AFTER_KEY
                elif _is_terminal_token(token):
                    value_done()
                else:
                    frame[1] = IN_EXPRESSION
                continue
            else:
                out.append(ch)
            i += 1

        if not inserted:
            return self.unchanged(text)
        return self.result(text, "".join(out), [f"Inserted {inserted} missing comma(s)"])


class RemoveTrailingCommas(Sanitizer):

    name = "remove_trailing_commas"
    description = "Removed trailing commas before closing delimiters"

    def apply(self, text: str) -> SanitizerResult:
        removed = 0

        def strip(seg: str) -> str:
            nonlocal removed
            seg, count = TRAILING_COMMA_RE.subn(r"\1", seg)
            removed += count
            return seg

        fixed = map_outside_strings(text, strip)
        return self.result(text, fixed, [f"Removed {removed} trailing comma(s)"])
