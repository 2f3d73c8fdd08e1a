"""Cursor and output state shared by the demangling parser."""

from __future__ import annotations

import re
from dataclasses import dataclass
from itertools import takewhile

_NUL = "\0"
_CLONE_SUFFIX = re.compile(r"(?:\.[A-Za-z]+\.[0-9]+)*")


def _is_alpha(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z")


def is_function_clone_suffix(text: str) -> bool:
    """Return True if *text* is a sequence of ``.<alpha>+.<digit>+`` groups.

    Such suffixes mark functions cloned by the compiler during optimisation
    (``.clone.3``, ``.isra.2.constprop.18``); the empty string qualifies.
    """
    return _CLONE_SUFFIX.fullmatch(text) is not None


@dataclass(frozen=True)
class _Snapshot:
    pos: int
    out_cur: int
    prev_name: int | None
    prev_name_length: int
    nest_level: int
    append: bool
    overflowed: bool
    local_level: int
    expr_level: int
    arg_level: int


class ParseState:
    """Position in a mangled name plus a bounded output area.

    The output area holds at most ``out_size - 1`` characters; anything past
    that sets :attr:`overflowed`.  With ``out_size=None`` there is no output
    area at all and every append overflows.  Restoring a snapshot rewinds the
    write position without clearing what was written after it, so the text
    seen by :meth:`output` always ends at the last terminator written.
    """

    def __init__(self, mangled: str, out_size: int | None) -> None:
        self.mangled = mangled.split(_NUL, 1)[0]
        self.pos = 0
        self.buffer: list[str] | None = (
            None if out_size is None else [_NUL] * max(out_size, 0)
        )
        self.out_cur = 0
        self.prev_name: int | None = None
        self.prev_name_length = -1
        self.nest_level = -1
        self.append = True
        self.overflowed = False
        self.local_level = 0
        self.expr_level = 0
        self.arg_level = 0

    # -- reading the mangled name -------------------------------------------

    def peek(self, offset: int = 0) -> str:
        """Character at the cursor plus *offset*, or NUL past the end."""
        index = self.pos + offset
        if 0 <= index < len(self.mangled):
            return self.mangled[index]
        return _NUL

    @property
    def remaining(self) -> str:
        """The unparsed rest of the mangled name."""
        return self.mangled[self.pos:]

    def at_least_remaining(self, count: int) -> bool:
        """True if at least *count* characters remain after the cursor."""
        return self.pos + count <= len(self.mangled)

    def parse_one_char(self, token: str) -> bool:
        """Consume *token* if it is the next character."""
        if self.peek() == token:
            self.pos += 1
            return True
        return False

    def parse_two_char(self, token: str) -> bool:
        """Consume the two-character *token* if it comes next."""
        if self.peek() == token[0] and self.peek(1) == token[1]:
            self.pos += 2
            return True
        return False

    def parse_char_class(self, chars: str) -> bool:
        """Consume the next character if it is one of *chars*."""
        c = self.peek()
        if c != _NUL and c in chars:
            self.pos += 1
            return True
        return False

    # -- writing output -----------------------------------------------------

    def append_text(self, text: str) -> None:
        """Write *text* at the output cursor, flagging overflow when full."""
        if self.buffer is None:
            self.overflowed = True
            return
        limit = len(self.buffer)
        for c in text:
            if self.out_cur + 1 < limit:
                self.buffer[self.out_cur] = c
                self.out_cur += 1
            else:
                self.overflowed = True
                break
        if not self.overflowed and self.out_cur < limit:
            self.buffer[self.out_cur] = _NUL

    def maybe_append(self, text: str) -> bool:
        """Append *text* when appending is enabled; always returns True.

        A space is inserted between two ``<`` and an identifier-like text is
        remembered as the previous name, used for constructors and destructors.
        """
        if self.append and text:
            if (
                text[0] == "<"
                and self.out_cur > 0
                and self.buffer is not None
                and self.buffer[self.out_cur - 1] == "<"
            ):
                self.append_text(" ")
            if _is_alpha(text[0]) or text[0] == "_":
                self.prev_name = self.out_cur
                self.prev_name_length = len(text)
            self.append_text(text)
        return True

    @property
    def prev_name_text(self) -> str | None:
        """Text of the last identifier written, read back from the output."""
        if self.prev_name is None or self.prev_name_length < 0:
            return None
        buffer = self.buffer or []
        chars = (
            buffer[i] if i < len(buffer) else _NUL
            for i in range(self.prev_name, self.prev_name + self.prev_name_length)
        )
        return "".join(takewhile(lambda c: c != _NUL, chars))

    def maybe_append_separator(self) -> None:
        """Append ``::`` inside a nested name past its first component."""
        if self.nest_level >= 1:
            self.maybe_append("::")

    def maybe_cancel_last_separator(self) -> None:
        """Remove the ``::`` just written inside a nested name."""
        if (
            self.nest_level >= 1
            and self.append
            and self.buffer is not None
            and self.out_cur >= 2
        ):
            self.out_cur -= 2
            self.buffer[self.out_cur] = _NUL

    def maybe_increase_nest_level(self) -> None:
        """Count one more component when inside a nested name."""
        if self.nest_level > -1:
            self.nest_level += 1

    # -- backtracking -------------------------------------------------------

    def snapshot(self) -> _Snapshot:
        """Capture everything needed to backtrack to this point."""
        return _Snapshot(
            pos=self.pos,
            out_cur=self.out_cur,
            prev_name=self.prev_name,
            prev_name_length=self.prev_name_length,
            nest_level=self.nest_level,
            append=self.append,
            overflowed=self.overflowed,
            local_level=self.local_level,
            expr_level=self.expr_level,
            arg_level=self.arg_level,
        )

    def restore(self, snapshot: _Snapshot) -> None:
        """Return to a state captured by :meth:`snapshot`."""
        self.pos = snapshot.pos
        self.out_cur = snapshot.out_cur
        self.prev_name = snapshot.prev_name
        self.prev_name_length = snapshot.prev_name_length
        self.nest_level = snapshot.nest_level
        self.append = snapshot.append
        self.overflowed = snapshot.overflowed
        self.local_level = snapshot.local_level
        self.expr_level = snapshot.expr_level
        self.arg_level = snapshot.arg_level

    def output(self) -> str:
        """The output text up to its terminator."""
        if self.buffer is None:
            return ""
        return "".join(takewhile(lambda c: c != _NUL, self.buffer))