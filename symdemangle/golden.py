"""Normalisation of captured log output for comparison with golden files.

Log lines carry dates, times, thread ids and line numbers that change from
run to run.  :func:`munge_line` rewrites them to fixed placeholders, so that

    I20200102 030405 logging_unittest.cc:345] RAW: vlog -1

becomes

    IYEARDATE TIME__ logging_unittest.cc:LINE] RAW: vlog -1
"""

from __future__ import annotations

__all__ = ["is_logging_prefix", "munge_line", "replace_first"]

_PREFIX_LENGTH = 9
_SEVERITY_LETTERS = "IWEF"
_DATE_PLACEHOLDER = "YEARDATE"
_WHITESPACE = " \t\n\v\f\r"


def is_logging_prefix(text: str) -> bool:
    """True if *text* is a severity letter followed by eight date characters.

    Each date character is either a digit or the matching letter of
    ``YEARDATE``, so both raw and already normalised prefixes qualify.
    """
    if len(text) != _PREFIX_LENGTH or text[0] not in _SEVERITY_LETTERS:
        return False
    return all(
        c.isdigit() or c == placeholder
        for c, placeholder in zip(text[1:], _DATE_PLACEHOLDER)
    )


def _next_token(text: str, pos: int) -> tuple[str, int]:
    """Read one whitespace-delimited word starting at *pos*."""
    length = len(text)
    while pos < length and text[pos] in _WHITESPACE:
        pos += 1
    start = pos
    while pos < length and text[pos] not in _WHITESPACE:
        pos += 1
    return text[start:pos], pos


def _rest_of_line(text: str, pos: int) -> str:
    end = text.find("\n", pos)
    return text[pos:] if end == -1 else text[pos:end]


def munge_line(line: str) -> str:
    """Replace date, time, thread id and line number of every log prefix.

    Text before the first prefix is kept except for the character just
    before it; the text after each prefix is processed in turn.  Raises
    :class:`ValueError` when a prefix is not followed by a well-formed
    ``file:line]`` field.
    """
    begin = next(
        (
            i
            for i in range(len(line) - _PREFIX_LENGTH)
            if is_logging_prefix(line[i:i + _PREFIX_LENGTH])
        ),
        None,
    )
    if begin is None:
        return line
    before = line[:begin - 1] if begin > 0 else ""

    text = line[begin:]
    logcode_date, pos = _next_token(text, 0)
    _time, pos = _next_token(text, pos)
    thread_lineinfo, pos = _next_token(text, pos)
    if not thread_lineinfo:
        raise ValueError(f"log line has no location field: {line!r}")
    if not thread_lineinfo.endswith("]"):
        location, pos = _next_token(text, pos)
        if not location:
            raise ValueError(f"log line has no location after thread id: {line!r}")
        if not location.endswith("]"):
            raise ValueError(f"log location does not end with ']': {line!r}")
        thread_lineinfo = "THREADID " + location
    index = thread_lineinfo.find(":")
    if index == -1:
        raise ValueError(f"log location has no line number: {line!r}")
    thread_lineinfo = thread_lineinfo[:index + 1] + "LINE]"

    rest = _rest_of_line(text, pos)
    return (
        before
        + logcode_date[0]
        + "YEARDATE TIME__ "
        + thread_lineinfo
        + munge_line(rest)
    )


def replace_first(text: str, old: str, new: str) -> str:
    """Replace the first occurrence of *old* in *text* with *new*."""
    return text.replace(old, new, 1)