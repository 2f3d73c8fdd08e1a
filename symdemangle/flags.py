"""Runtime settings, each overridable from a ``GLOG_<name>`` environment variable.

Values given in the environment follow C conventions: booleans are true
when the value starts with one of ``tTyY1`` (or is empty), integers are
read like ``strtol``/``strtoul`` with a 64-bit ``long`` and then narrowed
to 32 bits.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, Callable

__all__ = [
    "Flags",
    "default_log_dir",
    "env_to_bool",
    "env_to_int",
    "env_to_string",
    "env_to_uint",
]

_TRUE_INITIALS = "tTyY1"
_C_NUMBER = re.compile(r"[ \t\n\v\f\r]*([+-]?)([0-9]*)")
_LONG_MIN = -(2**63)
_LONG_MAX = 2**63 - 1
_ULONG_MAX = 2**64 - 1

GLOG_ERROR = 2


def _environ(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def env_to_bool(environ: Mapping[str, str] | None, name: str, default: bool) -> bool:
    """Read a boolean; an empty value or one starting with t, y or 1 is true."""
    value = _environ(environ).get(name)
    if value is None:
        return default
    return value == "" or value[0] in _TRUE_INITIALS


def _leading_number(text: str) -> tuple[bool, int]:
    match = _C_NUMBER.match(text)
    assert match is not None
    sign, digits = match.groups()
    return sign == "-", int(digits) if digits else 0


def env_to_int(environ: Mapping[str, str] | None, name: str, default: int) -> int:
    """Read a signed 32-bit integer the way ``strtol`` then a cast to int would."""
    value = _environ(environ).get(name)
    if value is None:
        return default
    negative, magnitude = _leading_number(value)
    number = -magnitude if negative else magnitude
    number = min(max(number, _LONG_MIN), _LONG_MAX)
    return ((number + 2**31) % 2**32) - 2**31


def env_to_uint(environ: Mapping[str, str] | None, name: str, default: int) -> int:
    """Read an unsigned 32-bit integer the way ``strtoul`` then a cast would."""
    value = _environ(environ).get(name)
    if value is None:
        return default
    negative, magnitude = _leading_number(value)
    if magnitude > _ULONG_MAX:
        number = _ULONG_MAX
    elif negative:
        number = (-magnitude) % (_ULONG_MAX + 1)
    else:
        number = magnitude
    return number % 2**32


def env_to_string(environ: Mapping[str, str] | None, name: str, default: str) -> str:
    """Read a string; a variable that is set wins even when empty."""
    value = _environ(environ).get(name)
    return default if value is None else value


def default_log_dir(environ: Mapping[str, str] | None = None) -> str:
    """First non-empty of ``GOOGLE_LOG_DIR`` and ``TEST_TMPDIR``, else ``""``."""
    env = _environ(environ)
    for name in ("GOOGLE_LOG_DIR", "TEST_TMPDIR"):
        value = env.get(name)
        if value:
            return value
    return ""


_READERS: dict[str, Callable[[Mapping[str, str], str, Any], Any]] = {
    "bool": env_to_bool,
    "int": env_to_int,
    "uint": env_to_uint,
    "string": env_to_string,
}


def _flag(default: Any, kind: str, help_text: str) -> Any:
    return field(default=default, metadata={"kind": kind, "help": help_text})


@dataclass
class Flags:
    """All logging settings with their built-in defaults."""

    timestamp_in_logfile_name: bool = _flag(
        True, "bool", "put a timestamp at the end of the log file name")
    logtostderr: bool = _flag(
        False, "bool", "log messages go to stderr instead of logfiles")
    alsologtostderr: bool = _flag(
        False, "bool", "log messages go to stderr in addition to logfiles")
    colorlogtostderr: bool = _flag(
        False, "bool", "color messages logged to stderr (if supported by terminal)")
    colorlogtostdout: bool = _flag(
        False, "bool", "color messages logged to stdout (if supported by terminal)")
    logtostdout: bool = _flag(
        False, "bool", "log messages go to stdout instead of logfiles")
    drop_log_memory: bool = _flag(
        True, "bool", "Drop in-memory buffers of log contents.")
    stderrthreshold: int = _flag(
        GLOG_ERROR, "int",
        "log messages at or above this level are copied to stderr in "
        "addition to logfiles.")
    alsologtoemail: str = _flag(
        "", "string",
        "log messages go to these email addresses in addition to logfiles")
    log_file_header: bool = _flag(
        True, "bool", "Write the file header at the start of each log file")
    log_prefix: bool = _flag(
        True, "bool", "Prepend the log prefix to the start of each log line")
    log_year_in_prefix: bool = _flag(
        True, "bool", "Include the year in the log prefix")
    minloglevel: int = _flag(
        0, "int",
        "Messages logged at a lower level than this don't actually get "
        "logged anywhere")
    logbuflevel: int = _flag(
        0, "int", "Buffer log messages logged at this level or lower")
    logbufsecs: int = _flag(
        30, "int", "Buffer log messages for at most this many seconds")
    logcleansecs: int = _flag(
        60 * 5, "int", "Clean overdue logs every this many seconds")
    logemaillevel: int = _flag(
        999, "int", "Email log messages logged at this level or higher")
    logmailer: str = _flag("", "string", "Mailer used to send logging email")
    logfile_mode: int = _flag(0o664, "int", "Log file mode/permissions.")
    log_dir: str = _flag(
        "", "string",
        "If specified, logfiles are written into this directory instead "
        "of the default logging directory.")
    log_link: str = _flag(
        "", "string", "Put additional links to the log files in this directory")
    max_log_size: int = _flag(
        1800, "uint",
        "approx. maximum log file size (in MB). A value of 0 will be "
        "silently overridden to 1.")
    stop_logging_if_full_disk: bool = _flag(
        False, "bool", "Stop attempting to log to disk if the disk is full.")
    log_backtrace_at: str = _flag(
        "", "string", "Emit a backtrace when logging at file:linenum.")
    log_utc_time: bool = _flag(False, "bool", "Use UTC time for logging.")
    v: int = _flag(
        0, "int",
        "Show all VLOG(m) messages for m <= this. Overridable by --vmodule.")
    vmodule: str = _flag(
        "", "string",
        "per-module verbose level: comma-separated <module glob>=<log level>")
    symbolize_stacktrace: bool = _flag(
        True, "bool", "Symbolize the stack trace in the tombstone")

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> "Flags":
        """Build the settings, reading ``GLOG_<name>`` for each flag."""
        env = _environ(environ)
        base: dict[str, Any] = {f.name: f.default for f in fields(cls)}
        base["timestamp_in_logfile_name"] = env_to_bool(
            env, "GOOGLE_TIMESTAMP_IN_LOGFILE_NAME", True)
        base["logtostderr"] = env_to_bool(env, "GOOGLE_LOGTOSTDERR", False)
        base["alsologtostderr"] = env_to_bool(env, "GOOGLE_ALSOLOGTOSTDERR", False)
        base["logtostdout"] = env_to_bool(env, "GOOGLE_LOGTOSTDOUT", False)
        base["log_dir"] = default_log_dir(env)
        values = {
            f.name: _READERS[f.metadata["kind"]](env, "GLOG_" + f.name, base[f.name])
            for f in fields(cls)
        }
        return cls(**values)