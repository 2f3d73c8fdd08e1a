"""Demangler for symbols in the Itanium C++ ABI mangling scheme.

The output is deliberately reduced: parameter types and template arguments
are not printed, so ``_Z1fIiEvi`` becomes ``f<>()``.  Class, function,
constructor, destructor and operator names are recovered.
"""

from __future__ import annotations

from collections.abc import Callable

from .state import ParseState, is_function_clone_suffix

__all__ = ["DemangleError", "demangle", "demangle_or_original"]

_INT_MAX = 2**31 - 1
_DIGITS = "0123456789"

_OPERATORS: tuple[tuple[str, str], ...] = (
    ("nw", "new"), ("na", "new[]"), ("dl", "delete"), ("da", "delete[]"),
    ("ps", "+"), ("ng", "-"), ("ad", "&"), ("de", "*"),
    ("co", "~"), ("pl", "+"), ("mi", "-"), ("ml", "*"),
    ("dv", "/"), ("rm", "%"), ("an", "&"), ("or", "|"),
    ("eo", "^"), ("aS", "="), ("pL", "+="), ("mI", "-="),
    ("mL", "*="), ("dV", "/="), ("rM", "%="), ("aN", "&="),
    ("oR", "|="), ("eO", "^="), ("ls", "<<"), ("rs", ">>"),
    ("lS", "<<="), ("rS", ">>="), ("eq", "=="), ("ne", "!="),
    ("lt", "<"), ("gt", ">"), ("le", "<="), ("ge", ">="),
    ("nt", "!"), ("aa", "&&"), ("oo", "||"), ("pp", "++"),
    ("mm", "--"), ("cm", ","), ("pm", "->*"), ("pt", "->"),
    ("cl", "()"), ("ix", "[]"), ("qu", "?"), ("st", "sizeof"),
    ("sz", "sizeof"),
)

# Matched on the first character only, in this order.
_BUILTIN_TYPES: tuple[tuple[str, str], ...] = (
    ("v", "void"), ("w", "wchar_t"),
    ("b", "bool"), ("c", "char"),
    ("a", "signed char"), ("h", "unsigned char"),
    ("s", "short"), ("t", "unsigned short"),
    ("i", "int"), ("j", "unsigned int"),
    ("l", "long"), ("m", "unsigned long"),
    ("x", "long long"), ("y", "unsigned long long"),
    ("n", "__int128"), ("o", "unsigned __int128"),
    ("f", "float"), ("d", "double"),
    ("e", "long double"), ("g", "__float128"),
    ("z", "ellipsis"), ("Dn", "decltype(nullptr)"),
)

_SUBSTITUTIONS: tuple[tuple[str, str], ...] = (
    ("St", ""),
    ("Sa", "allocator"),
    ("Sb", "basic_string"),
    ("Ss", "string"),
    ("Si", "istream"),
    ("So", "ostream"),
    ("Sd", "iostream"),
)

_ANON_PREFIX = "_GLOBAL__N_"


class DemangleError(ValueError):
    """Raised when a name cannot be demangled into the given space."""


def _is_lower(c: str) -> bool:
    return "a" <= c <= "z"


def _is_alpha(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z")


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


class _Parser:
    """Recursive-descent parser over a :class:`ParseState`.

    Every rule returns True on success; on failure it leaves the state as
    the grammar conventions of the original parser dictate.
    """

    def __init__(self, state: ParseState) -> None:
        self.s = state

    # -- combinators --------------------------------------------------------

    @staticmethod
    def _one_or_more(rule: Callable[[], bool]) -> bool:
        if rule():
            while rule():
                pass
            return True
        return False

    @staticmethod
    def _zero_or_more(rule: Callable[[], bool]) -> bool:
        while rule():
            pass
        return True

    def _enter_nested(self) -> bool:
        self.s.nest_level = 0
        return True

    def _leave_nested(self, previous: int) -> bool:
        self.s.nest_level = previous
        return True

    def _disable_append(self) -> bool:
        self.s.append = False
        return True

    def _restore_append(self, previous: bool) -> bool:
        self.s.append = previous
        return True

    # -- grammar ------------------------------------------------------------

    def top_level(self) -> bool:
        s = self.s
        if not self.mangled_name():
            return False
        if s.peek() != "\0":
            if is_function_clone_suffix(s.remaining):
                return True
            if s.peek() == "@":
                s.maybe_append(s.remaining)
                return True
            return self.name()
        return True

    def mangled_name(self) -> bool:
        return self.s.parse_two_char("_Z") and self.encoding()

    def encoding(self) -> bool:
        s = self.s
        copy = s.snapshot()
        if self.name() and self.bare_function_type():
            return True
        s.restore(copy)
        return self.name() or self.special_name()

    def name(self) -> bool:
        s = self.s
        if self.nested_name() or self.local_name():
            return True
        copy = s.snapshot()
        if self.unscoped_template_name() and self.template_args():
            return True
        s.restore(copy)
        return self.unscoped_name()

    def unscoped_name(self) -> bool:
        s = self.s
        if self.unqualified_name():
            return True
        copy = s.snapshot()
        if (
            s.parse_two_char("St")
            and s.maybe_append("std::")
            and self.unqualified_name()
        ):
            return True
        s.restore(copy)
        return False

    def unscoped_template_name(self) -> bool:
        return self.unscoped_name() or self.substitution()

    def nested_name(self) -> bool:
        s = self.s
        copy = s.snapshot()
        if (
            s.parse_one_char("N")
            and self._enter_nested()
            and (self.cv_qualifiers() or True)
            and self.prefix()
            and self._leave_nested(copy.nest_level)
            and s.parse_one_char("E")
        ):
            return True
        s.restore(copy)
        return False

    def prefix(self) -> bool:
        s = self.s
        has_something = False
        while True:
            s.maybe_append_separator()
            if self.template_param() or self.substitution() or self.unscoped_name():
                has_something = True
                s.maybe_increase_nest_level()
                continue
            s.maybe_cancel_last_separator()
            if has_something and self.template_args():
                return self.prefix()
            break
        return True

    def unqualified_name(self) -> bool:
        return (
            self.operator_name()
            or self.ctor_dtor_name()
            or (self.source_name() and (self.abi_tags() or True))
            or (self.local_source_name() and (self.abi_tags() or True))
        )

    def source_name(self) -> bool:
        s = self.s
        copy = s.snapshot()
        length = self.number()
        if length is not None and self.identifier(length):
            return True
        s.restore(copy)
        return False

    def local_source_name(self) -> bool:
        s = self.s
        copy = s.snapshot()
        if (
            s.parse_one_char("L")
            and self.source_name()
            and (self.discriminator() or True)
        ):
            return True
        s.restore(copy)
        return False

    def number(self) -> int | None:
        """Parse ``[n] <digits>``; the value on success, None on failure."""
        s = self.s
        sign = -1 if s.parse_one_char("n") else 1
        start = s.pos
        end = start
        value = 0
        while _is_digit(s.peek(end - start)):
            if value > _INT_MAX // 10:
                return None
            digit = ord(s.peek(end - start)) - ord("0")
            shifted = value * 10
            if digit > _INT_MAX - shifted:
                return None
            value = shifted + digit
            end += 1
        if end == start:
            return None
        s.pos = end
        return value * sign

    def _number_ok(self) -> bool:
        return self.number() is not None

    def _scan(self, accept: Callable[[str], bool]) -> bool:
        s = self.s
        count = 0
        while s.peek(count) != "\0" and accept(s.peek(count)):
            count += 1
        if count:
            s.pos += count
            return True
        return False

    def float_number(self) -> bool:
        return self._scan(lambda c: _is_digit(c) or "a" <= c <= "f")

    def seq_id(self) -> bool:
        return self._scan(lambda c: _is_digit(c) or "A" <= c <= "Z")

    def identifier(self, length: int) -> bool:
        s = self.s
        if length < 0 or not s.at_least_remaining(length):
            return False
        if length > len(_ANON_PREFIX) and s.remaining.startswith(_ANON_PREFIX):
            s.maybe_append("(anonymous namespace)")
        else:
            s.maybe_append(s.remaining[:length])
        s.pos += length
        return True

    def abi_tags(self) -> bool:
        s = self.s
        copy = s.snapshot()
        self._disable_append()
        if self._one_or_more(self.abi_tag):
            self._restore_append(copy.append)
            return True
        s.restore(copy)
        return False

    def abi_tag(self) -> bool:
        return self.s.parse_one_char("B") and self.source_name()

    def operator_name(self) -> bool:
        s = self.s
        if not s.at_least_remaining(2):
            return False
        copy = s.snapshot()
        if (
            s.parse_two_char("cv")
            and s.maybe_append("operator ")
            and self._enter_nested()
            and self.type()
            and self._leave_nested(copy.nest_level)
        ):
            return True
        s.restore(copy)

        if (
            s.parse_one_char("v")
            and s.parse_char_class(_DIGITS)
            and self.source_name()
        ):
            return True
        s.restore(copy)

        first, second = s.peek(), s.peek(1)
        if not (_is_lower(first) and _is_alpha(second)):
            return False
        for abbrev, real_name in _OPERATORS:
            if first == abbrev[0] and second == abbrev[1]:
                s.maybe_append("operator")
                if _is_lower(real_name[0]):
                    s.maybe_append(" ")
                s.maybe_append(real_name)
                s.pos += 2
                return True
        return False

    def special_name(self) -> bool:
        s = self.s
        copy = s.snapshot()
        if s.parse_one_char("T") and s.parse_char_class("VTIS") and self.type():
            return True
        s.restore(copy)

        if (
            s.parse_two_char("Tc")
            and self.call_offset()
            and self.call_offset()
            and self.encoding()
        ):
            return True
        s.restore(copy)

        if s.parse_two_char("GV") and self.name():
            return True
        s.restore(copy)

        if s.parse_one_char("T") and self.call_offset() and self.encoding():
            return True
        s.restore(copy)

        if (
            s.parse_two_char("TC")
            and self.type()
            and self._number_ok()
            and s.parse_one_char("_")
            and self._disable_append()
            and self.type()
        ):
            self._restore_append(copy.append)
            return True
        s.restore(copy)

        if s.parse_one_char("T") and s.parse_char_class("FJ") and self.type():
            return True
        s.restore(copy)

        if s.parse_two_char("GR") and self.name():
            return True
        s.restore(copy)

        if s.parse_two_char("GA") and self.encoding():
            return True
        s.restore(copy)

        if (
            s.parse_one_char("T")
            and s.parse_char_class("hv")
            and self.call_offset()
            and self.encoding()
        ):
            return True
        s.restore(copy)
        return False

    def call_offset(self) -> bool:
        s = self.s
        copy = s.snapshot()
        if s.parse_one_char("h") and self._number_ok() and s.parse_one_char("_"):
            return True
        s.restore(copy)
        if s.parse_one_char("v") and self.v_offset() and s.parse_one_char("_"):
            return True
        s.restore(copy)
        return False

    def v_offset(self) -> bool:
        s = self.s
        copy = s.snapshot()
        if self._number_ok() and s.parse_one_char("_") and self._number_ok():
            return True
        s.restore(copy)
        return False

    def ctor_dtor_name(self) -> bool:
        s = self.s
        copy = s.snapshot()
        if s.parse_one_char("C") and s.parse_char_class("123"):
            previous = s.prev_name_text
            if previous:
                s.maybe_append(previous)
            return True
        s.restore(copy)

        if s.parse_one_char("D") and s.parse_char_class("012"):
            previous = s.prev_name_text
            s.maybe_append("~")
            if previous:
                s.maybe_append(previous)
            return True
        s.restore(copy)
        return False

    def type(self) -> bool:
        s = self.s
        copy = s.snapshot()
        if self.cv_qualifiers() and self.type():
            return True
        s.restore(copy)

        if s.parse_char_class("OPRCG") and self.type():
            return True
        s.restore(copy)

        if s.parse_two_char("Dp") and self.type():
            return True
        s.restore(copy)

        if (
            s.parse_one_char("D")
            and s.parse_char_class("tT")
            and self.expression()
            and s.parse_one_char("E")
        ):
            return True
        s.restore(copy)

        if s.parse_one_char("U") and self.source_name() and self.type():
            return True
        s.restore(copy)

        if (
            self.builtin_type()
            or self.function_type()
            or self.name()
            or self.array_type()
            or self.pointer_to_member_type()
            or self.substitution()
        ):
            return True

        if self.template_template_param() and self.template_args():
            return True
        s.restore(copy)

        return self.template_param()

    def cv_qualifiers(self) -> bool:
        s = self.s
        count = 0
        for qualifier in "rVK":
            count += s.parse_one_char(qualifier)
        return count > 0

    def builtin_type(self) -> bool:
        s = self.s
        for abbrev, real_name in _BUILTIN_TYPES:
            if s.peek() == abbrev[0]:
                s.maybe_append(real_name)
                s.pos += 1
                return True
        copy = s.snapshot()
        if s.parse_one_char("u") and self.source_name():
            return True
        s.restore(copy)
        return False

    def function_type(self) -> bool:
        s = self.s
        copy = s.snapshot()
        if (
            s.parse_one_char("F")
            and (s.parse_one_char("Y") or True)
            and self.bare_function_type()
            and s.parse_one_char("E")
        ):
            return True
        s.restore(copy)
        return False

    def bare_function_type(self) -> bool:
        s = self.s
        copy = s.snapshot()
        self._disable_append()
        if self._one_or_more(self.type):
            self._restore_append(copy.append)
            s.maybe_append("()")
            return True
        s.restore(copy)
        return False

    def array_type(self) -> bool:
        s = self.s
        copy = s.snapshot()
        if (
            s.parse_one_char("A")
            and self._number_ok()
            and s.parse_one_char("_")
            and self.type()
        ):
            return True
        s.restore(copy)

        if (
            s.parse_one_char("A")
            and (self.expression() or True)
            and s.parse_one_char("_")
            and self.type()
        ):
            return True
        s.restore(copy)
        return False

    def pointer_to_member_type(self) -> bool:
        s = self.s
        copy = s.snapshot()
        if s.parse_one_char("M") and self.type() and self.type():
            return True
        s.restore(copy)
        return False

    def template_param(self) -> bool:
        s = self.s
        if s.parse_two_char("T_"):
            s.maybe_append("?")
            return True
        copy = s.snapshot()
        if s.parse_one_char("T") and self._number_ok() and s.parse_one_char("_"):
            s.maybe_append("?")
            return True
        s.restore(copy)
        return False

    def template_template_param(self) -> bool:
        return self.template_param() or self.substitution()

    def template_args(self) -> bool:
        s = self.s
        copy = s.snapshot()
        self._disable_append()
        if (
            s.parse_one_char("I")
            and self._one_or_more(self.template_arg)
            and s.parse_one_char("E")
        ):
            self._restore_append(copy.append)
            s.maybe_append("<>")
            return True
        s.restore(copy)
        return False

    def template_arg(self) -> bool:
        s = self.s
        if s.arg_level > 6:
            return False
        s.arg_level += 1

        copy = s.snapshot()
        if (
            (s.parse_one_char("I") or s.parse_one_char("J"))
            and self._zero_or_more(self.template_arg)
            and s.parse_one_char("E")
        ):
            s.arg_level -= 1
            return True
        s.restore(copy)

        if self.type() or self.expr_primary():
            s.arg_level -= 1
            return True
        s.restore(copy)

        if s.parse_one_char("X") and self.expression() and s.parse_one_char("E"):
            s.arg_level -= 1
            return True
        s.restore(copy)
        return False

    def expression(self) -> bool:
        s = self.s
        if self.template_param() or self.expr_primary():
            return True

        if s.expr_level > 5:
            return False
        s.expr_level += 1

        copy = s.snapshot()
        if (
            self.operator_name()
            and self.expression()
            and self.expression()
            and self.expression()
        ):
            s.expr_level -= 1
            return True
        s.restore(copy)

        if self.operator_name() and self.expression() and self.expression():
            s.expr_level -= 1
            return True
        s.restore(copy)

        if self.operator_name() and self.expression():
            s.expr_level -= 1
            return True
        s.restore(copy)

        if s.parse_two_char("st") and self.type():
            # The level is intentionally left raised on this branch.
            return True
        s.restore(copy)

        if (
            s.parse_two_char("sr")
            and self.type()
            and self.unqualified_name()
            and self.template_args()
        ):
            s.expr_level -= 1
            return True
        s.restore(copy)

        if s.parse_two_char("sr") and self.type() and self.unqualified_name():
            s.expr_level -= 1
            return True
        s.restore(copy)

        if s.parse_two_char("sp") and self.type():
            s.expr_level -= 1
            return True
        s.restore(copy)
        return False

    def expr_primary(self) -> bool:
        s = self.s
        copy = s.snapshot()
        if (
            s.parse_one_char("L")
            and self.type()
            and self._number_ok()
            and s.parse_one_char("E")
        ):
            return True
        s.restore(copy)

        if (
            s.parse_one_char("L")
            and self.type()
            and self.float_number()
            and s.parse_one_char("E")
        ):
            return True
        s.restore(copy)

        if s.parse_one_char("L") and self.mangled_name() and s.parse_one_char("E"):
            return True
        s.restore(copy)

        if s.parse_two_char("LZ") and self.encoding() and s.parse_one_char("E"):
            return True
        s.restore(copy)
        return False

    def local_name(self) -> bool:
        s = self.s
        if s.local_level > 5:
            return False
        s.local_level += 1

        copy = s.snapshot()
        if (
            s.parse_one_char("Z")
            and self.encoding()
            and s.parse_one_char("E")
            and s.maybe_append("::")
            and self.name()
            and (self.discriminator() or True)
        ):
            s.local_level -= 1
            return True
        s.restore(copy)

        if (
            s.parse_one_char("Z")
            and self.encoding()
            and s.parse_two_char("Es")
            and (self.discriminator() or True)
        ):
            s.local_level -= 1
            return True
        s.restore(copy)
        return False

    def discriminator(self) -> bool:
        s = self.s
        copy = s.snapshot()
        if s.parse_one_char("_") and self._number_ok():
            return True
        s.restore(copy)
        return False

    def substitution(self) -> bool:
        s = self.s
        if s.parse_two_char("S_"):
            s.maybe_append("?")
            return True

        copy = s.snapshot()
        if s.parse_one_char("S") and self.seq_id() and s.parse_one_char("_"):
            s.maybe_append("?")
            return True
        s.restore(copy)

        if s.parse_one_char("S"):
            for abbrev, real_name in _SUBSTITUTIONS:
                if s.peek() == abbrev[1]:
                    s.maybe_append("std")
                    if real_name:
                        s.maybe_append("::")
                        s.maybe_append(real_name)
                    s.pos += 1
                    return True
        s.restore(copy)
        return False


def demangle(mangled: str, out_size: int | None = 4096) -> str:
    """Demangle *mangled* into at most ``out_size - 1`` characters.

    ``out_size=None`` stands for having no output space at all.  Raises
    :class:`DemangleError` if the name is not understood or the result
    does not fit.
    """
    state = ParseState(mangled, out_size)
    try:
        parsed = _Parser(state).top_level()
    except RecursionError as exc:
        raise DemangleError(f"name nests too deeply: {mangled!r}") from exc
    if not parsed:
        raise DemangleError(f"cannot demangle {mangled!r}")
    if state.overflowed:
        raise DemangleError(f"demangled form of {mangled!r} exceeds {out_size}")
    return state.output()


def demangle_or_original(mangled: str) -> str:
    """Demangle *mangled*, or return it unchanged if that fails."""
    try:
        return demangle(mangled, 4096)
    except DemangleError:
        return mangled