import pytest

from symdemangle.state import ParseState, is_function_clone_suffix


def test_peek_past_end_is_nul():
    state = ParseState("ab", 16)
    assert state.peek() == "a"
    assert state.peek(1) == "b"
    assert state.peek(2) == "\0"


def test_mangled_is_cut_at_nul():
    state = ParseState("ab\0cd", 16)
    assert state.mangled == "ab"
    assert not state.at_least_remaining(3)
    assert state.at_least_remaining(2)


def test_at_least_remaining_after_advance():
    state = ParseState("_Z3foo", 16)
    assert state.parse_two_char("_Z")
    assert state.at_least_remaining(len("3foo"))
    assert not state.at_least_remaining(len("3foo") + 1)


def test_parse_one_char():
    state = ParseState("NE", 16)
    assert not state.parse_one_char("E")
    assert state.pos == 0
    assert state.parse_one_char("N")
    assert state.pos == 1
    assert state.parse_one_char("E")
    assert not state.parse_one_char("E")
    assert state.remaining == ""


def test_parse_two_char():
    state = ParseState("_Z1f", 16)
    assert not state.parse_two_char("St")
    assert state.parse_two_char("_Z")
    assert state.remaining == "1f"


def test_parse_two_char_at_end_fails():
    state = ParseState("S", 16)
    assert not state.parse_two_char("St")
    assert state.pos == 0


def test_parse_char_class():
    state = ParseState("C1", 16)
    assert not state.parse_char_class("123")
    assert state.parse_one_char("C")
    assert state.parse_char_class("123")
    assert not state.parse_char_class("123")


def test_append_text_writes_output():
    state = ParseState("", 32)
    state.append_text("foo")
    state.append_text("bar")
    assert state.output() == "foobar"
    assert not state.overflowed


def test_append_text_overflow_keeps_room_for_terminator():
    text = "abcdef"
    state = ParseState("", 4)
    state.append_text(text)
    assert state.overflowed
    assert state.output() == text[:3]


def test_exact_fit_does_not_overflow():
    text = "foobar()"
    state = ParseState("", len(text) + 1)
    state.append_text(text)
    assert not state.overflowed
    assert state.output() == text


def test_no_buffer_always_overflows():
    state = ParseState("", None)
    state.append_text("")
    assert state.overflowed
    assert state.output() == ""


def test_zero_size_overflows_on_text():
    state = ParseState("", 0)
    state.append_text("x")
    assert state.overflowed


def test_maybe_append_returns_true_and_respects_flag():
    state = ParseState("", 32)
    state.append = False
    assert state.maybe_append("hidden") is True
    assert state.output() == ""
    state.append = True
    assert state.maybe_append("shown") is True
    assert state.output() == "shown"


def test_maybe_append_avoids_triple_angle():
    state = ParseState("", 32)
    state.maybe_append("<")
    state.maybe_append("<>")
    assert state.output() == "< <>"


def test_prev_name_tracks_identifiers_only():
    state = ParseState("", 64)
    state.maybe_append("Foo")
    assert state.prev_name_text == "Foo"
    state.maybe_append("::")
    assert state.prev_name_text == "Foo"
    state.maybe_append("Bar")
    assert state.prev_name_text == "Bar"


def test_prev_name_none_initially():
    state = ParseState("", 64)
    assert state.prev_name_text is None


def test_separator_and_cancel():
    state = ParseState("", 64)
    state.maybe_append("N")
    state.nest_level = 1
    state.maybe_append_separator()
    assert state.output() == "N::"
    state.maybe_cancel_last_separator()
    assert state.output() == "N"


def test_no_separator_at_top_level():
    state = ParseState("", 64)
    state.nest_level = 0
    state.maybe_append_separator()
    state.maybe_cancel_last_separator()
    assert state.output() == ""


@pytest.mark.parametrize("start, expected", [(-1, -1), (0, 1), (2, 3)])
def test_maybe_increase_nest_level(start, expected):
    state = ParseState("", 8)
    state.nest_level = start
    state.maybe_increase_nest_level()
    assert state.nest_level == expected


def test_snapshot_restore_rewinds_cursor_and_flags():
    state = ParseState("_Z3foo", 64)
    saved = state.snapshot()
    state.parse_two_char("_Z")
    state.append = False
    state.nest_level = 0
    state.arg_level = 4
    state.restore(saved)
    assert state.pos == 0
    assert state.append is True
    assert state.nest_level == -1
    assert state.arg_level == 0


def test_restore_then_append_overwrites():
    state = ParseState("", 64)
    saved = state.snapshot()
    state.maybe_append("discarded")
    state.restore(saved)
    state.maybe_append("kept")
    assert state.output() == "kept"


def test_restore_clears_overflow_flag():
    state = ParseState("", 2)
    saved = state.snapshot()
    state.append_text("toolong")
    assert state.overflowed
    state.restore(saved)
    assert not state.overflowed


@pytest.mark.parametrize(
    "suffix",
    ["", ".clone.3", ".constprop.80", ".isra.18", ".isra.2.constprop.18"],
)
def test_clone_suffix_accepted(suffix):
    assert is_function_clone_suffix(suffix)


@pytest.mark.parametrize(
    "suffix",
    [".clo", ".clone.", ".clone.foo", ".isra.2.constprop.", "@@GLIBCXX_3.4", "x"],
)
def test_clone_suffix_rejected(suffix):
    assert not is_function_clone_suffix(suffix)