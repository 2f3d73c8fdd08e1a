import pytest

from symdemangle.demangle import DemangleError, demangle, demangle_or_original


# Boundary conditions of the output space.
def test_corner_case_exact_fit():
    assert demangle("_Z6foobarv", 10) == "foobar()"


def test_corner_case_one_less():
    assert demangle("_Z6foobarv", 9) == "foobar()"


@pytest.mark.parametrize("size", [8, 1, 0, None])
def test_corner_case_not_enough(size):
    with pytest.raises(DemangleError):
        demangle("_Z6foobarv", size)


@pytest.mark.parametrize(
    "mangled",
    [
        "_ZL3Foov",
        "_ZL3Foov.clone.3",
        "_ZL3Foov.constprop.80",
        "_ZL3Foov.isra.18",
        "_ZL3Foov.isra.2.constprop.18",
    ],
)
def test_clones(mangled):
    assert demangle(mangled, 20) == "Foo()"


@pytest.mark.parametrize(
    "mangled",
    [
        "_ZL3Foov.clo",
        "_ZL3Foov.clone.",
        "_ZL3Foov.clone.foo",
        "_ZL3Foov.isra.2.constprop.",
    ],
)
def test_invalid_clones(mangled):
    with pytest.raises(DemangleError):
        demangle(mangled, 20)


@pytest.mark.parametrize(
    ("mangled", "expected"),
    [
        ("_Z1fv", "f()"),
        ("_Z1fi", "f()"),
        ("_Z3foo3bar", "foo()"),
        ("_Z1fIiEvi", "f<>()"),
        ("_ZN1N1fE", "N::f"),
        ("_ZN3Foo3BarEv", "Foo::Bar()"),
        ("_Zrm1XS_", "operator%()"),
        ("_ZN3FooC1Ev", "Foo::Foo()"),
        ("_Z1fSs", "f()"),
    ],
)
def test_documented_examples(mangled, expected):
    assert demangle(mangled) == expected


def test_destructor():
    assert demangle("_ZN3FooD1Ev") == "Foo::~Foo()"


def test_operator_new_has_space():
    assert demangle("_Znwm") == "operator new()"


def test_std_prefix():
    assert demangle("_ZSt4swapv") == "std::swap()"


def test_anonymous_namespace():
    assert demangle("_ZN12_GLOBAL__N_13fooEv") == "(anonymous namespace)::foo()"


def test_version_suffix_kept():
    assert demangle("_Z3foov@@GLIBCXX_3.4") == "foo()@@GLIBCXX_3.4"


def test_not_mangled_raises():
    with pytest.raises(DemangleError):
        demangle("not_mangled")


def test_error_is_value_error():
    with pytest.raises(ValueError):
        demangle("_Z")


def test_or_original_success():
    assert demangle_or_original("_ZN3Foo3BarEv") == "Foo::Bar()"


def test_or_original_failure_returns_input():
    assert demangle_or_original("main") == "main"


@pytest.mark.parametrize(
    "data",
    [
        "",
        "_Z",
        "_ZN",
        "_ZNnnnn",
        "_Z99999999999999999999",
        "_Zn5abc",
        "_ZIIIIIIIIIIIIIIIIIIIE",
        "_ZZZZZZZZZZZZZ1fvE1g",
        "_ZcvT_",
        "_ZTC1A0_1B",
        "_ZDtstDtstDtst",
        "_Z1fPPPPPPPPPPPPPPPPPPPPPPPPPPPPPPPPPPPPPPPPPi",
        "_ZN1AC1EvC2D0",
        "\\x00_Z1fv".encode().decode("unicode_escape"),
    ],
)
def test_arbitrary_input_result_fits_or_fails_cleanly(data):
    size = len(data)
    try:
        result = demangle(data, size)
    except DemangleError:
        result = None
    assert result is None or len(result) < size