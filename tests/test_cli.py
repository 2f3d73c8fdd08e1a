import io

import pytest

from symdemangle.cli import main


def run_with_name(capsys, name):
    status = main([name])
    out = capsys.readouterr().out
    return status, out


@pytest.mark.parametrize(
    "mangled, expected",
    [
        ("_Z6foobarv", "foobar()"),
        ("_ZL3Foov", "Foo()"),
        ("_ZL3Foov.clone.3", "Foo()"),
        ("_ZL3Foov.constprop.80", "Foo()"),
        ("_ZL3Foov.isra.18", "Foo()"),
        ("_ZL3Foov.isra.2.constprop.18", "Foo()"),
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
def test_single_name_is_demangled(capsys, mangled, expected):
    status, out = run_with_name(capsys, mangled)
    assert status == 0
    assert out == expected + "\n"


@pytest.mark.parametrize(
    "mangled",
    [
        "_ZL3Foov.clo",
        "_ZL3Foov.clone.",
        "_ZL3Foov.clone.foo",
        "_ZL3Foov.isra.2.constprop.",
        "not_a_symbol",
    ],
)
def test_undemangleable_name_is_echoed(capsys, mangled):
    status, out = run_with_name(capsys, mangled)
    assert status == 0
    assert out == mangled + "\n"


def test_filter_mode_reads_stdin(capsys, monkeypatch):
    monkeypatch.setattr(
        "sys.stdin", io.StringIO("_Z6foobarv\n_ZL3Foov.clo\n_ZN3Foo3BarEv\n")
    )
    status = main(["--demangle_filter"])
    out = capsys.readouterr().out
    assert status == 0
    assert out.splitlines() == ["foobar()", "_ZL3Foov.clo", "Foo::Bar()"]


def test_single_dash_filter_flag(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("_ZN3FooC1Ev"))
    assert main(["-demangle_filter"]) == 0
    assert capsys.readouterr().out == "Foo::Foo()\n"


def test_no_arguments_filters_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("_Z1fIiEvi\n"))
    assert main([]) == 0
    assert capsys.readouterr().out == "f<>()\n"


def test_filter_enabled_from_environment(capsys, monkeypatch):
    monkeypatch.setenv("GLOG_demangle_filter", "1")
    monkeypatch.setattr("sys.stdin", io.StringIO("_Zrm1XS_\n"))
    assert main(["ignored_name"]) == 0
    assert capsys.readouterr().out == "operator%()\n"


def test_empty_stdin_prints_nothing(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main(["--demangle_filter"]) == 0
    assert capsys.readouterr().out == ""


def test_unknown_option_is_rejected():
    with pytest.raises(SystemExit) as excinfo:
        main(["--no-such-option"])
    assert excinfo.value.code == 2