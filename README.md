# symdemangle

A small demangler for symbol names in the Itanium C++ ABI, the format that
GCC and Clang use. It recovers the parts that matter in a stack trace: class,
function, constructor, destructor and operator names. It does not print
parameter or template argument types; those come out as `()` and `<>`, and
substitutions and template parameters come out as `?`.

| Mangled          | Demangled      |
|------------------|----------------|
| `_Z1fv`          | `f()`          |
| `_Z1fIiEvi`      | `f<>()`        |
| `_ZN1N1fE`       | `N::f`         |
| `_ZN3Foo3BarEv`  | `Foo::Bar()`   |
| `_ZN3FooC1Ev`    | `Foo::Foo()`   |

Compiler clone suffixes such as `.clone.3`, `.constprop.80` or `.isra.18` are
dropped. Version suffixes such as `@@GLIBCXX_3.4` are kept in the output.

The package has no dependencies beyond the standard library.

## Installation

```
pip install .
```

## Demangling

```python
from symdemangle.demangle import demangle, demangle_or_original, DemangleError

demangle("_ZN3Foo3BarEv")            # 'Foo::Bar()'
demangle_or_original("not_mangled")  # 'not_mangled'

try:
    demangle("_Z6foobarv", 8)        # 'foobar()' plus a terminator needs 9
except DemangleError:
    ...
```

- `demangle(mangled, out_size=4096)` returns the demangled name. It raises
  `DemangleError` (a `ValueError`) when the name cannot be parsed, when it
  nests too deeply, or when the result plus one terminator would not fit in
  `out_size` characters. `out_size=None` means no output space at all, so
  every call fails.
- `demangle_or_original(mangled)` demangles with a limit of 4096 and returns
  the input unchanged on failure.

The parser's cursor and bounded output live in `symdemangle.state.ParseState`;
`symdemangle.state.is_function_clone_suffix(text)` tells whether a string is a
sequence of `.<letters>.<digits>` groups.

## Command line

```
symdemangle _ZN3Foo3BarEv
```

prints `Foo::Bar()`. Names that cannot be demangled are printed unchanged.
With `--demangle_filter` (or with no name given) the command reads names from
standard input, one per line, and writes each demangled name to standard
output. Setting the environment variable `GLOG_demangle_filter` to a value
starting with `t`, `T`, `y`, `Y` or `1` turns filter mode on by default.

## Logging flags

`symdemangle.flags.Flags` is a dataclass of logging settings (log directory,
stderr threshold, verbosity, buffering and the like) with built-in defaults.
`Flags.from_environ(environ=None)` builds it from a mapping, `os.environ` by
default: each field is read from `GLOG_<field name>`, and a few defaults come
from `GOOGLE_LOGTOSTDERR`, `GOOGLE_ALSOLOGTOSTDERR`, `GOOGLE_LOGTOSTDOUT`,
`GOOGLE_TIMESTAMP_IN_LOGFILE_NAME`, and `GOOGLE_LOG_DIR` / `TEST_TMPDIR` for
the log directory.

The readers are available on their own: `env_to_bool`, `env_to_int`,
`env_to_uint`, `env_to_string` and `default_log_dir`. Booleans are true when
the value is empty or starts with one of `tTyY1`; integers are read like C's
`strtol`/`strtoul` and narrowed to 32 bits.

## Normalising log output

`symdemangle.golden` rewrites log lines so that captured output can be
compared with a golden file:

```python
from symdemangle.golden import munge_line

munge_line("I20200102 030405 logging_unittest.cc:345] RAW: vlog -1")
# 'IYEARDATE TIME__ logging_unittest.cc:LINE] RAW: vlog -1'
```

`is_logging_prefix(text)` checks for a severity letter (`IWEF`) followed by
eight date characters, and `replace_first(text, old, new)` replaces the first
occurrence of a substring. `munge_line` raises `ValueError` when a prefix is
not followed by a well-formed `file:line]` field.

## What this package does not do

It contains no logger: nothing here writes log messages, log files or e-mail.
`Flags` only holds and reads settings. It also does not capture process
output or run diffs; `symdemangle.golden` only normalises lines you give it.