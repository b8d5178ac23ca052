# kshcore

Building blocks for a Korn-style shell, written as a plain Python library
with no dependencies outside the standard library. It targets POSIX systems
(`kshcore.options` reads the effective user id).

## Modules

- `kshcore.format` – the shell's own `printf` dialect. `format_printf(fmt, *args)`
  accepts flags, widths and precisions in any order before the conversion
  character; `format_truncated(size, fmt, *args)` returns the text that fits
  in a buffer of `size` bytes together with the full length.
- `kshcore.numbers` – `to_base(n, base)` renders an unsigned 64-bit value in
  bases 2 to 16; `parse_decimal(text)` and `strtonum(text, minval, maxval)`
  parse decimal integers and raise `NumberError` (with a `reason` of
  "invalid", "too small" or "too large" for `strtonum`).
- `kshcore.unvis` – `strunvis(src)` undoes `vis`-style escapes; the
  `UnvisDecoder` state machine decodes one character at a time with `feed`
  and `end`. Malformed escapes raise `UnvisError`.
- `kshcore.glob` – `gmatch(string, pattern, isfile)`, `has_globbing(pattern)`
  and `debunk(pattern)` for patterns marked up with `MAGIC`, including the
  extended `*(…)`, `+(…)`, `?(…)`, `@(…)` and `!(…)` groups and POSIX bracket
  classes such as `[:alpha:]`.
- `kshcore.getopt` – `Getopt`, the option scanner for built-in commands, with
  `+opt` support (`GetoptFlag.PLUSOPT`) and the `;`, `,` and `#` argument
  variants. With `GetoptFlag.ERROR` bad options raise `GetoptError`.
- `kshcore.paths` – `make_path` builds a CDPATH candidate and returns a
  `MadePath`; `simplify_path` removes `.` and `..` lexically;
  `get_phys_path` resolves symbolic links.
- `kshcore.options` – the shell option table (`OPTIONS`, `ShellOption`,
  `OptionScope`, `option_index`) and `Options`, which holds option values and
  offers `change_flag`, `getoptions`, `parse_args` (returning a
  `ParseResult`, raising `OptionError`) and `format_options`. Helpers:
  `print_columns`, `quote_value`, `strip_nuls` and `is_restricted`.
- `kshcore.signals` – `signal_name(sig)` and `signal_message(sig)`.
- `kshcore.tree` – command trees (`Op`, `IoWord`, `NodeType`), word helpers
  (`wdscan`, `wdcopy`, `wdstrip`), `tcopy` for deep copies, and
  `format_word`, `format_ioword` and `format_tree` for printing them back as
  shell text.

## Examples

```python
from kshcore.format import format_printf
from kshcore.paths import simplify_path
from kshcore.unvis import strunvis

format_printf("%-5s|%05d", "ab", 42)   # 'ab   |00042'
simplify_path("/a/b/c/./../d/..")      # '/a/b'
strunvis("a\\tb")                      # 'a\tb'
```

## What it does not do

This is a library of parts, not a shell. It has no command to run, does not
read or execute scripts, and has no lexer or parser: command trees must be
built by the caller. It also has no buffered file-descriptor I/O layer, no
hashed table for variables, aliases or commands, no trap or signal-handler
management beyond naming signals, and no controlling-terminal handling.

## Running the tests

```
pip install -e ".[test]"
pytest
```