import pytest

from kshcore.options import (
    OPTIONS,
    OptionError,
    Options,
    OptionScope,
    is_restricted,
    option_index,
    print_columns,
    quote_value,
    strip_nuls,
)

SET = OptionScope.SET
CMD = OptionScope.CMDLINE


def test_option_index_round_trip():
    for opt in OPTIONS:
        if opt.name:
            assert OPTIONS[option_index(opt.name)].name == opt.name
    assert option_index("allexport") == 0


def test_option_index_unknown():
    assert option_index("bogus") is None


def test_cmdline_flags_and_getoptions():
    opts = Options()
    res = opts.parse_args(["ksh", "-e", "-x", "script"], CMD)
    assert res.optind == 3
    assert res.args == ["script"]
    assert opts["errexit"] and opts["xtrace"]
    assert opts.getoptions() == "ex"


def test_combined_letters():
    opts = Options()
    opts.parse_args(["ksh", "-ex"], CMD)
    assert opts.getoptions() == "ex"


def test_login_from_argv0():
    opts = Options()
    opts.parse_args(["-ksh"], CMD)
    assert opts["login"] == 1
    opts.parse_args(["-ksh", "+l"], CMD)
    assert opts["login"] == 0


def test_editing_modes_exclusive():
    opts = Options()
    opts["emacs"] = 1
    opts.parse_args(["set", "-o", "vi"], SET)
    assert opts["vi"] == 1
    assert opts["emacs"] == 0


def test_posix_clears_braceexpand():
    opts = Options()
    opts["braceexpand"] = 1
    opts.parse_args(["set", "-o", "posix"], SET)
    assert opts["braceexpand"] == 0


def test_set_sort_args():
    res = Options().parse_args(["set", "-s", "c", "a", "b"], SET)
    assert res.args == ["a", "b", "c"]
    assert res.setargs is True


def test_set_array():
    res = Options().parse_args(["set", "-A", "arr", "y", "x"], SET)
    assert res.array == "arr"
    assert res.arrayset == 1
    assert res.args == ["y", "x"]
    assert res.setargs is False
    assert res.optind == 5


def test_set_plus_array():
    res = Options().parse_args(["set", "+A", "arr", "v"], SET)
    assert res.arrayset == -1


def test_array_bad_identifier():
    with pytest.raises(OptionError):
        Options().parse_args(["set", "-A", "1bad", "v"], SET)


def test_bad_long_option():
    with pytest.raises(OptionError):
        Options().parse_args(["set", "-o", "bogus"], SET)


def test_unknown_letter():
    with pytest.raises(OptionError):
        Options().parse_args(["set", "-z"], SET)


def test_cmdline_o_requires_argument():
    with pytest.raises(OptionError):
        Options().parse_args(["ksh", "-o"], CMD)


def test_lone_dash_clears_verbose_xtrace():
    opts = Options()
    opts["verbose"] = 1
    opts["xtrace"] = 1
    res = opts.parse_args(["set", "-"], SET)
    assert opts["verbose"] == 0 and opts["xtrace"] == 0
    assert res.optind == 2
    assert res.setargs is False


def test_double_dash_sets_args():
    res = Options().parse_args(["set", "--"], SET)
    assert res.setargs is True
    assert res.args == []


def test_interactive_only_on_cmdline():
    opts = Options()
    with pytest.raises(OptionError):
        opts.parse_args(["set", "-o", "interactive"], SET)
    opts["interactive"] = 1
    res = opts.parse_args(["set", "-o", "interactive"], SET)
    assert res.optind == 3


def test_interactive_sets_internal_copy():
    opts = Options()
    opts.parse_args(["ksh", "-i"], CMD)
    assert opts.interactive_internal == 1


def test_monitor_callback():
    calls = []
    opts = Options(on_monitor_change=lambda: calls.append(1))
    opts.parse_args(["set", "-m"], SET)
    assert calls == [1]
    other = Options(on_monitor_change=lambda: calls.append(2))
    other.parse_args(["ksh", "-m"], CMD)
    assert calls == [1]


def test_listing_from_lone_o():
    opts = Options()
    opts["errexit"] = 1
    verbose = opts.parse_args(["set", "-o"], SET).listing
    assert verbose.startswith("Current option settings\n")
    for opt in OPTIONS:
        if opt.name:
            assert opt.name in verbose
    short = opts.parse_args(["set", "+o"], SET).listing
    assert short.startswith("set")
    assert " -o errexit" in short
    assert " +o xtrace" in short
    assert short.endswith("\n")


def test_print_columns_single_column():
    assert print_columns(["a", "b", "c"], 100, False, 80) == "a\nb\nc\n"


def test_print_columns_prefers_columns():
    out = print_columns(["a", "b", "c"], 1, True, 80)
    assert out.splitlines() == ["a", "b", "c"]


def test_print_columns_row_count():
    items = [str(i) for i in range(10)]
    out = print_columns(items, 5, False, 80)
    assert len(out.splitlines()) == 1
    assert out.split() == items


def test_quote_value():
    assert quote_value("abc") == "abc"
    assert quote_value("a b") == "'a b'"
    assert quote_value("it's") == "'it'\\''s'"


def test_strip_nuls():
    assert strip_nuls(b"a\0b\0\0c") == b"abc"
    assert strip_nuls("x\0y") == "xy"


def test_is_restricted():
    assert is_restricted("/bin/rksh") is True
    assert is_restricted("rsh") is True
    assert is_restricted("/bin/ksh") is False