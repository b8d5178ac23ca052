import pytest

from kshcore.tree import (
    CHAR,
    COMSUB,
    CPAT,
    CQUOTE,
    CSUBST,
    EOS,
    IODUP,
    IOHERE,
    IOSKIP,
    IOWRITE,
    OPAT,
    OQUOTE,
    OSUBST,
    QCHAR,
    SPAT,
    IoWord,
    NodeType,
    Op,
    format_ioword,
    format_tree,
    format_word,
    tcopy,
    wdcopy,
    wdscan,
    wdstrip,
)


def word(text):
    return "".join(CHAR + ch for ch in text) + EOS


def cmd(*names):
    return Op(NodeType.TCOM, args=[word(n) for n in names], vars=[])


def test_plain_word_strip_and_format():
    w = word("echo")
    assert wdstrip(w) == "echo"
    assert format_word(w) == "echo"


def test_wdscan_finds_end_of_word():
    w = word("ab")
    assert wdscan(w, 0, EOS) == len(w)


def test_wdcopy_takes_first_word():
    assert wdcopy(word("ab") + word("cd")) == word("ab")


def test_wdcopy_adds_missing_eos():
    w = word("xy")[:-1]
    assert wdcopy(w) == w + EOS


def test_quoted_char_outside_quotes_gets_backslash():
    w = QCHAR + "$" + EOS
    assert format_word(w) == "\\" + "$"
    assert wdstrip(w) == "$"


def test_double_quoted_word():
    w = OQUOTE + QCHAR + "a" + CQUOTE + EOS
    assert format_word(w) == '"a"'
    assert wdstrip(w) == "a"


@pytest.mark.parametrize("ch", ["\x01", "\x7f", "\x81"])
def test_control_chars_are_made_visible(ch):
    out = format_word(CHAR + ch + EOS)
    assert len(out) == 2
    assert out[0] == ("$" if ord(ch) & 0x80 else "^")


def test_control_a_spelling():
    assert format_word(CHAR + "\x01" + EOS) == "^A"


def test_comsub_format_and_scan():
    w = COMSUB + "ls" + "\0" + EOS
    assert format_word(w) == "$(" + "ls" + ")"
    assert wdscan(w, 0, EOS) == len(w)


def test_substitution_format_matches_strip():
    w = OSUBST + "{" + "x" + "\0" + CSUBST + "}" + EOS
    assert format_word(w) == wdstrip(w)
    assert format_word(w).startswith("${")
    assert wdscan(w, 0, EOS) == len(w)


def test_wdscan_csubst_from_inside():
    w = OSUBST + "{" + "x" + "\0" + CSUBST + "}" + CHAR + "a" + EOS
    start = w.index(CSUBST)
    assert wdscan(w, start, CSUBST) == start + 2


def test_pattern_words():
    w = OPAT + "*" + CHAR + "a" + SPAT + CHAR + "b" + CPAT + EOS
    assert format_word(w) == wdstrip(w)
    assert wdscan(w, 2, SPAT) == w.index(SPAT) + 1
    assert wdscan(w, 5, CPAT) == w.index(CPAT) + 1


def test_simple_command():
    assert format_tree(cmd("echo", "hi"), 0, True) == "echo hi "


def test_command_without_vars():
    t = Op(NodeType.TCOM, args=[word("ls")])
    assert format_tree(t, 0, True).startswith("#no-vars# ")


def test_pipe_and_andor():
    assert format_tree(Op(NodeType.TPIPE, left=cmd("a"), right=cmd("b")), 0, True) == "a | b "
    assert format_tree(Op(NodeType.TAND, left=cmd("a"), right=cmd("b")), 0, True) == "a && b "
    assert format_tree(Op(NodeType.TOR, left=cmd("a"), right=cmd("b")), 0, True) == "a || b "


def test_list_string_and_file_forms_agree():
    t = Op(NodeType.TLIST, left=cmd("a"), right=cmd("b"))
    as_file = format_tree(t, 0, False)
    as_string = format_tree(t, 0, True)
    assert "\n" not in as_string
    assert as_file.replace("\n", "; ") == as_string


def test_list_indent_uses_tabs():
    t = Op(NodeType.TLIST, left=cmd("a"), right=cmd("b"))
    assert format_tree(t, 10, False) == "a \n\t  b "


def test_if_layout():
    t = Op(NodeType.TIF, left=cmd("c"), right=Op(NodeType.TEOF, left=cmd("b")))
    lines = format_tree(t, 0, False).splitlines()
    assert lines == ["if c ", "then", " " * 4 + "b ", "fi "]
    one_line = format_tree(t, 0, True)
    assert "\n" not in one_line
    assert one_line.endswith("fi ")


def test_function_forms():
    body = Op(NodeType.TBRACE, left=cmd("x"))
    ksh = Op(NodeType.TFUNCT, str="f", left=body, ksh_func=True)
    posix = Op(NodeType.TFUNCT, str="f", left=body, ksh_func=False)
    assert format_tree(ksh, 0, True).startswith("function f {")
    assert format_tree(posix, 0, True).startswith("f() {")


def test_write_redirections():
    assert format_ioword(IoWord(1, IOWRITE, name=word("out"))) == "> out "
    assert format_ioword(IoWord(2, IOWRITE, name=word("out"))) == "2> out "


def test_dup_redirections():
    assert format_ioword(IoWord(2, IODUP, name=word("1"))) == "2>&1 "
    assert format_ioword(IoWord(1, IODUP, name=word("2"))) == ">&2 "


def test_heredoc_redirection():
    iop = IoWord(0, IOHERE | IOSKIP, delim=word("EOF"))
    assert format_ioword(iop) == "<<- EOF "


def test_heredoc_body_printed_after_command():
    t = cmd("cat")
    t.ioact = [IoWord(0, IOHERE, delim=word("EOF"), heredoc="line\n")]
    assert format_tree(t, 0, False) == "cat << EOF \nline\nEOF\n"


def test_tcopy_is_deep_and_equal():
    t = Op(NodeType.TLIST, left=cmd("a"), right=cmd("b"))
    t.left.ioact = [IoWord(1, IOWRITE, name=word("f"))]
    c = tcopy(t)
    assert c == t
    assert c.left is not t.left
    c.left.args.append(word("z"))
    assert len(t.left.args) == 1
    assert format_tree(tcopy(t), 0, True) == format_tree(t, 0, True)


def test_tcopy_none():
    assert tcopy(None) is None