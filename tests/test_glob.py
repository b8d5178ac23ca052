import pytest

from kshcore.glob import MAGIC, debunk, gmatch, has_globbing

M = MAGIC


def ext(op):
    return chr(0x80 | ord(op))


def group(op, *alternatives):
    return M + ext(op) + (M + "|").join(alternatives) + M + ")"


def bracket(body):
    return M + "[" + body + M + "]"


def test_star_matches_anything():
    assert gmatch("hello", M + "*")
    assert gmatch("", M + "*")


def test_star_in_middle():
    pattern = "ab" + M + "*cd"
    assert gmatch("abxyzcd", pattern)
    assert gmatch("abcd", pattern)
    assert not gmatch("abxyzce", pattern)


def test_question_mark():
    pattern = "a" + M + "?c"
    assert gmatch("abc", pattern)
    assert not gmatch("ac", pattern)
    assert not gmatch("abbc", pattern)


def test_bracket_set_and_negation():
    assert gmatch("b", bracket("abc"))
    assert not gmatch("d", bracket("abc"))
    negated = M + "[" + M + "!abc" + M + "]"
    assert gmatch("d", negated)
    assert not gmatch("a", negated)


def test_bracket_range():
    pattern = bracket("a" + M + "-z")
    assert gmatch("m", pattern)
    assert not gmatch("M", pattern)


def test_reversed_range_never_matches():
    assert not gmatch("m", bracket("z" + M + "-a"))


def test_posix_character_class():
    pattern = M + "[[:digit:" + M + "]" + M + "]"
    assert gmatch("5", pattern)
    assert not gmatch("x", pattern)


def test_unknown_posix_class_fails():
    pattern = M + "[[:nosuch:" + M + "]" + M + "]"
    assert not gmatch("a", pattern)


def test_unclosed_bracket_matches_literally():
    assert gmatch("[a", M + "[a", True)


@pytest.mark.parametrize("word", ["foo", "bar"])
def test_at_group_alternatives(word):
    assert gmatch(word, group("@", "foo", "bar"))


def test_at_group_rejects_other():
    assert not gmatch("baz", group("@", "foo", "bar"))


def test_plus_group_needs_one():
    pattern = group("+", "ab")
    assert gmatch("abab", pattern)
    assert gmatch("ab", pattern)
    assert not gmatch("", pattern)


def test_star_group_allows_zero():
    pattern = group("*", "ab")
    assert gmatch("", pattern)
    assert gmatch("ababab", pattern)
    assert not gmatch("aba", pattern)


def test_question_group_optional():
    pattern = group("?", "x") + "y"
    assert gmatch("y", pattern)
    assert gmatch("xy", pattern)
    assert not gmatch("xxy", pattern)


def test_bang_group_negates():
    pattern = group("!", "foo")
    assert gmatch("bar", pattern)
    assert not gmatch("foo", pattern)


def test_plain_string_compared_literally():
    assert gmatch("a*b", "a*b")
    assert not gmatch("axb", "a*b")


def test_isfile_plain_string():
    assert gmatch("abc", "abc", True)
    assert not gmatch("abd", "abc", True)


def test_none_never_matches():
    assert not gmatch(None, M + "*")
    assert not gmatch("a", None)


def test_has_globbing():
    assert has_globbing("ab" + M + "*")
    assert has_globbing(bracket("a"))
    assert has_globbing(group("@", "a", "b"))
    assert not has_globbing("abc")
    assert not has_globbing(M + "[abc")


def test_has_globbing_rejects_bad_nesting():
    assert not has_globbing(M + "[a" + M + "|" + M + "]")
    assert not has_globbing(M + ext("*") + "a")


def test_debunk_plain_and_magic():
    assert debunk("plain") == "plain"
    assert debunk(M + "*abc") == "*abc"


def test_debunk_extended_groups():
    assert debunk(group("@", "a", "b")) == "@(a|b)"
    assert debunk(group(" ", "a")) == "(a)"


def test_debunk_matches_literal_comparison():
    pattern = M + "[abc"
    assert not has_globbing(pattern)
    assert gmatch(debunk(pattern), pattern)