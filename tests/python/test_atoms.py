"""Tests for the lexical atom recognizers."""

import pytest

from funcad.dsl import atoms


@pytest.mark.parametrize("text", ["a", "abc", "Tan", "x1y2", "ABC123"])
def test_identifier_accepts_letters_then_alphanumerics(text):
    assert atoms.is_identifier(text)
    found = atoms.match_identifier(text, 0)
    assert (found.text, found.start, found.end) == (text, 0, len(text))


@pytest.mark.parametrize("text", ["1abc", "a_b", "_a", "", "a b", "é", "a-b"])
def test_identifier_rejections(text):
    assert not atoms.is_identifier(text)


def test_identifier_stops_at_first_non_alphanumeric():
    found = atoms.match_identifier("abc_def", 0)
    assert found.text == "abc"
    assert found.end == 3


def test_identifier_respects_start_index():
    found = atoms.match_identifier("  foo = 1", 2)
    assert (found.text, found.start, found.end) == ("foo", 2, 5)
    assert atoms.match_identifier("  foo", 0) is None


@pytest.mark.parametrize(
    "text",
    ["0", "7", "42", "-3", "0.5", "1.", "1.e5", "3.25", "1e9", "1E9", "2e+10", "6.02e-23", "-0.0"],
)
def test_number_matches_whole_lexeme(text):
    found = atoms.match_number(text, 0)
    assert found.text == text
    assert found.end == len(text)
    assert float(found.text) == float(text)


@pytest.mark.parametrize(
    ("text", "lexeme"),
    [
        ("01", "0"),
        ("007", "0"),
        ("1 . 5", "1"),
        ("2e", "2"),
        ("2e+", "2"),
        ("3.5.1", "3.5"),
        ("4.x", "4."),
        ("5- 1", "5"),
    ],
)
def test_number_stops_at_longest_valid_prefix(text, lexeme):
    assert atoms.match_number(text, 0).text == lexeme


@pytest.mark.parametrize("text", [".5", "-", "- 1", "e5", "", "x"])
def test_number_rejections(text):
    assert atoms.match_number(text, 0) is None


def test_func_name_with_and_without_module():
    assert atoms.match_func_name("sin(x)", 0).parts == ("sin",)
    qualified = atoms.match_func_name("geo.area(1)", 0)
    assert qualified.parts == ("geo", "area")
    assert qualified.text == "geo.area"


def test_func_name_allows_a_single_dot():
    found = atoms.match_func_name("a.b.c", 0)
    assert found.parts == ("a", "b")
    assert found.end == 3


def test_func_name_ignores_dangling_dot():
    found = atoms.match_func_name("a.", 0)
    assert found.parts == ("a",)
    assert found.end == 1


@pytest.mark.parametrize(
    ("text", "up_levels", "segments"),
    [
        ("a", 0, ("a",)),
        ("lib/geo", 0, ("lib", "geo")),
        ("../a", 1, ("a",)),
        ("../../a/b", 2, ("a", "b")),
        ("../x1/y2/z3", 1, ("x1", "y2", "z3")),
    ],
)
def test_file_name_parts(text, up_levels, segments):
    found = atoms.match_file_name(text, 0)
    assert found.text == text
    assert found.up_levels == up_levels
    assert found.parts == segments


@pytest.mark.parametrize(
    ("text", "matched"),
    [("a/", "a"), ("a//b", "a"), ("a/ b", "a"), ("a/1", "a"), ("a/../b", "a")],
)
def test_file_name_stops_before_invalid_segment(text, matched):
    assert atoms.match_file_name(text, 0).text == matched


@pytest.mark.parametrize("text", ["", "/a", "./a", "..", "../", ".. /a", "1a"])
def test_file_name_rejections(text):
    assert atoms.match_file_name(text, 0) is None
