"""Tests of the Newick parser and the Newick writing helpers."""

import pytest

from patristic import make_tree, parse_newick
from patristic.core.tree import TreeNode
from patristic.format.newick import format_length, format_node
from patristic.parse.newick import TreeParseError, _Tokeniser, parse_string
from patristic.parse.record import FileFormatError

sample = """
(
(
xyz:0.28124,
(
def:0.24498,
mno:0.03627)
A:0.17710)
B:0.04870,

abc:0.05925,
(
ghi:0.06914,
jkl:0.13776)
C:0.09853);
"""


def test_tokeniser():
    """whitespace is dropped and names keep internal characters"""
    tokeniser = _Tokeniser("( a b ,c:1e-3 )x ;")
    got = list(tokeniser.tokens())
    assert got == ["(", "a b", ",", "c", ":", "1e-3", ")", "x", ";"]
    assert tokeniser.token is None


def test_parse_sample():
    tree = parse_newick(sample)
    assert tree.get_tip_names() == ["xyz", "def", "mno", "abc", "ghi", "jkl"]
    assert [n.name for n in tree.children] == ["B", "abc", "C"]
    assert tree.get_descendant("A").length == 0.17710
    assert tree.get_descendant("mno").root_distance == pytest.approx(
        0.04870 + 0.17710 + 0.03627,
    )


@pytest.mark.parametrize(
    "text",
    [
        "();",
        "((,),(,));",
        "((a,b),(c,));",
        "(abc:3);",
        "(abc:3,def:4);",
        "(abc:3,(def:4,ghi:5):6);",
        "(abc:3,(def:4,ghi:5)jkl:6)root;",
        "a;",
    ],
)
def test_round_trip(text):
    """writing a parsed tree gives back the original text"""
    tree = parse_newick(text)
    assert tree.get_newick() == text


def test_unnamed_nodes():
    tree = parse_newick("((,),(,));")
    assert len(tree.get_leaves()) == 4
    assert all(n.name == "" for n in tree.preorder())
    assert tree.value == 7


def test_exponent_lengths():
    tree = parse_newick("(a:1e-3,b:2.5E2);")
    assert [n.length for n in tree.children] == [0.001, 250.0]
    assert tree.get_newick() == "(a:0.001,b:250);"


def test_no_semicolon():
    assert parse_newick("(a,b)c").get_newick() == "(a,b)c;"


def test_stops_at_semicolon():
    tree = parse_newick("(a,b);(c,d);")
    assert tree.get_tip_names() == ["a", "b"]


def test_surrounding_whitespace():
    tree = parse_newick("  ( a : 1 ,\tb:2 ) c ;\n")
    assert tree.get_newick() == "(a:1,b:2)c;"


def test_parse_string_constructor():
    """derived distances are not computed by parse_string"""
    tree = parse_string("((a:1,b:2)x:3,c:4);", TreeNode)
    assert isinstance(tree, TreeNode)
    assert tree.get_descendant("a").root_distance == 0
    assert tree.fix_distances().get_descendant("a").root_distance == 4


@pytest.mark.parametrize(
    ("text", "detail"),
    [
        ("", "Empty"),
        ("   ", "Empty"),
        ("(a,b)(c,d);", "missing comma"),
        ("a(b);", "first element"),
        (":2(b);", "first element"),
        ("a,b;", "Comma outside"),
        ("(a,b));", "Unbalanced"),
        ("(a:1:2);", "Already have a length"),
        ("(a:x);", "Can't convert length"),
        ("(a:inf);", "not finite"),
        ("(a:nan);", "not finite"),
        ("(a:);", "expecting a branch length"),
        ("(a:", "ended while expecting"),
        ("((a,b);", "unclosed parentheses"),
    ],
)
def test_parse_errors(text, detail):
    with pytest.raises(TreeParseError, match=detail):
        parse_newick(text)


def test_error_position():
    with pytest.raises(TreeParseError, match='Unexpected "\\)" at char 5'):
        parse_newick("(a,b));")

    with pytest.raises(TreeParseError, match="at line 2:2"):
        parse_newick("(a,\nb:x);")


def test_error_is_file_format_error():
    with pytest.raises(FileFormatError):
        make_tree("(a,b")


@pytest.mark.parametrize(
    ("length", "expect"),
    [
        (2.0, "2"),
        (0.5, "0.5"),
        (1e-7, "0.0000001"),
        (1.5e20, "150000000000000000000"),
        (1 / 3, "0.3333333333333333"),
        (3, "3"),
    ],
)
def test_format_length(length, expect):
    assert format_length(length) == expect


def test_format_node():
    assert format_node("a", 0) == "a"
    assert format_node("a", 1.5) == "a:1.5"
    assert format_node("a", 1.5, with_distances=False) == "a"
    assert format_node("", 2) == ":2"
    assert format_node(None, 0) == ""
    for name in ("a(b", "a)", "a,b", "a:b", "a;"):
        with pytest.raises(ValueError):
            format_node(name, 1)
