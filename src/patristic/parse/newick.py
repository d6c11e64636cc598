"""Newick format parser.

Tokens are the delimiters ``( ) , : ;`` and the text between them, with
surrounding whitespace discarded. A token that is not a delimiter is a node
name when it follows ``(``, ``)``, ``,`` or the start of the text, and a
branch length when it follows ``:``. Lengths may use exponent notation.
Parsing stops at the first ``;``.
"""

import re
from math import isfinite

from patristic.parse.record import FileFormatError

_token = re.compile(r"[(),:;]|[^(),:;]+")


class TreeParseError(FileFormatError):
    pass


class _Tokeniser:
    """Supplies an iterable stream of Newick tokens from 'text', blank
    text between delimiters is dropped."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.token = None
        self.offset = 0

    def error(self, detail: str = "") -> TreeParseError:
        msg = f'Unexpected "{self.token}" at ' if self.token else "At "
        before = self.text[: self.offset]
        line = before.count("\n")
        column = self.offset - (before.rfind("\n") + 1)
        sample = before.split("\n")[-1]
        if column > 30:
            sample = "..." + sample[-20:]
        if line > 0:
            msg += f'line {line + 1}:{column} "{sample}"'
        else:
            msg += f'char {column} "{sample}"'
        return TreeParseError(f"{msg}. {detail}".rstrip())

    def tokens(self):
        for match in _token.finditer(self.text):
            token = match.group().strip()
            if not token:
                continue
            self.token = token
            self.offset = match.start()
            yield token
        self.token = None
        self.offset = len(self.text)


def parse_string(text: str, constructor):
    """Parses a Newick-format string into a tree of constructor instances.

    Parameters
    ----------
    text
        Newick formatted tree
    constructor
        node class, called with no arguments, providing add_child() and
        name / length / children attributes

    Returns
    -------
    the root node, with derived distances not yet computed
    """
    if not text or not text.strip():
        msg = "Empty Newick string"
        raise TreeParseError(msg)

    tree = constructor()
    ancestors = []
    tokeniser = _Tokeniser(text)
    expect_length = has_length = False
    for token in tokeniser.tokens():
        if expect_length and token in "(),:;":
            msg = "Was expecting a branch length."
            raise tokeniser.error(msg)

        if token == ";":
            break
        if token == "(":
            if tree.children:
                msg = "Two subtrees in one node, missing comma?"
                raise tokeniser.error(msg)
            if tree.name or has_length:
                msg = "Subtree must be first element of the node."
                raise tokeniser.error(msg)
            ancestors.append(tree)
            tree = tree.add_child()
            has_length = False
        elif token == ",":
            if not ancestors:
                msg = "Comma outside of any parentheses."
                raise tokeniser.error(msg)
            tree = ancestors[-1].add_child()
            has_length = False
        elif token == ")":
            if not ancestors:
                msg = "Unbalanced parentheses."
                raise tokeniser.error(msg)
            tree = ancestors.pop()
            has_length = False
        elif token == ":":
            if has_length:
                msg = "Already have a length."
                raise tokeniser.error(msg)
            expect_length = True
        elif expect_length:
            try:
                tree.length = float(token)
            except ValueError:
                msg = f"Can't convert length '{token}'"
                raise tokeniser.error(msg) from None
            if not isfinite(tree.length):
                msg = f"Length '{token}' is not finite"
                raise tokeniser.error(msg)
            expect_length = False
            has_length = True
        else:
            # a name directly follows "(", ")", "," or the start of the text
            if tree.name:
                msg = f"Already have a name {tree.name!r} for this node."
                raise tokeniser.error(msg)
            tree.name = token

    if expect_length:
        msg = "Text ended while expecting a branch length."
        raise tokeniser.error(msg)

    if ancestors:
        msg = f"Text ended with {len(ancestors)} unclosed parentheses."
        raise tokeniser.error(msg)

    return tree


def parse_newick(text: str):
    """returns the TreeNode represented by a Newick string, with distances
    fixed"""
    from patristic.core.tree import TreeNode

    return parse_string(text, TreeNode).fix_distances()
