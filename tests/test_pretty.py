"""
Tests for Pretty and PrettyPrintEnv — Layout and naming while printing

These tests validate:
- Groups stay flat when they fit and break when they don't
- Hard lines always break
- Styled segments carry syntax roles; to_plain drops them
- Names, suffixes and hash placeholders chosen by the environment
"""

from codex.core.branch import NamingBranch
from codex.core.references import (
    Builtin, ConstructorKind, ConstructorRef, Derived, DirectRef, Hash, Name,
)
from codex.presentation.env import PrettyPrintEnv, hash_qualified
from codex.presentation.pretty import (
    SyntaxElement, concat, group, hardline, join, line, nest, parenthesize, pretty, render,
    text, to_plain,
)

H1 = Hash("0123456789abcdef" * 2)
H2 = Hash("fedcba9876543210" * 2)


class TestLayout:
    """Width-aware layout."""

    DOC = group(concat(text("f"), nest(2, concat(line, text("x")))))

    def test_group_fits_flat(self):
        assert pretty(self.DOC, width=80) == "f x"

    def test_group_breaks_when_too_wide(self):
        assert pretty(self.DOC, width=2) == "f\n  x"

    def test_hardline_forces_break(self):
        doc = group(concat(text("a"), line, text("b"), hardline, text("c")))
        assert pretty(doc, width=80) == "a\nb\nc"

    def test_inner_group_stays_flat(self):
        inner = group(concat(text("g"), nest(2, concat(line, text("y")))))
        doc = group(concat(text("long-head"), nest(2, concat(line, inner))))
        assert pretty(doc, width=10) == "long-head\n  g y"

    def test_join_and_parenthesize(self):
        doc = parenthesize(join(text(", "), [text("a"), text("b")]))
        assert pretty(doc) == "(a, b)"

    def test_parenthesize_when_false(self):
        assert pretty(parenthesize(text("a"), when=False)) == "a"


class TestSegments:
    """Styled output."""

    def test_styles_are_kept(self):
        segments = render(concat(text("let", SyntaxElement.KEYWORD), text(" x")))
        assert segments == [("let", SyntaxElement.KEYWORD), (" x", None)]

    def test_to_plain_strips_trailing_spaces(self):
        assert to_plain([("x ", None), ("\n  ", None), ("y", None)]) == "x\n  y"


class TestPrettyPrintEnv:
    """Display names inside rendered source."""

    def _branch(self):
        return NamingBranch.from_pairs(
            terms=[
                (DirectRef(Derived(H1)), Name("base.List.map")),
                (DirectRef(Derived(H2)), Name("util.map")),
                (ConstructorRef(Derived(H2), 0), Name("Box.Box")),
            ],
            types=[(Builtin("Nat"), Name("Nat"))],
        )

    def test_full_name_by_default(self):
        env = PrettyPrintEnv(self._branch())
        assert env.term_name(DirectRef(Derived(H1))) == "base.List.map"

    def test_suffixify_picks_shortest_unique_suffix(self):
        env = PrettyPrintEnv(self._branch(), suffixify=True)
        assert env.term_name(DirectRef(Derived(H1))) == "List.map"
        assert env.term_name(DirectRef(Derived(H2))) == "util.map"

    def test_unnamed_derived_uses_hash_prefix(self):
        env = PrettyPrintEnv(NamingBranch())
        assert env.term_name(DirectRef(Derived(H1))) == "#0123456789"
        assert env.type_name(Derived(H1)) == "#0123456789"

    def test_hash_length(self):
        env = PrettyPrintEnv(NamingBranch(), hash_length=4)
        assert env.term_name(DirectRef(Derived(H1))) == "#0123"

    def test_unnamed_builtin(self):
        assert hash_qualified(Builtin("Text")) == "##Text"

    def test_unnamed_constructor(self):
        env = PrettyPrintEnv(NamingBranch())
        referent = ConstructorRef(Derived(H1), 1, ConstructorKind.EFFECT)
        assert env.term_name(referent) == "#0123456789#1"

    def test_constructor_name(self):
        env = PrettyPrintEnv(self._branch())
        assert env.constructor_name(Derived(H2), 0, ConstructorKind.DATA) == "Box.Box"
        assert env.constructor_name(Derived(H2), 1, ConstructorKind.DATA) is None

    def test_type_name(self):
        env = PrettyPrintEnv(self._branch())
        assert env.type_name(Builtin("Nat")) == "Nat"
