"""
Tests for DefinitionRenderer — On-demand source of one definition

These tests validate:
- Builtins render as fixed placeholders without touching the store
- Stored types are injected as annotations, existing ones are kept
- A failed type lookup renders the term unannotated
- Data and ability declarations
- Missing definitions raise DefinitionNotFound
- Output respects the configured width
"""

import pytest

from codex.core.errors import DefinitionNotFound, StoreError
from codex.core.references import Builtin, Derived, Hash, Name
from codex.core.syntax import (
    Ann, Apply, Binding, ConstructorDecl, DataDeclaration, EffectDeclaration, If, Lam, Let, Lit,
    Match, MatchCase, OperationDecl, PConstructor, PUnbound, PVar, Ref, Seq, TypeApp, TypeArrow,
    TypeEffect, TypeRef, TypeVar, Var,
)
from codex.presentation.pretty import SyntaxElement
from codex.presentation.render import (
    BUILTIN_TERM, BUILTIN_TYPE, DefinitionKind, DefinitionRenderer, render,
    term_with_type_annotation,
)

from tests.factories import MISSING_HASH, NAT, PLUS

NAT_TO_NAT = TypeArrow(NAT, TypeArrow(NAT, NAT))


def names(*texts):
    return frozenset(Name(t) for t in texts)


@pytest.fixture
def renderer_for(codebase_factory):
    """Build a renderer over whatever the factory has written so far."""
    def build(width=80, **kwargs):
        store = codebase_factory.write()
        return DefinitionRenderer(store, store.get_root_branch(), width=width, **kwargs)
    return build


class TestBuiltins:
    """Fixed placeholders."""

    def test_builtin_term(self, codebase_env):
        store = codebase_env.write()
        renderer = DefinitionRenderer(store, store.get_root_branch())
        assert renderer.render_term(Builtin("Nat.+"), names("Nat.+")) == BUILTIN_TERM == "<builtin>"

    def test_builtin_type(self, codebase_env):
        store = codebase_env.write()
        renderer = DefinitionRenderer(store, store.get_root_branch())
        assert renderer.render_type(Builtin("Nat"), names("Nat")) == BUILTIN_TYPE == "<builtin type>"

    def test_builtin_never_reads_store(self):
        class NoStore:
            def __getattr__(self, name):
                raise AssertionError(f"store.{name} called")

        from codex.core.branch import NamingBranch
        renderer = DefinitionRenderer(NoStore(), NamingBranch())
        assert renderer.render(Builtin("Nat.+"), frozenset()) == "<builtin>"


class TestTerms:
    """Term rendering."""

    def test_sample_term(self, codebase_env):
        store = codebase_env.write()
        a = codebase_env.hashes["a"]
        text = render(store, store.get_root_branch(), Derived(a), names("a"))

        assert text == "a : Nat\na = b Nat.+ 1"
        assert "a" in text and "b" in text

    def test_stored_type_becomes_signature(self, codebase_env):
        store = codebase_env.write()
        b = codebase_env.hashes["b"]
        text = render(store, store.get_root_branch(), Derived(b), names("b"))
        assert text == "b : Nat\nb = 1"

    def test_existing_annotation_is_kept(self, codebase_factory, renderer_for):
        codebase_factory.name_builtin_type("Int")
        codebase_factory.name_builtin_type("Nat")
        h = codebase_factory.add_term("x", Ann(Lit(1), TypeRef(Builtin("Int"))), type=NAT)
        assert renderer_for().render_term(Derived(h), names("x")) == "x : Int\nx = 1"

    def test_untyped_term_has_no_signature(self, codebase_factory, renderer_for):
        h = codebase_factory.add_term("x", Lit("hi"))
        assert renderer_for().render_term(Derived(h), names("x")) == 'x = "hi"'

    def test_lambda_binds_parameters(self, codebase_factory, renderer_for):
        codebase_factory.name_builtin("Nat.+")
        codebase_factory.name_builtin_type("Nat")
        h = codebase_factory.add_term("add", Lam(("x", "y"), Apply(Ref(PLUS), (Var("x"), Var("y")))),
                                      type=NAT_TO_NAT)
        assert renderer_for().render_term(Derived(h), names("add")) == (
            "add : Nat -> Nat -> Nat\n"
            "add x y = x Nat.+ y"
        )

    def test_let_block(self, codebase_factory, renderer_for):
        codebase_factory.name_builtin("Nat.+")
        body = Let((Binding("y", Lit(1)),), Apply(Ref(PLUS), (Var("y"), Var("y"))))
        h = codebase_factory.add_term("f", body)
        assert renderer_for().render_term(Derived(h), names("f")) == (
            "f =\n"
            "  y = 1\n"
            "  y Nat.+ y"
        )

    def test_if_and_sequence(self, codebase_factory, renderer_for):
        h = codebase_factory.add_term("f", If(Lit(True), Seq((Lit(1), Lit(2))), Seq(())))
        assert renderer_for().render_term(Derived(h), names("f")) == "f = if true then [1, 2] else []"

    def test_match(self, codebase_factory, renderer_for):
        decl = DataDeclaration("structural", ("a",), (
            ConstructorDecl("None"), ConstructorDecl("Some", (TypeVar("a"),)),
        ))
        opt = codebase_factory.add_data_type("Optional", decl, ["Optional.None", "Optional.Some"])
        term = Lam(("o",), Match(Var("o"), (
            MatchCase(PConstructor(Derived(opt), 1, (PVar("x"),)), Var("x")),
            MatchCase(PUnbound(), Lit(0)),
        )))
        h = codebase_factory.add_term("get", term)
        assert renderer_for().render_term(Derived(h), names("get")) == (
            "get o =\n"
            "  match o with\n"
            "    Optional.Some x -> x\n"
            "    _ -> 0"
        )

    def test_references_use_names(self, codebase_factory, renderer_for):
        g = codebase_factory.add_term("util.helper", Lit(1))
        h = codebase_factory.add_term("f", Apply(Ref(Derived(g)), (Lit(2),)))
        assert renderer_for().render_term(Derived(h), names("f")) == "f = util.helper 2"

    def test_unnamed_reference_uses_hash(self, codebase_factory, renderer_for):
        g = codebase_factory.add_term(None, Lit(1))
        h = codebase_factory.add_term("f", Ref(Derived(g)))
        assert renderer_for().render_term(Derived(h), names("f")) == f"f = #{g.short(10)}"

    def test_conflicted_header_uses_first_name(self, codebase_factory, renderer_for):
        h = codebase_factory.add_term(["zed", "alpha"], Lit(1))
        assert renderer_for().render_term(Derived(h), names("zed", "alpha")) == "alpha = 1"

    def test_name_placeholder(self, codebase_env):
        store = codebase_env.write()
        b = codebase_env.hashes["b"]
        renderer = DefinitionRenderer(store, store.get_root_branch())
        text = renderer.render_term(Derived(b), frozenset())
        assert text.startswith("<name not found> : Nat")

    def test_missing_definition_raises(self, codebase_env):
        store = codebase_env.write()
        renderer = DefinitionRenderer(store, store.get_root_branch())
        with pytest.raises(DefinitionNotFound) as exc:
            renderer.render_term(Derived(MISSING_HASH), names("c"))
        assert exc.value.hash == MISSING_HASH
        assert exc.value.kind == "term"


class TestTypeAnnotation:
    """term_with_type_annotation."""

    class FailingTypes:
        def get_term(self, h):
            return Lit(1)

        def get_type_of(self, h):
            raise StoreError("corrupt type")

    def test_failed_type_lookup_leaves_term(self):
        assert term_with_type_annotation(self.FailingTypes(), MISSING_HASH) == Lit(1)

    def test_failed_type_lookup_still_renders(self):
        from codex.core.branch import NamingBranch
        renderer = DefinitionRenderer(self.FailingTypes(), NamingBranch())
        assert renderer.render_term(Derived(MISSING_HASH), names("x")) == "x = 1"

    def test_missing_term_is_none(self, codebase_env):
        assert term_with_type_annotation(codebase_env.write(), MISSING_HASH) is None


class TestDeclarations:
    """Type declarations."""

    def test_unique_data_type(self, codebase_factory, renderer_for):
        decl = DataDeclaration("unique", (), (ConstructorDecl("Red"), ConstructorDecl("Green")))
        h = codebase_factory.add_data_type("Color", decl, ["Color.Red", "Color.Green"])
        renderer = renderer_for()
        assert renderer.render_type(Derived(h), names("Color")) == "unique type Color = Red | Green"

    def test_data_type_breaks_per_constructor(self, codebase_factory, renderer_for):
        decl = DataDeclaration("unique", (), (ConstructorDecl("Red"), ConstructorDecl("Green")))
        h = codebase_factory.add_data_type("Color", decl, ["Color.Red", "Color.Green"])
        assert renderer_for(width=20).render_type(Derived(h), names("Color")) == (
            "unique type Color\n"
            "  = Red\n"
            "  | Green"
        )

    def test_stored_constructor_names_are_fallback(self, codebase_factory, renderer_for):
        decl = DataDeclaration("structural", ("a",), (
            ConstructorDecl("None"), ConstructorDecl("Some", (TypeVar("a"),)),
        ))
        h = codebase_factory.add_data_type("Optional", decl)
        assert renderer_for().render_type(Derived(h), names("Optional")) == (
            "structural type Optional a = None | Some a"
        )

    def test_ability(self, codebase_factory, renderer_for):
        ask = Hash("a5" * 16)
        signature = TypeEffect((TypeApp(TypeRef(Derived(ask)), TypeVar("a")),), TypeVar("a"))
        decl = EffectDeclaration("structural", ("a",), (OperationDecl("ask", signature),))
        codebase_factory.add_ability("Ask", decl, ["Ask.ask"], hash=ask)
        assert renderer_for().render_type(Derived(ask), names("Ask")) == (
            "structural ability Ask a where\n"
            "  ask : {Ask a} a"
        )

    def test_kind_dispatch(self, codebase_factory, renderer_for):
        decl = DataDeclaration("unique", (), (ConstructorDecl("Unit"),))
        h = codebase_factory.add_data_type("Unit", decl, ["Unit.Unit"])
        text = renderer_for().render(Derived(h), names("Unit"), DefinitionKind.TYPE)
        assert text == "unique type Unit = Unit"

    def test_missing_declaration_raises(self, codebase_env):
        store = codebase_env.write()
        renderer = DefinitionRenderer(store, store.get_root_branch())
        with pytest.raises(DefinitionNotFound) as exc:
            renderer.render_type(Derived(MISSING_HASH), names("T"))
        assert exc.value.kind == "type"


class TestLayout:
    """Width and styling."""

    def test_long_body_breaks(self, codebase_factory, renderer_for):
        g = codebase_factory.add_term("g", Lit(0))
        h = codebase_factory.add_term("f", Apply(Ref(Derived(g)), (Lit("aaaaaaaaaa"), Lit("bbbbbbbbbb"))))

        wide = renderer_for(width=80).render_term(Derived(h), names("f"))
        assert wide == 'f = g "aaaaaaaaaa" "bbbbbbbbbb"'

        narrow = renderer_for(width=20).render_term(Derived(h), names("f"))
        lines = narrow.split("\n")
        assert len(lines) > 1
        assert all(len(row) <= 20 for row in lines)

    def test_segments_carry_styles(self, codebase_env):
        store = codebase_env.write()
        renderer = DefinitionRenderer(store, store.get_root_branch())
        segments = renderer.term_segments(Derived(codebase_env.hashes["a"]), names("a"))
        styles = {style for _, style in segments}
        assert SyntaxElement.BINDING_NAME in styles
        assert SyntaxElement.TERM_REFERENCE in styles
        assert SyntaxElement.LITERAL in styles
