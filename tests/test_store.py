"""
Tests for CodebaseStore — Read-only snapshot access

These tests validate:
- Startup fails fast when no snapshot exists
- Terms, types and declarations come back as written
- Missing definitions are None, corrupt ones raise StoreError
- The naming branch round-trips through head.json
"""

import orjson
import pytest

from codex.core.errors import CodebaseNotFound, StoreError
from codex.core.references import Builtin, ConstructorRef, Derived, DirectRef, Hash, Name
from codex.core.store import CodebaseStore, SnapshotWriter, content_hash
from codex.core.syntax import ConstructorDecl, DataDeclaration, Lit, Var

from tests.factories import MISSING_HASH, NAT


class TestOpen:
    """Startup checks."""

    def test_missing_codebase_raises(self, tmp_path):
        with pytest.raises(CodebaseNotFound) as exc:
            CodebaseStore.open(tmp_path / "nowhere")
        assert "No codebase found at" in str(exc.value)

    def test_exists_after_branch_written(self, tmp_path):
        path = tmp_path / "snap"
        assert not CodebaseStore.exists(path)
        SnapshotWriter(path).write_branch()
        assert CodebaseStore.exists(path)


class TestDefinitions:
    """Reading terms and declarations."""

    def test_term_and_type(self, codebase_factory):
        h = codebase_factory.add_term("one", Lit(1), type=NAT)
        store = codebase_factory.write()
        assert store.get_term(h) == Lit(1)
        assert store.get_type_of(h) == NAT

    def test_term_without_type(self, codebase_factory):
        h = codebase_factory.add_term("x", Var("x"))
        store = codebase_factory.write()
        assert store.get_type_of(h) is None

    def test_missing_term_is_none(self, codebase_factory):
        store = codebase_factory.write()
        assert store.get_term(MISSING_HASH) is None
        assert store.get_type_of(MISSING_HASH) is None
        assert store.get_type_declaration(MISSING_HASH) is None

    def test_definition_falls_back_to_declaration(self, codebase_factory):
        decl = DataDeclaration("unique", (), (ConstructorDecl("Red"), ConstructorDecl("Green")))
        h = codebase_factory.add_data_type("Color", decl, ["Color.Red", "Color.Green"])
        store = codebase_factory.write()
        assert store.get_term(h) is None
        assert store.get_definition(h) == decl

    def test_corrupt_term_raises(self, codebase_factory):
        h = codebase_factory.add_term("x", Lit(1))
        codebase_factory.corrupt_term(h)
        store = codebase_factory.write()
        with pytest.raises(StoreError):
            store.get_term(h)

    def test_unknown_schema_version_raises(self, codebase_factory):
        h = codebase_factory.add_term("x", Lit(1))
        path = codebase_factory.corrupt_term(h)
        path.write_bytes(orjson.dumps({"schema_version": 99, "term": None}))
        store = codebase_factory.write()
        with pytest.raises(StoreError):
            store.get_term(h)


class TestContentHash:
    """Content addressing."""

    def test_same_content_same_hash(self):
        assert content_hash(Lit(1)) == content_hash(Lit(1))

    def test_different_content_different_hash(self):
        assert content_hash(Lit(1)) != content_hash(Lit(2))

    def test_pinned_hash_is_used(self, codebase_factory):
        pinned = Hash("ab" * 16)
        h = codebase_factory.add_term("x", Lit(1), hash=pinned)
        assert h == pinned
        assert codebase_factory.write().get_term(pinned) == Lit(1)


class TestBranch:
    """Naming branch persistence."""

    def test_names_round_trip(self, codebase_factory):
        h = codebase_factory.add_term(["x", "util.x"], Lit(1))
        codebase_factory.name_builtin("Nat.+")
        codebase_factory.name_term(ConstructorRef(Derived(h), 0), "X.mk")

        branch = codebase_factory.branch()
        assert branch.term_names(DirectRef(Derived(h))) == frozenset({Name("x"), Name("util.x")})
        assert branch.term_names(DirectRef(Builtin("Nat.+"))) == frozenset({Name("Nat.+")})
        assert branch.terms_named(Name("X.mk")) == frozenset({ConstructorRef(Derived(h), 0)})

    def test_type_names(self, codebase_factory):
        codebase_factory.name_builtin_type("Nat")
        branch = codebase_factory.branch()
        assert branch.type_names(Builtin("Nat")) == frozenset({Name("Nat")})
        assert branch.types_named(Name("Nat")) == frozenset({Builtin("Nat")})
