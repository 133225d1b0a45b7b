"""
Test Data Factory — Real codebase snapshots for explorer tests

Writes snapshots with SnapshotWriter under pytest's tmp_path, so tests
exercise the same files and decoding the CLI reads. No mocks of the store.

Usage:
    @pytest.fixture
    def codebase_env(tmp_path):
        factory = CodebaseTestFactory(tmp_path)
        factory.create_sample_codebase()
        return factory

    def test_something(codebase_env):
        store = codebase_env.write()
        a = codebase_env.hashes["a"]
        # ... test against the store
"""

from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from codex.core.branch import NamingBranch
from codex.core.references import (
    Builtin, ConstructorKind, ConstructorRef, Derived, DirectRef, Hash, Referent,
)
from codex.core.store import TERM_FILE, CodebaseStore, SnapshotWriter
from codex.core.syntax import (
    Apply, DataDeclaration, EffectDeclaration, Lit, Ref, Term, Type, TypeRef,
)

NAT = TypeRef(Builtin("Nat"))
PLUS = Builtin("Nat.+")
MISSING_HASH = Hash("c" * 32)

Names = Union[None, str, Iterable[str]]


def _names(names: Names):
    if names is None:
        return []
    if isinstance(names, str):
        return [names]
    return list(names)


class CodebaseTestFactory:
    """
    Factory for test codebases.

    Creates an isolated project directory whose snapshot lives at the
    default codebase path (.codex/v1), so CodexCLI(project_dir) finds it
    without any configuration.
    """

    def __init__(self, tmp_path: Path):
        self.tmp_path = tmp_path
        self.project_dir = tmp_path
        self.codebase_path = tmp_path / ".codex" / "v1"
        self.writer = SnapshotWriter(self.codebase_path)
        self.hashes: Dict[str, Hash] = {}

    # =========================================================================
    # Definitions
    # =========================================================================

    def add_term(self, names: Names, term: Term, type: Optional[Type] = None,
                 hash: Optional[Hash] = None) -> Hash:
        """Store a term and name it under each of names."""
        h = self.writer.put_term(term, type=type, hash=hash)
        for name in _names(names):
            self.writer.name_term(DirectRef(Derived(h)), name)
        return h

    def add_data_type(self, name: str, decl: DataDeclaration,
                      constructor_names: Iterable[str] = (), hash: Optional[Hash] = None) -> Hash:
        h = self.writer.put_type(decl, hash=hash)
        self.writer.name_type(Derived(h), name)
        for index, constructor in enumerate(constructor_names):
            self.writer.name_term(ConstructorRef(Derived(h), index, ConstructorKind.DATA), constructor)
        return h

    def add_ability(self, name: str, decl: EffectDeclaration,
                    operation_names: Iterable[str] = (), hash: Optional[Hash] = None) -> Hash:
        h = self.writer.put_type(decl, hash=hash)
        self.writer.name_type(Derived(h), name)
        for index, operation in enumerate(operation_names):
            self.writer.name_term(ConstructorRef(Derived(h), index, ConstructorKind.EFFECT), operation)
        return h

    def add_missing(self, names: Names, hash: Hash = MISSING_HASH) -> Hash:
        """Name a hash that has no stored definition."""
        for name in _names(names):
            self.writer.name_term(DirectRef(Derived(hash)), name)
        return hash

    def name_term(self, referent: Referent, name: str) -> None:
        self.writer.name_term(referent, name)

    def name_builtin(self, tag: str, name: Optional[str] = None) -> Builtin:
        builtin = Builtin(tag)
        self.writer.name_term(DirectRef(builtin), name or tag)
        return builtin

    def name_builtin_type(self, tag: str, name: Optional[str] = None) -> Builtin:
        builtin = Builtin(tag)
        self.writer.name_type(builtin, name or tag)
        return builtin

    def corrupt_term(self, h: Hash, content: bytes = b"{not json") -> Path:
        """Overwrite a stored term, by default with bytes that are not JSON."""
        path = self.codebase_path / "terms" / h.value[:2] / h.value[2:] / TERM_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    # =========================================================================
    # Snapshot access
    # =========================================================================

    def write(self) -> CodebaseStore:
        """Write the naming branch and open the snapshot."""
        self.writer.write_branch()
        return CodebaseStore.open(self.codebase_path)

    def branch(self) -> NamingBranch:
        return self.write().get_root_branch()

    def create_sample_codebase(self) -> Dict[str, Hash]:
        """
        Three named terms:

            b = 1                 (b : Nat)
            a = b Nat.+ 1         (a : Nat, references b and a builtin)
            c                     (named, never stored)
        """
        self.name_builtin("Nat.+")
        self.name_builtin_type("Nat")

        b = self.add_term("b", Lit(1), type=NAT)
        a = self.add_term("a", Apply(Ref(PLUS), (Ref(Derived(b)), Lit(1))), type=NAT)
        c = self.add_missing("c")

        self.hashes.update({"a": a, "b": b, "c": c})
        self.write()
        return dict(self.hashes)

    def create_cli(self):
        """Real CodexCLI pointed at the project directory."""
        from codex.cli import CodexCLI
        return CodexCLI(self.project_dir)
