"""
CodebaseStore — Read-only access to a content-addressed snapshot

On-disk layout (schema v1):

    <codebase>/
    ├── terms/XX/YYYY.../term.json    {"hash", "term", "type"}
    ├── types/XX/YYYY.../decl.json    {"hash", "decl"}
    └── branches/head.json            {"terms": [[referent, name]...], "types": [...]}

XX is the first two characters of the hash, YYYY... the rest.
Payloads are tagged dicts (see serialization.py) written with orjson.

The store is opened once and treated as immutable; nothing in the explorer
writes to it. SnapshotWriter exists to build snapshots (imports, tests).
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import orjson
import xxhash

from .branch import NamingBranch
from .errors import CodebaseNotFound, StoreError
from .references import Hash, Name, Reference, Referent
from .serialization import decode, encode
from .syntax import Term, Type, TypeDecl

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
TERM_FILE = "term.json"
DECL_FILE = "decl.json"
HEAD_FILE = "head.json"


def content_hash(payload: Any) -> Hash:
    """Hash of the canonical encoding of a payload (xxh3-128, hex)."""
    canonical = orjson.dumps(encode(payload), option=orjson.OPT_SORT_KEYS)
    return Hash(xxhash.xxh3_128_hexdigest(canonical))


def _object_dir(root: Path, kind: str, h: Hash) -> Path:
    return root / kind / h.value[:2] / h.value[2:]


def _field(data: Dict[str, Any], key: str) -> Any:
    if key not in data:
        raise StoreError(f"Payload for #{data.get('hash', '?')} has no {key!r}")
    return data[key]


class CodebaseStore:
    """Snapshot reader. Missing definitions return None; corrupt ones raise StoreError."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @staticmethod
    def exists(path: Path) -> bool:
        """Whether a snapshot lives at path (checked once at startup)."""
        path = Path(path)
        return (path / "branches" / HEAD_FILE).is_file()

    @classmethod
    def open(cls, path: Path) -> 'CodebaseStore':
        if not cls.exists(path):
            raise CodebaseNotFound(path)
        return cls(path)

    # -------------------------------------------------------------------------
    # Definitions
    # -------------------------------------------------------------------------

    def get_term(self, h: Hash) -> Optional[Term]:
        data = self._read(_object_dir(self.path, "terms", h) / TERM_FILE)
        if data is None:
            return None
        return decode(_field(data, "term"))

    def get_type_of(self, h: Hash) -> Optional[Type]:
        """Stored (inferred or declared) type of the term at h."""
        data = self._read(_object_dir(self.path, "terms", h) / TERM_FILE)
        if data is None or data.get("type") is None:
            return None
        return decode(data["type"])

    def get_type_declaration(self, h: Hash) -> Optional[TypeDecl]:
        data = self._read(_object_dir(self.path, "types", h) / DECL_FILE)
        if data is None:
            return None
        return decode(_field(data, "decl"))

    def get_definition(self, h: Hash):
        """Term at h, else the type declaration at h, else None."""
        term = self.get_term(h)
        if term is not None:
            return term
        return self.get_type_declaration(h)

    # -------------------------------------------------------------------------
    # Naming
    # -------------------------------------------------------------------------

    def get_root_branch(self) -> NamingBranch:
        data = self._read(self.path / "branches" / HEAD_FILE)
        if data is None:
            raise CodebaseNotFound(self.path)
        try:
            terms = [(decode(r), decode(n)) for r, n in data.get("terms", [])]
            types = [(decode(r), decode(n)) for r, n in data.get("types", [])]
        except (TypeError, ValueError) as e:
            raise StoreError(f"Malformed branch {self.path}: {e}") from e
        logger.debug("Loaded branch: %d term names, %d type names", len(terms), len(types))
        return NamingBranch.from_pairs(terms=terms, types=types)

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _read(self, path: Path) -> Optional[Dict[str, Any]]:
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreError(f"Cannot read {path}: {e}") from e

        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise StoreError(f"Corrupt payload {path}: {e}") from e

        if not isinstance(data, dict):
            raise StoreError(f"Corrupt payload {path}: expected an object, got {type(data).__name__}")
        version = data.get("schema_version")
        if version != SCHEMA_VERSION:
            raise StoreError(f"Unsupported schema version {version!r} in {path}")
        return data


class SnapshotWriter:
    """
    Builds a snapshot on disk.

    Usage:
        writer = SnapshotWriter(path)
        b = writer.put_term(Lit(1), type=nat)
        writer.name_term(DirectRef(Derived(b)), "b")
        writer.write_branch()
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._terms: List[Tuple[Referent, Name]] = []
        self._types: List[Tuple[Reference, Name]] = []

    def put_term(self, term: Term, type: Optional[Type] = None, hash: Optional[Hash] = None) -> Hash:
        """
        Store a term. The hash covers the term only, not its type.

        Pass hash explicitly for mutually recursive definitions, whose
        content cannot name each other's hashes before they exist.
        """
        h = hash or content_hash(term)
        self._write(_object_dir(self.path, "terms", h) / TERM_FILE, {
            "schema_version": SCHEMA_VERSION,
            "hash": h.value,
            "term": encode(term),
            "type": encode(type) if type is not None else None,
        })
        return h

    def put_type(self, decl: TypeDecl, hash: Optional[Hash] = None) -> Hash:
        h = hash or content_hash(decl)
        self._write(_object_dir(self.path, "types", h) / DECL_FILE, {
            "schema_version": SCHEMA_VERSION,
            "hash": h.value,
            "decl": encode(decl),
        })
        return h

    def name_term(self, referent: Referent, name) -> None:
        self._terms.append((referent, name if isinstance(name, Name) else Name(name)))

    def name_type(self, reference: Reference, name) -> None:
        self._types.append((reference, name if isinstance(name, Name) else Name(name)))

    def write_branch(self) -> Path:
        path = self.path / "branches" / HEAD_FILE
        self._write(path, {
            "schema_version": SCHEMA_VERSION,
            "terms": [[encode(r), encode(n)] for r, n in self._terms],
            "types": [[encode(r), encode(n)] for r, n in self._types],
        })
        return path

    def _write(self, path: Path, data: Dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS))
