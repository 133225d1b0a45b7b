"""
Errors — Failure taxonomy for the explorer

Recoverable outcomes are not exceptions:
- A named definition missing while building the graph is a GraphWarning.
- Name conflicts are display strings ("foo (conflicted)").

Exceptions are reserved for:
- CodebaseNotFound: no snapshot at startup (fail fast)
- StoreError: a payload exists but cannot be read
- DefinitionNotFound: a render request for a definition the store lacks
- InternalInvariantViolation: bookkeeping of this package disagrees with itself
"""

from typing import Any, Optional


class CodexError(Exception):
    """Base class for explorer errors."""


class CodebaseNotFound(CodexError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"No codebase found at {path}")


class StoreError(CodexError):
    """Stored payload is unreadable or malformed."""


class DefinitionNotFound(CodexError):
    """A render was requested for a definition absent from the store."""

    def __init__(self, hash_value, name: Optional[Any] = None, kind: str = "term"):
        self.hash = hash_value
        self.name = name
        self.kind = kind
        super().__init__(f"Cannot find {kind} {hash_value} (name: {name})")


class InternalInvariantViolation(CodexError):
    """Derived structures disagree with the relation they were built from."""

    def __init__(self, message: str, hash_value=None, subject: Optional[Any] = None):
        self.hash = hash_value
        self.subject = subject
        super().__init__(f"{message} (hash: {hash_value}, subject: {subject!r})")
