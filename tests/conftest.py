"""
Shared pytest fixtures for the explorer test suite.

Provides fixtures built on CodebaseTestFactory, which writes real
snapshots under tmp_path.

Usage in tests:
    def test_something(codebase_factory):
        h = codebase_factory.add_term("x", Lit(1))
        store = codebase_factory.write()
        # ... test with a real store

    def test_with_data(codebase_env):
        # codebase_env comes pre-populated: a -> b, c named but missing
        a = codebase_env.hashes["a"]
"""

import pytest

from codex.config import ENV_OVERRIDES, ConfigManager
from tests.factories import CodebaseTestFactory


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the real user config and CODEX_* environment."""
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", tmp_path / "home" / ".codex" / "config.yaml")
    for key in ENV_OVERRIDES:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("CODEX_PROJECT_PATH", raising=False)


@pytest.fixture
def codebase_factory(tmp_path):
    """
    Create an empty CodebaseTestFactory.

    Use this when you need fine-grained control over the snapshot.
    """
    return CodebaseTestFactory(tmp_path)


@pytest.fixture
def codebase_env(tmp_path):
    """
    Create a CodebaseTestFactory with the sample codebase.

    Pre-populated with:
    - b = 1, typed Nat
    - a = b Nat.+ 1, typed Nat (references b and the builtin Nat.+)
    - c, named but with no stored definition

    The branch is already written; codebase_env.hashes maps "a"/"b"/"c".
    """
    factory = CodebaseTestFactory(tmp_path)
    factory.create_sample_codebase()
    return factory
