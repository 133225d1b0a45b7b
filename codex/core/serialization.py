"""
Serialization — Tagged-dict encoding for stored payloads

Every syntax node, reference and enum becomes a dict carrying a "tag" key
with the class name; tuples become lists. The encoding is plain JSON data,
so the store can write it with orjson and hash its canonical bytes.
"""

from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Dict

from . import references, syntax
from .errors import StoreError


def _registry() -> Dict[str, type]:
    classes = {}
    for module in (references, syntax):
        for value in vars(module).values():
            if isinstance(value, type) and (is_dataclass(value) or issubclass(value, Enum)):
                if value.__module__ == module.__name__:
                    classes[value.__name__] = value
    return classes


_CLASSES = _registry()


def encode(value: Any) -> Any:
    """Encode a node (or nested value) as JSON-compatible data."""
    if isinstance(value, Enum):
        return {"tag": type(value).__name__, "value": value.value}
    if is_dataclass(value):
        data = {"tag": type(value).__name__}
        for f in fields(value):
            data[f.name] = encode(getattr(value, f.name))
        return data
    if isinstance(value, (tuple, list)):
        return [encode(item) for item in value]
    return value


def decode(data: Any) -> Any:
    """Inverse of encode(). Raises StoreError on unknown tags or malformed nodes."""
    if isinstance(data, list):
        return tuple(decode(item) for item in data)
    if not isinstance(data, dict):
        return data

    tag = data.get("tag")
    cls = _CLASSES.get(tag) if isinstance(tag, str) else None
    if cls is None:
        raise StoreError(f"Unknown payload tag: {tag!r}")

    try:
        if issubclass(cls, Enum):
            return cls(data["value"])
        kwargs = {f.name: decode(data[f.name]) for f in fields(cls) if f.name in data}
        return cls(**kwargs)
    except (KeyError, TypeError, ValueError) as e:
        raise StoreError(f"Malformed {tag} payload: {e}") from e
