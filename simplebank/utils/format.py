from __future__ import annotations

from typing import Any


def type_name(value: Any) -> str:
    """Return the qualified name of *value*, or of its type for instances."""
    cls = value if isinstance(value, type) else type(value)
    return f'{cls.__module__}.{cls.__qualname__}'


def elide(value: str, width: int = 100) -> str:
    return value if len(value) <= width else f'{value[: width - 3]}...'
