# backend/brain/utils/sanitize.py

"""
Strip document-store operator keys from untrusted request data.

A key is treated as an operator when it starts with ``$`` (``$where``, ``$ne``,
``$or``...) or contains ``.`` (a path into a nested document). Such keys are
dropped together with their values; everything else is kept as is.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)

OPERATOR_PREFIX = "$"
PATH_SEPARATOR = "."

_CONTAINERS = (dict, list, tuple)


def is_operator_key(key: Any) -> bool:
    if not isinstance(key, str):
        return False
    return key.startswith(OPERATOR_PREFIX) or PATH_SEPARATOR in key


def _empty_like(value: Any) -> Any:
    # tuples are filled as lists and frozen once the walk is done
    return {} if isinstance(value, dict) else []


def sanitize(value: Any) -> Any:
    """
    Return a copy of ``value`` with every operator key removed, at any depth.

    Lists and tuples keep their order, length and type. Scalars and any other
    shape are returned untouched. Each dropped key is reported with a warning.

    The walk uses an explicit stack, so nesting depth is bounded only by memory.

    Args:
        value: Decoded JSON (or any nested dict/list structure).

    Returns:
        The sanitized value.
    """
    if not isinstance(value, _CONTAINERS):
        return value

    root = _empty_like(value)
    # (parent, slot, placeholder) for every tuple, in creation order
    frozen = [(None, None, root)] if isinstance(value, tuple) else []
    stack = [(value, root)]

    while stack:
        source, target = stack.pop()
        is_mapping = isinstance(source, dict)
        for key, item in (source.items() if is_mapping else enumerate(source)):
            if is_mapping and is_operator_key(key):
                logger.warning(f"NoSQL injection attempt blocked, dropped key: {key!r}")
                continue
            if isinstance(item, _CONTAINERS):
                child = _empty_like(item)
                if isinstance(item, tuple):
                    frozen.append((target, key, child))
                stack.append((item, child))
            else:
                child = item
            if is_mapping:
                target[key] = child
            else:
                target.append(child)

    # children were registered after their parents, so freeze innermost first
    for parent, slot, placeholder in reversed(frozen):
        if parent is None:
            root = tuple(placeholder)
        else:
            parent[slot] = tuple(placeholder)
    return root
