"""Identifier helpers."""

import uuid


def new_node_id() -> str:
    """Return a collision-resistant identifier for a new account node."""
    return uuid.uuid4().hex


__all__ = ["new_node_id"]
