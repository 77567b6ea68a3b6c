"""Identifier generation for users and memos."""

import secrets


def new_id() -> str:
    """Return a random 128-bit identifier as 32 hex characters."""
    return secrets.token_hex(16)
