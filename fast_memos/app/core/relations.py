"""
Storage encoding for a memo's related-memo identifiers.

The list is persisted in a single text column as a comma-separated
string.  Identifiers containing commas cannot be represented; callers are
not expected to send them.
"""

from typing import Iterable, List, Optional


def encode_related_ids(ids: Optional[Iterable[str]]) -> str:
    """Join identifiers with ``,``.  ``None`` and ``[]`` both give ``""``."""
    if ids is None:
        return ""
    return ",".join(ids)


def decode_related_ids(text: Optional[str]) -> List[str]:
    """Split a stored value back into identifiers.

    Entries are stripped of surrounding whitespace and empty entries are
    dropped, so ``""`` decodes to ``[]``, never ``None``.
    """
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]
