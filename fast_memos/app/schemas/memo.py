"""
Pydantic schemas for memos.

``MemoCreate`` and ``MemoUpdate`` describe request bodies; ``MemoRead`` is
what the service layer returns and the API serializes.  Related memo ids
are always exposed as a list, never as the stored comma-separated text.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class MemoCreate(BaseModel):
    """Schema for creating a memo.

    ``title`` defaults to an empty string so that a missing title is
    reported by the service as a validation error (400) rather than by
    FastAPI's request parser (422).
    """

    title: str = Field("", examples=["Shopping list"])
    content: str = Field("", examples=["Milk, eggs"])
    related_memo_ids: Optional[List[str]] = Field(None, examples=[["3f2a9c", "b71e04"]])


class MemoUpdate(BaseModel):
    """Schema for updating a memo.

    All fields are optional.  A field that is omitted or sent as ``null``
    is left unchanged; ``related_memo_ids: []`` clears the relations.
    """

    title: Optional[str] = None
    content: Optional[str] = None
    related_memo_ids: Optional[List[str]] = None

    def changes(self) -> Dict[str, Any]:
        """Fields the client actually supplied with a non-null value."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class MemoRead(BaseModel):
    """Schema for reading a memo."""

    id: str
    title: str
    content: str
    user_id: str
    related_memo_ids: List[str] = Field(default_factory=list)
    created_at: str
    updated_at: str

    model_config = {
        "from_attributes": True,
    }


class MemoDeleted(BaseModel):
    message: str
