"""
Memo endpoints for API v1.

Every route requires a bearer token; the caller only ever sees their own
memos.  A memo owned by someone else answers 404, exactly like a memo
that does not exist.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from fast_memos.app.api.deps import get_current_user_id, get_memo_service
from fast_memos.app.schemas.memo import MemoCreate, MemoDeleted, MemoRead, MemoUpdate
from fast_memos.app.services.memo_service import MemoService

router = APIRouter()


@router.post("/", response_model=MemoRead, status_code=status.HTTP_201_CREATED)
def create_memo(
    memo_in: MemoCreate,
    user_id: str = Depends(get_current_user_id),
    memos: MemoService = Depends(get_memo_service),
) -> MemoRead:
    """Create a memo.  An empty title answers 400."""
    return memos.create_memo(
        user_id,
        title=memo_in.title,
        content=memo_in.content,
        related_memo_ids=memo_in.related_memo_ids,
    )


@router.get("/", response_model=List[MemoRead])
def list_memos(
    q: Optional[str] = Query(None, description="Optional keyword filter"),
    user_id: str = Depends(get_current_user_id),
    memos: MemoService = Depends(get_memo_service),
) -> List[MemoRead]:
    """List the caller's memos, newest first.

    A blank ``q`` is ignored here; use ``/search`` for an explicit search.
    """
    keyword = q if q and q.strip() else None
    return memos.list_memos(user_id, keyword=keyword)


# Declared before "/{memo_id}" so that "search" is not taken for an id.
@router.get("/search", response_model=List[MemoRead])
def search_memos(
    q: str = Query("", description="Keyword matched against title and content"),
    user_id: str = Depends(get_current_user_id),
    memos: MemoService = Depends(get_memo_service),
) -> List[MemoRead]:
    """Case-insensitive substring search.  A missing or blank ``q`` answers 400."""
    return memos.list_memos(user_id, keyword=q)


@router.get("/{memo_id}", response_model=MemoRead)
def get_memo(
    memo_id: str,
    user_id: str = Depends(get_current_user_id),
    memos: MemoService = Depends(get_memo_service),
) -> MemoRead:
    return memos.get_memo(user_id, memo_id)


@router.put("/{memo_id}", response_model=MemoRead)
def update_memo(
    memo_id: str,
    updates: MemoUpdate,
    user_id: str = Depends(get_current_user_id),
    memos: MemoService = Depends(get_memo_service),
) -> MemoRead:
    """Partially update a memo.

    Omitted and ``null`` fields are left unchanged; ``related_memo_ids: []``
    clears the relations.
    """
    return memos.update_memo(user_id, memo_id, **updates.changes())


@router.delete("/{memo_id}", response_model=MemoDeleted)
def delete_memo(
    memo_id: str,
    user_id: str = Depends(get_current_user_id),
    memos: MemoService = Depends(get_memo_service),
) -> MemoDeleted:
    return MemoDeleted(message=memos.delete_memo(user_id, memo_id))
