"""
Top-level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.  When a
new domain is introduced, include its router here.
"""

from fastapi import APIRouter

from .endpoints import auth, memos

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(memos.router, prefix="/memos", tags=["memos"])
