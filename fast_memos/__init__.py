"""
Top-level package for Fast Memos, a personal note-taking API.

All functionality lives in submodules under ``app``; run the server with::

    uvicorn fast_memos.app.main:app
"""

__all__ = []
