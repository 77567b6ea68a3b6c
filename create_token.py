#!/usr/bin/env python3
"""
Print an access token for an existing user.

Usage:
    python create_token.py --username alice --days 365
"""

import argparse
import sys

from fast_memos.app.core.config import settings
from fast_memos.app.core.db import Database, init_db
from fast_memos.app.core.errors import NotFound
from fast_memos.app.core.security import TokenService
from fast_memos.app.services.user_service import UserService


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Issue a Fast Memos access token for a user.")
    ap.add_argument("--username", required=True, help="Existing username")
    ap.add_argument("--days", type=int, default=None, help="Token lifetime in days (default: configured lifetime)")
    ap.add_argument("--db", default=settings.database_url, help="Path to the SQLite database")
    args = ap.parse_args(argv)

    db = Database(args.db)
    init_db(db)
    try:
        user = UserService(db).get_by_username(args.username)
    except NotFound:
        print(f"[!] No user found with username: {args.username}", file=sys.stderr)
        return 2

    tokens = TokenService(settings.secret_key, expire_minutes=settings.access_token_expire_minutes)
    expires = args.days * 24 * 60 * 60 if args.days is not None else None
    print(tokens.issue(user.id, expires_delta=expires))
    return 0


if __name__ == "__main__":
    sys.exit(main())
