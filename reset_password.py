#!/usr/bin/env python3
"""
Reset a user's password in the Fast Memos SQLite database.

This script does not read or reveal existing passwords.  It stores a new
PBKDF2-HMAC-SHA256 hash (``salthex$hashhex``) for the given username.

Usage:
    python reset_password.py --db ./fast_memos.db --username alice --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sys

from fast_memos.app.core.db import Database
from fast_memos.app.core.errors import FastMemosError, NotFound
from fast_memos.app.services.user_service import UserService


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Reset a Fast Memos user password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./fast_memos.db)")
    ap.add_argument("--username", required=True, help="Username to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args(argv)

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        return 1

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        return 1

    users = UserService(Database(args.db))
    try:
        user = users.get_by_username(args.username)
        users.change_password(user.id, new_password)
    except NotFound:
        print(f"[!] No user found with username: {args.username}", file=sys.stderr)
        return 2
    except FastMemosError as exc:
        print(f"[!] {exc.message}", file=sys.stderr)
        return 1
    print(f"[+] Password updated for user: {args.username}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
