"""Mint a bearer token for an existing user, for local testing and operations.

Usage:
    talent-radar-token alice
    talent-radar-token --user-id 3 --minutes 60
"""
from __future__ import annotations

import argparse
import sys
from datetime import timedelta

from sqlalchemy.orm import Session

from talent_radar.core.security import create_access_token
from talent_radar.db.session import SessionLocal
from talent_radar.models import User
from talent_radar.repositories import UserRepository


def resolve_user(db: Session, username: str | None, user_id: int | None) -> User | None:
    """Look a user up by id when given, otherwise by username."""
    repo = UserRepository(db)
    if user_id is not None:
        return repo.get(user_id)
    if username:
        return repo.get_by_username(username)
    return None


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Issue a Talent Radar access token")
    p.add_argument("username", nargs="?", help="Username of the token owner")
    p.add_argument("--user-id", type=int, help="Primary key of the token owner")
    p.add_argument("--minutes", type=int, help="Token lifetime; defaults to the configured expiry")
    args = p.parse_args(argv)
    if args.username is None and args.user_id is None:
        p.error("a username or --user-id is required")
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    with SessionLocal() as db:
        user = resolve_user(db, args.username, args.user_id)
        if user is None:
            print("[token] No matching user", file=sys.stderr)
            return 1
        lifetime = timedelta(minutes=args.minutes) if args.minutes else None
        print(create_access_token(user.id, expires_delta=lifetime))
    return 0


if __name__ == "__main__":
    sys.exit(main())
