"""Create the first admin account, or promote an existing member.

Usage:
    python -m vom_admin.scripts.create_admin admin@example.com --role super_admin --password 'S3cret!pass'
"""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from vom_admin.auth.roles import Role
from vom_admin.auth.security import hash_password
from vom_admin.core.db import SessionLocal
from vom_admin.core.logging import configure_logging
from vom_admin.models.member import Member
from vom_admin.services.user_accounts import generate_uid, normalize_email, now_utc

logger = logging.getLogger(__name__)

BOOTSTRAP_ROLES = (Role.ADMIN.value, Role.SUPER_ADMIN.value)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Grant an admin role to a member account.")
    parser.add_argument("email", help="Email of the account to create or promote")
    parser.add_argument("--role", choices=BOOTSTRAP_ROLES, default=Role.ADMIN.value)
    parser.add_argument("--password", help="Password for a new account (optional when promoting)")
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="User")
    return parser.parse_args(argv)


def grant_admin_role(
    db: Session,
    *,
    email: str,
    role: str,
    password: str | None = None,
    first_name: str = "Admin",
    last_name: str = "User",
) -> Member:
    if role not in BOOTSTRAP_ROLES:
        raise ValueError(f'Invalid role. Must be one of: {", ".join(BOOTSTRAP_ROLES)}')
    normalized = normalize_email(email)
    member = db.query(Member).filter(func.lower(Member.email) == normalized).first()
    if member is None:
        if not password:
            raise ValueError(f"No user found with email: {email}; pass --password to create one")
        member = Member(
            uid=generate_uid(),
            email=normalized,
            first_name=first_name,
            last_name=last_name,
            created_at=now_utc(),
        )
        db.add(member)
    if password:
        member.hashed_password = hash_password(password)
    member.role = role
    member.status = "active"
    member.updated_at = now_utc()
    db.commit()
    db.refresh(member)
    logger.info("admin_role_granted", extra={"uid": member.uid, "role": role})
    return member


def main(argv: Sequence[str] | None = None) -> None:
    configure_logging()
    args = parse_args(argv)
    with SessionLocal() as session:
        try:
            member = grant_admin_role(
                session,
                email=args.email,
                role=args.role,
                password=args.password,
                first_name=args.first_name,
                last_name=args.last_name,
            )
        except ValueError as exc:
            raise SystemExit(str(exc)) from exc
    print(f"{member.full_name} ({member.email}) has been granted the {member.role} role.")


if __name__ == "__main__":
    main()
