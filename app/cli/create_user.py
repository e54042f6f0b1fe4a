"""Create a staff account from the command line.

Bootstraps the first admin, since the user API itself requires an admin.

Usage:
    python -m app.cli.create_user --username alice --role admin
    (the password is read from --password or prompted for)
"""

import argparse
import asyncio
import getpass
import sys
from typing import Optional, Sequence

from app.models.fields import StaffRole
from app.services.auth_service import create_user
from app.utils.db_async import SessionLocal, dispose_engine, init_db


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a staff user.")
    parser.add_argument("--username", required=True)
    parser.add_argument("--password", default=None, help="Prompted for when omitted")
    parser.add_argument("--email", default=None)
    parser.add_argument(
        "--role",
        choices=[role.value for role in StaffRole],
        default=StaffRole.editor.value,
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create missing tables before inserting the user",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace, password: str) -> int:
    try:
        if args.init_db:
            await init_db()
        async with SessionLocal() as db:
            user = await create_user(
                db,
                username=args.username,
                password=password,
                role=StaffRole(args.role),
                email=args.email,
                created_by="cli",
            )
    except ValueError as exc:
        print(f"ERROR: {exc}")
        return 1
    finally:
        await dispose_engine()

    print(f"Created {user.role} user '{user.username}' (id={user.id})")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    password = args.password or getpass.getpass("Password: ")
    if len(password) < 8:
        print("ERROR: password must be at least 8 characters")
        return 1
    return asyncio.run(run(args, password))


if __name__ == "__main__":
    sys.exit(main())
