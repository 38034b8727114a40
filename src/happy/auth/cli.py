"""Command line management of dashboard users."""

import argparse
import asyncio
import getpass
import sys

from pydantic import ValidationError as PydanticValidationError

from happy.auth.schemas import UserCreate
from happy.auth.service import AuthService
from happy.shared.database import DatabaseManager
from happy.shared.exceptions import AppException
from happy.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def create_user(data: UserCreate, database_url: str | None = None) -> int:
    """Create a user and return its ID."""
    manager = DatabaseManager(database_url)
    try:
        async with manager.session() as session:
            user = await AuthService(session).create_user(data)
        return user.id
    finally:
        await manager.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="happy-admin", description="Manage dashboard users")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL.")
    subcommands = parser.add_subparsers(dest="command", required=True)

    create = subcommands.add_parser("create-user", help="Create a dashboard user.")
    create.add_argument("--name", required=True)
    create.add_argument("--email", required=True)
    create.add_argument(
        "--password",
        default=None,
        help="Password (prompted for when omitted).",
    )
    args = parser.parse_args(argv)

    setup_logging()

    password = args.password or getpass.getpass("Password: ")
    try:
        data = UserCreate(name=args.name, email=args.email, password=password)
    except PydanticValidationError as e:
        for error in e.errors():
            print(f"{'.'.join(map(str, error['loc']))}: {error['msg']}", file=sys.stderr)
        return 2

    try:
        user_id = asyncio.run(create_user(data, args.database_url))
    except AppException as e:
        print(e.message, file=sys.stderr)
        return 1

    print(f"Created user {user_id} <{data.email}>")
    return 0


if __name__ == "__main__":
    sys.exit(main())
