#!/usr/bin/env python3
"""
Create Admin User Script.

Promotes an existing account to ``admin`` or registers a new admin account.
Public signup always creates ``user`` accounts, so this is how the first
admin is made.

Usage:
    uv run python auto/create_admin.py alice@example.com
    uv run python auto/create_admin.py boss@example.com --name "Big Boss" --password Secret123

Environment Variables:
    ADMIN_PASSWORD: Password for a new admin when --password is omitted
"""

from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter
from asyncio import run as asyncio_run
from dataclasses import dataclass
from getpass import getpass
from os import environ
from pathlib import Path
from sys import exit as sys_exit
from sys import path as sys_path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys_path.insert(0, str(project_root))

from pydantic import SecretStr  # noqa: E402
from pydantic import ValidationError as SchemaValidationError  # noqa: E402

from app.configs.settings import MIN_PASSWORD_LENGTH  # noqa: E402
from app.db.database import transaction  # noqa: E402
from app.errors import BaseAppError  # noqa: E402
from app.models import UserDB  # noqa: E402
from app.rabc import Role  # noqa: E402
from app.repositories import UserRepository  # noqa: E402
from app.schemas.auth import SignupRequest  # noqa: E402
from app.schemas.common import normalize_email  # noqa: E402
from app.services import AuthService  # noqa: E402


@dataclass(frozen=True)
class AdminRequest:
    """
    What the script was asked to do.

    Attributes
    ----------
    email : str
        Normalized email of the account.
    name : str | None
        Display name; set only when registering a new account.
    password : str | None
        Plaintext password; set only when registering a new account.
    """

    email: str
    name: str | None = None
    password: str | None = None

    @property
    def registers(self) -> bool:
        return self.name is not None


async def promote_admin(email: str) -> UserDB:
    """
    Give an existing account the admin role.

    Raises
    ------
    ValueError
        If no account uses ``email``.
    """
    async with transaction() as session:
        repo = UserRepository(session)
        user = await repo.get_by_email(email)
        if user is None:
            msg = f"No account with email '{email}'"
            raise ValueError(msg)
        if user.role == Role.ADMIN:
            return user
        return await repo.update(user, {"role": str(Role.ADMIN)})


async def register_admin(request: AdminRequest) -> UserDB:
    """Register a brand new account with the admin role."""
    payload = SignupRequest(
        name=request.name or "",
        email=request.email,
        password=SecretStr(request.password or ""),
    )
    async with transaction() as session:
        service = AuthService(UserRepository(session))
        return await service.register(payload, role=Role.ADMIN)


def read_password() -> str:
    if password := environ.get("ADMIN_PASSWORD"):
        return password
    while True:
        password = getpass("Enter password: ")
        if len(password) < MIN_PASSWORD_LENGTH:
            print(f"❌ Password must be at least {MIN_PASSWORD_LENGTH} characters.")
            continue
        if getpass("Confirm password: ") != password:
            print("❌ Passwords do not match.")
            continue
        return password


def build_request(args: Namespace) -> AdminRequest:
    email = str(normalize_email(args.email))
    if args.name is None:
        return AdminRequest(email=email)
    return AdminRequest(email=email, name=args.name, password=args.password or read_password())


def parse_args() -> Namespace:
    """
    Parse command line arguments.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = ArgumentParser(
        description="Promote an account to admin, or register a new admin account.",
        formatter_class=RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Promote an existing account
  uv run python auto/create_admin.py alice@example.com

  # Register a new admin (prompts for the password when -p is omitted)
  uv run python auto/create_admin.py boss@example.com -n "Big Boss" -p SuperSecret
        """,
    )
    parser.add_argument("email", help="Email of the account")
    parser.add_argument(
        "-n",
        "--name",
        default=None,
        help="Register a new admin with this display name",
    )
    parser.add_argument(
        "-p",
        "--password",
        default=None,
        help="Password for the new admin (default: ADMIN_PASSWORD env var or prompt)",
    )
    return parser.parse_args()


async def main() -> int:
    """
    Run the admin bootstrap.

    Returns
    -------
    int
        Exit code (0 for success, 1 for error).
    """
    request = build_request(parse_args())

    try:
        admin = await register_admin(request) if request.registers else await promote_admin(request.email)
    except SchemaValidationError as e:
        print(f"\n❌ Invalid input: {e.errors()[0]['msg']}")
        return 1
    except (ValueError, BaseAppError) as e:
        print(f"\n❌ Error: {e}")
        return 1

    action = "created" if request.registers else "promoted"
    print(f"\n✅ Admin {action} successfully!")
    print(f"   ID:    {admin.id}")
    print(f"   Email: {admin.email}")
    print(f"   Role:  {admin.role}")
    return 0


if __name__ == "__main__":
    sys_exit(asyncio_run(main()))
