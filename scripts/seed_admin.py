"""
Seed Admin User

Creates (or reuses) an admin user and prints an access token for local
testing of the admin endpoints.

Usage:
    python scripts/seed_admin.py admin@example.com "Site Admin"
"""

import asyncio
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from uniform_exchange.core.database import async_session_maker, engine  # noqa: E402
from uniform_exchange.core.security import create_access_token  # noqa: E402
from uniform_exchange.modules.schools.models import School  # noqa: E402, F401
from uniform_exchange.modules.users.models import UserRole  # noqa: E402
from uniform_exchange.modules.users.repository import UserRepository  # noqa: E402


async def seed_admin(email: str, name: str | None) -> None:
    """Create the admin user if it doesn't exist and print a token."""
    async with async_session_maker() as db:
        user = await UserRepository.get_by_email(db, email)

        if user:
            print(f"Admin already exists: {email}")
            if user.role != UserRole.ADMIN:
                user.role = UserRole.ADMIN
                print("  Role upgraded to admin")
        else:
            user = await UserRepository.create(db, email=email, name=name, role=UserRole.ADMIN)
            print("Admin created successfully!")

        await db.commit()

        token = create_access_token(
            str(user.id),
            additional_claims={"email": user.email, "role": user.role.value, "name": user.name},
        )

        print(f"  Email: {user.email}")
        print(f"  ID: {user.id}")
        print(f"  Role: {user.role.value}")
        print(f"  Access token: {token}")

    await engine.dispose()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    asyncio.run(seed_admin(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None))
