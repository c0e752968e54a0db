#!/usr/bin/env python
"""Create a railway admin user."""

import argparse
import asyncio

from vendorvault_api.database import async_session_maker, create_tables
from vendorvault_api.models.domain.user import UserRole, UserStatus
from vendorvault_api.repositories.user_repository import UserRepository
from vendorvault_api.security.password import get_password_service
from vendorvault_api.utils.validation import (
    capitalize_name,
    is_valid_mobile,
    normalize_phone,
    password_strength_errors,
)


async def create_railway_admin(email: str, password: str, name: str, phone: str) -> bool:
    """Create an ACTIVE railway admin account."""
    errors = password_strength_errors(password)
    if errors:
        print(f"Password validation failed: {errors}")
        return False
    if not is_valid_mobile(phone):
        print("Phone must be a valid 10 digit mobile number")
        return False

    await create_tables()

    async with async_session_maker() as session:
        repo = UserRepository(session)
        if await repo.email_exists(email):
            print(f"User {email} already exists")
            return False

        await repo.create(
            email=email.strip().lower(),
            password_hash=get_password_service().hash_password(password),
            name=capitalize_name(name),
            phone=normalize_phone(phone),
            role=UserRole.RAILWAY_ADMIN.value,
            status=UserStatus.ACTIVE.value,
        )
        await session.commit()

    print(f"Railway admin created: {email}")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a railway admin user")
    parser.add_argument("--email", required=True, help="Email address")
    parser.add_argument("--password", required=True, help="Password (min 8 chars, upper, lower, digit)")
    parser.add_argument("--name", required=True, help="Display name")
    parser.add_argument("--phone", required=True, help="10 digit mobile number")
    args = parser.parse_args()

    created = asyncio.run(create_railway_admin(args.email, args.password, args.name, args.phone))
    raise SystemExit(0 if created else 1)
