"""Seed demo profiles and their roles into the database."""

import asyncio
import sys
from pathlib import Path

import yaml
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import get_settings
from app.models.user import UserRole
from app.repositories.profile_repository import DuplicateProfileError, ProfileRepository
from app.repositories.role_repository import RoleRepository


async def seed_profiles(session: AsyncSession) -> None:
    """Load profiles from YAML and insert each with its role row."""
    seed_path = Path(__file__).parent.parent / "seeds" / "profiles.yaml"

    if not seed_path.exists():
        print(f"Seed file not found: {seed_path}")
        return

    with open(seed_path) as f:
        data = yaml.safe_load(f)

    profiles = ProfileRepository(session)
    roles = RoleRepository(session)

    inserted = 0
    skipped = 0

    for entry in data.get("profiles", []):
        role = UserRole(entry["role"])
        try:
            async with session.begin_nested():
                await profiles.create(
                    user_id=entry["id"],
                    email=entry["email"],
                    full_name=entry.get("full_name"),
                    role=role,
                )
                await roles.insert_role(entry["id"], role)
        except DuplicateProfileError:
            print(f"  Skipping {entry['email']} (already exists)")
            skipped += 1
            continue

        print(f"  Inserted {entry['email']} as {role.value}")
        inserted += 1

    await session.commit()
    print(f"\nSummary: {inserted} inserted, {skipped} skipped")


async def main() -> None:
    """Main entry point."""
    print("Seeding profiles...")

    settings = get_settings()
    engine = create_async_engine(str(settings.database_url))
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async with session_factory() as session:
        await seed_profiles(session)

    await engine.dispose()
    print("Done!")


if __name__ == "__main__":
    asyncio.run(main())
