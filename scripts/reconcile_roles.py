"""Back-fill missing user_roles rows from profile roles.

Profiles written before the role table existed, or by a client that
updated only the profile, can carry a role with no matching role row. Such
users hold no roles until the row exists. This script reports them and,
unless ``--dry-run`` is given, inserts the missing rows in one transaction.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import get_settings
from app.dependencies import InfrastructureContainer, commit_session
from app.repositories.profile_repository import ProfileRepository
from app.repositories.role_repository import RoleRepository
from app.services.role_service import RoleService
from app.utils.logging import setup_logging

logger = logging.getLogger("reconcile_roles")


async def reconcile(dry_run: bool) -> int:
    """Report (and optionally fix) drift. Returns the number of drifted profiles."""
    settings = get_settings()
    infra = InfrastructureContainer.from_settings(settings)
    try:
        await infra.verify()
        async with infra.session_factory() as session:
            service = RoleService(RoleRepository(session), ProfileRepository(session), infra.redis)

            report = await service.consistency_report()
            for item in report.items:
                print(f"  {item.user_id}: profile role {item.profile_role.value} has no role row")

            if dry_run or not report.total:
                print(f"\nSummary: {report.total} profile(s) out of sync")
                return report.total

            inserted = await service.reconcile()
            await commit_session(session, infra.redis)
            print(f"\nSummary: {inserted} role row(s) inserted")
            return report.total
    finally:
        await infra.close()


async def main() -> None:
    parser = argparse.ArgumentParser(description="Back-fill user_roles from profile roles")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report profiles that are out of sync",
    )
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.log_level, "console")
    await reconcile(args.dry_run)


if __name__ == "__main__":
    asyncio.run(main())
