#!/usr/bin/env python3
"""
create_admin.py - Create the first ADMIN profile

Registration through the API is admin-only, so a fresh database needs one
admin created from the command line. Run after `alembic upgrade head`.

Usage:
    python scripts/create_admin.py --username admin --name "Office" --password secret123
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from app.core.db.engine import AsyncSessionLocal  # noqa: E402
from app.modules.users.models import Role  # noqa: E402
from app.modules.users.schemas import RegisterRequest  # noqa: E402
from app.modules.users.service import UsersService  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


async def create_admin(username: str, name: str, password: str) -> None:
    async with AsyncSessionLocal() as session:
        result = await UsersService.create(
            session,
            RegisterRequest(username=username, name=name, password=password, role=Role.ADMIN),
        )
        await session.commit()
    logger.info(f"Admin '{result.user.username}' created (id={result.user.id})")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create an ADMIN profile")
    parser.add_argument("--username", required=True)
    parser.add_argument("--name", required=True)
    parser.add_argument("--password", required=True)
    args = parser.parse_args()

    asyncio.run(create_admin(args.username, args.name, args.password))


if __name__ == "__main__":
    main()
