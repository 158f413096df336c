#!/usr/bin/env python3
"""Load the built-in major category to industry map into the database"""

import os
import sys
import asyncio
import logging

# Add the repository root to the Python path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from backend.app.core.database import async_session_factory, engine
from backend.app.repositories.taxonomy_repository import TaxonomyRepository
from nil_engine.taxonomy import MAJOR_INDUSTRY_MAP, MAJOR_CATEGORY_DESCRIPTIONS

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def seed_major_categories() -> int:
    """Upsert every seed category; existing rows get the seed industries"""
    async with async_session_factory() as session:
        repo = TaxonomyRepository(session)
        for name, industries in MAJOR_INDUSTRY_MAP.items():
            await repo.upsert_major_category(
                name,
                list(industries),
                description=MAJOR_CATEGORY_DESCRIPTIONS.get(name)
            )
    return len(MAJOR_INDUSTRY_MAP)


async def main():
    try:
        count = await seed_major_categories()
        logger.info(f"Seeded {count} major categories")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except Exception as e:
        logger.error(f"Seeding failed: {str(e)}")
        sys.exit(1)
