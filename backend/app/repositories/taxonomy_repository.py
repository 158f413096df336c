"""Taxonomy repository for major category reference data"""

from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from backend.app.models.match import MajorCategory
from backend.app.core.logging import get_logger

logger = get_logger(__name__)


class TaxonomyRepository:
    """Repository for major categories and their industry mapping"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_major_categories(self) -> List[MajorCategory]:
        """All major categories ordered by name"""
        result = await self.db.execute(select(MajorCategory).order_by(MajorCategory.name))
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> Optional[MajorCategory]:
        """Get a major category by its unique name"""
        result = await self.db.execute(select(MajorCategory).where(MajorCategory.name == name))
        return result.scalar_one_or_none()

    async def get_major_industry_map(self) -> Dict[str, List[str]]:
        """
        Category name to industry tags, as stored

        Returns:
            Dict keyed by category name, in name order
        """
        categories = await self.get_major_categories()
        return {category.name: list(category.industries or []) for category in categories}

    async def upsert_major_category(
        self,
        name: str,
        industries: List[str],
        description: Optional[str] = None
    ) -> MajorCategory:
        """
        Create a category or overwrite the industries of an existing one

        Args:
            name: Category name
            industries: Industry tags
            description: Optional description

        Returns:
            Stored category
        """
        category = await self.get_by_name(name)
        if category is None:
            category = MajorCategory(name=name)
            self.db.add(category)

        category.industries = list(industries)
        if description is not None:
            category.description = description

        await self.db.commit()
        await self.db.refresh(category)

        logger.info(f"Stored major category: {name}")
        return category
