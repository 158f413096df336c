"""Brand repository for database operations"""

from typing import List, Optional, Dict, Any
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, and_, desc

from backend.app.models.brand import Brand, BrandIndustry
from backend.app.core.logging import get_logger

logger = get_logger(__name__)


class BrandRepository:
    """Repository for brands and their industry tags"""

    def __init__(self, db: AsyncSession):
        """
        Initialize brand repository

        Args:
            db: Database session
        """
        self.db = db

    async def get_by_id(self, brand_id: UUID) -> Optional[Brand]:
        """
        Get brand by ID

        Args:
            brand_id: Brand UUID

        Returns:
            Brand if found, None otherwise
        """
        result = await self.db.execute(select(Brand).where(Brand.id == brand_id))
        return result.scalar_one_or_none()

    async def get_verified(self) -> List[Brand]:
        """Get every verified brand"""
        stmt = select(Brand).where(Brand.is_verified == True).order_by(Brand.created_at)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_industries(self, brand_id: UUID) -> List[BrandIndustry]:
        """
        Get industry rows for a brand

        Args:
            brand_id: Brand UUID

        Returns:
            Industry rows, primary first
        """
        stmt = select(BrandIndustry).where(
            BrandIndustry.brand_id == brand_id
        ).order_by(desc(BrandIndustry.is_primary), BrandIndustry.created_at)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_industry_names(self, brand_id: UUID) -> List[str]:
        """Industry tags of a brand"""
        result = await self.db.execute(
            select(BrandIndustry.industry).where(BrandIndustry.brand_id == brand_id)
        )
        return list(result.scalars().all())

    async def replace_industries(
        self,
        brand_id: UUID,
        industries: List[Dict[str, Any]]
    ) -> List[BrandIndustry]:
        """
        Replace all industry rows of a brand in one transaction

        Args:
            brand_id: Brand UUID
            industries: Dicts with `industry` and `is_primary`

        Returns:
            The newly inserted rows
        """
        try:
            await self.db.execute(delete(BrandIndustry).where(BrandIndustry.brand_id == brand_id))

            rows = [
                BrandIndustry(
                    brand_id=brand_id,
                    industry=item["industry"],
                    is_primary=item["is_primary"]
                )
                for item in industries
            ]
            self.db.add_all(rows)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Replacing industries failed for brand {brand_id}; rolled back")
            raise

        logger.info(f"Replaced industries for brand {brand_id}: {len(rows)} rows")
        return rows

    async def add_industry(self, brand_id: UUID, industry: str, is_primary: bool = False) -> BrandIndustry:
        """
        Add one industry row, demoting the current primary when needed

        Args:
            brand_id: Brand UUID
            industry: Industry tag
            is_primary: Whether the new row becomes the primary industry

        Returns:
            Created row
        """
        try:
            if is_primary:
                await self.db.execute(
                    update(BrandIndustry)
                    .where(BrandIndustry.brand_id == brand_id)
                    .values(is_primary=False)
                )

            row = BrandIndustry(brand_id=brand_id, industry=industry, is_primary=is_primary)
            self.db.add(row)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Adding industry {industry} failed for brand {brand_id}; rolled back")
            raise

        await self.db.refresh(row)
        logger.info(f"Added industry {industry} to brand {brand_id} (primary={is_primary})")
        return row

    async def remove_industry(self, brand_id: UUID, industry_id: UUID) -> bool:
        """
        Delete one industry row owned by the brand

        Args:
            brand_id: Brand UUID
            industry_id: BrandIndustry UUID

        Returns:
            True if a row was removed, False otherwise
        """
        stmt = delete(BrandIndustry).where(
            and_(
                BrandIndustry.id == industry_id,
                BrandIndustry.brand_id == brand_id
            )
        )
        result = await self.db.execute(stmt)
        await self.db.commit()

        removed = result.rowcount > 0
        if removed:
            logger.info(f"Removed industry {industry_id} from brand {brand_id}")
        return removed
