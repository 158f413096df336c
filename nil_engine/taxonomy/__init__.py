"""Industry and major taxonomy"""

from nil_engine.taxonomy.reference_data import (
    MAJOR_INDUSTRY_MAP,
    MAJOR_CATEGORY_DESCRIPTIONS,
    INDUSTRIES,
    categories_for_industries,
)

__all__ = [
    'MAJOR_INDUSTRY_MAP',
    'MAJOR_CATEGORY_DESCRIPTIONS',
    'INDUSTRIES',
    'categories_for_industries',
]
