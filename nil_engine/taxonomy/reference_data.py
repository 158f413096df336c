"""Seed taxonomy: academic major categories and brand industry tags"""

from types import MappingProxyType

# Category name -> industries a brand in that space would recruit from
MAJOR_INDUSTRY_MAP = MappingProxyType({
    "Business & Finance": ("finance", "banking", "insurance", "consulting", "real_estate", "investment"),
    "Computer Science & IT": ("technology", "software", "gaming", "cybersecurity", "ai_ml", "data_science"),
    "Engineering": ("technology", "automotive", "aerospace", "manufacturing", "energy", "construction"),
    "Communications & Media": ("media", "entertainment", "advertising", "marketing", "broadcasting", "social_media"),
    "Health & Medicine": ("healthcare", "pharmaceutical", "fitness", "nutrition", "wellness", "medical_devices"),
    "Education": ("education", "edtech", "tutoring", "youth_development", "nonprofit"),
    "Arts & Design": ("fashion", "design", "entertainment", "media", "luxury", "retail"),
    "Sciences": ("pharmaceutical", "biotech", "research", "environmental", "energy", "agriculture"),
    "Social Sciences": ("nonprofit", "government", "consulting", "research", "hr", "social_services"),
    "Sports & Recreation": ("sports", "fitness", "entertainment", "apparel", "equipment", "media"),
    "Hospitality & Tourism": ("hospitality", "travel", "food_beverage", "entertainment", "luxury", "retail"),
    "Agriculture": ("agriculture", "food_beverage", "environmental", "retail", "manufacturing"),
})

MAJOR_CATEGORY_DESCRIPTIONS = MappingProxyType({
    "Business & Finance": "Business administration, finance, accounting, economics",
    "Computer Science & IT": "Computer science, software engineering, information technology",
    "Engineering": "All engineering disciplines",
    "Communications & Media": "Journalism, communications, public relations, media studies",
    "Health & Medicine": "Pre-med, nursing, health sciences, kinesiology",
    "Education": "Education, teaching, instructional design",
    "Arts & Design": "Fine arts, graphic design, fashion, architecture",
    "Sciences": "Biology, chemistry, physics, environmental science",
    "Social Sciences": "Psychology, sociology, political science",
    "Sports & Recreation": "Sports management, exercise science, athletic training",
    "Hospitality & Tourism": "Hotel management, tourism, culinary arts",
    "Agriculture": "Agriculture, food science, natural resources",
})

INDUSTRIES = (
    "sports", "fitness", "apparel", "technology", "software", "gaming",
    "finance", "banking", "insurance", "healthcare", "pharmaceutical",
    "food_beverage", "retail", "automotive", "media", "entertainment",
    "fashion", "luxury", "education", "nonprofit", "energy", "real_estate",
    "hospitality", "travel", "agriculture", "manufacturing", "consulting",
)


def categories_for_industries(major_industry_map, industries) -> list[str]:
    """
    Names of the categories whose industry list overlaps the given industries

    Args:
        major_industry_map: Mapping of category name to industry tags
        industries: Industry tags to look for

    Returns:
        Category names in map order
    """
    wanted = set(industries)
    return [
        name for name, category_industries in major_industry_map.items()
        if wanted.intersection(category_industries)
    ]
