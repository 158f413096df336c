"""Match schemas for API requests and responses"""

from typing import List, Optional
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict, field_validator


class MatchCalculateRequest(BaseModel):
    """Request schema for scoring one athlete against one brand"""
    athlete_id: UUID = Field(..., description="Athlete to score")
    brand_id: UUID = Field(..., description="Brand to score against")


class MatchCalculateResponse(BaseModel):
    """Response schema for a single score calculation"""
    athlete_id: UUID
    brand_id: UUID
    match_score: int = Field(..., ge=0, le=100, description="Compatibility score between 0 and 100")


class RecalculationFailure(BaseModel):
    """One pair that could not be scored"""
    id: str = Field(..., description="Brand or athlete id that failed")
    error: str


class RecalculationResponse(BaseModel):
    """Response schema for bulk recalculation"""
    total: int = Field(..., description="Pairs attempted")
    succeeded: int = Field(..., description="Pairs scored and stored")
    count: int = Field(..., description="Same as succeeded")
    failed: List[RecalculationFailure] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result) -> "RecalculationResponse":
        return cls(
            total=result.total,
            succeeded=result.succeeded,
            count=result.count,
            failed=[RecalculationFailure(**f) for f in result.failed],
        )


class BrandSummary(BaseModel):
    """Brand fields shown next to a match"""
    id: UUID
    company_name: str
    industry: Optional[str] = None
    logo_url: Optional[str] = None
    website_url: Optional[str] = None
    is_verified: bool = False
    city: Optional[str] = None
    state: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SchoolSummary(BaseModel):
    id: UUID
    name: str
    short_name: Optional[str] = None
    division: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SportSummary(BaseModel):
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class MajorCategorySummary(BaseModel):
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class AthleteSummary(BaseModel):
    """Athlete fields shown to brands"""
    id: UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    major: Optional[str] = None
    academic_year: Optional[str] = None
    position: Optional[str] = None
    gpa: Optional[float] = None
    cumulative_gpa: Optional[float] = None
    gradeup_score: int = 0
    total_followers: int = 0
    scholar_tier: Optional[str] = None
    verified: bool = False
    school: Optional[SchoolSummary] = None
    sport: Optional[SportSummary] = None
    major_category: Optional[MajorCategorySummary] = None

    @classmethod
    def from_athlete(cls, athlete) -> "AthleteSummary":
        """Create summary from Athlete model"""
        profile = athlete.profile
        return cls(
            id=athlete.id,
            first_name=profile.first_name if profile else None,
            last_name=profile.last_name if profile else None,
            avatar_url=profile.avatar_url if profile else None,
            major=athlete.major,
            academic_year=athlete.academic_year,
            position=athlete.position,
            gpa=athlete.gpa,
            cumulative_gpa=athlete.cumulative_gpa,
            gradeup_score=athlete.gradeup_score or 0,
            total_followers=athlete.total_followers or 0,
            scholar_tier=athlete.scholar_tier.value if athlete.scholar_tier else None,
            verified=bool(athlete.verified),
            school=SchoolSummary.model_validate(athlete.school) if athlete.school else None,
            sport=SportSummary.model_validate(athlete.sport) if athlete.sport else None,
            major_category=(
                MajorCategorySummary.model_validate(athlete.major_category)
                if athlete.major_category else None
            ),
        )


class BrandMatchResponse(BaseModel):
    """A match as seen by an athlete"""
    id: UUID
    athlete_id: UUID
    brand_id: UUID
    match_score: int
    major_match: bool
    industry_match: bool
    values_match: bool
    calculated_at: datetime
    brand: Optional[BrandSummary] = None

    model_config = ConfigDict(from_attributes=True)


class AthleteMatchResponse(BaseModel):
    """A match as seen by a brand"""
    id: UUID
    athlete_id: UUID
    brand_id: UUID
    match_score: int
    major_match: bool
    industry_match: bool
    values_match: bool
    calculated_at: datetime
    athlete: AthleteSummary

    @classmethod
    def from_match(cls, match) -> "AthleteMatchResponse":
        return cls(
            id=match.id,
            athlete_id=match.athlete_id,
            brand_id=match.brand_id,
            match_score=match.match_score,
            major_match=match.major_match,
            industry_match=match.industry_match,
            values_match=match.values_match,
            calculated_at=match.calculated_at,
            athlete=AthleteSummary.from_athlete(match.athlete),
        )


class MatchingAthletesResponse(BaseModel):
    """Paginated athletes matched to a brand"""
    athletes: List[AthleteMatchResponse]
    total: int = Field(..., description="Size of the whole filtered set, not the page")
    limit: int
    offset: int


class MatchStatsResponse(BaseModel):
    """Score distribution for one athlete"""
    total_matches: int
    average_score: int
    high_matches: int = Field(..., description="Matches scoring 80 or more")
    medium_matches: int = Field(..., description="Matches scoring 60 to 79")
    low_matches: int = Field(..., description="Matches scoring below 60")
    major_matches: int
    industry_matches: int


class IndustrySearchRequest(BaseModel):
    """Request schema for finding athletes by industry"""
    industries: List[str] = Field(..., min_length=1, description="Industry tags")
    limit: Optional[int] = Field(None, ge=1, le=100)
    min_gpa: Optional[float] = Field(None, ge=0, le=5)

    @field_validator('industries')
    @classmethod
    def validate_industries(cls, v):
        clean = [industry.strip() for industry in v if industry.strip()]
        if not clean:
            raise ValueError('At least one industry must be specified')
        return clean


class IndustrySearchResponse(BaseModel):
    athletes: List[AthleteSummary]
    total: int

