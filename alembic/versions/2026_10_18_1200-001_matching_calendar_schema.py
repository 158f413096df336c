"""Matching and academic calendar schema

Revision ID: 001
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from datetime import datetime, timezone
import uuid

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from nil_engine.taxonomy import MAJOR_INDUSTRY_MAP, MAJOR_CATEGORY_DESCRIPTIONS

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    # Create profiles table
    op.create_table(
        'profiles',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('role', sa.Enum('athlete', 'brand', 'athletic_director', 'admin', name='profile_role'), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_profiles_email'), 'profiles', ['email'], unique=True)

    # Create schools table
    op.create_table(
        'schools',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('short_name', sa.String(length=50), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=50), nullable=True),
        sa.Column('division', sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_schools_name'), 'schools', ['name'], unique=False)
    op.create_index(op.f('ix_schools_division'), 'schools', ['division'], unique=False)

    # Create sports table
    op.create_table(
        'sports',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    # Create athletic_directors table
    op.create_table(
        'athletic_directors',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('profile_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('school_id', postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_athletic_directors_profile_id'), 'athletic_directors', ['profile_id'], unique=False)
    op.create_index(op.f('ix_athletic_directors_school_id'), 'athletic_directors', ['school_id'], unique=False)

    # Create major_categories table
    major_categories = op.create_table(
        'major_categories',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('industries', postgresql.ARRAY(sa.String()), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index('ix_major_categories_industries', 'major_categories', ['industries'], unique=False, postgresql_using='gin')

    # Create athletes table
    op.create_table(
        'athletes',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('profile_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('school_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('sport_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('major_category_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('major', sa.String(length=255), nullable=True),
        sa.Column('academic_year', sa.String(length=50), nullable=True),
        sa.Column('position', sa.String(length=100), nullable=True),
        sa.Column('gpa', sa.Numeric(precision=3, scale=2), nullable=True),
        sa.Column('cumulative_gpa', sa.Numeric(precision=3, scale=2), nullable=True),
        sa.Column('gradeup_score', sa.Integer(), nullable=False),
        sa.Column('total_followers', sa.Integer(), nullable=False),
        sa.Column('scholar_tier', sa.Enum('bronze', 'silver', 'gold', 'platinum', name='scholar_tier'), nullable=True),
        sa.Column('verified', sa.Boolean(), nullable=False),
        sa.Column('enrollment_verified', sa.Boolean(), nullable=False),
        sa.Column('sport_verified', sa.Boolean(), nullable=False),
        sa.Column('grades_verified', sa.Boolean(), nullable=False),
        sa.Column('is_searchable', sa.Boolean(), nullable=False),
        sa.Column('accepting_deals', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.ForeignKeyConstraint(['sport_id'], ['sports.id'], ),
        sa.ForeignKeyConstraint(['major_category_id'], ['major_categories.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_athletes_profile_id'), 'athletes', ['profile_id'], unique=True)
    op.create_index(op.f('ix_athletes_school_id'), 'athletes', ['school_id'], unique=False)
    op.create_index(op.f('ix_athletes_sport_id'), 'athletes', ['sport_id'], unique=False)
    op.create_index(op.f('ix_athletes_major_category_id'), 'athletes', ['major_category_id'], unique=False)
    op.create_index(op.f('ix_athletes_gradeup_score'), 'athletes', ['gradeup_score'], unique=False)
    op.create_index(op.f('ix_athletes_is_searchable'), 'athletes', ['is_searchable'], unique=False)
    op.create_index(op.f('ix_athletes_accepting_deals'), 'athletes', ['accepting_deals'], unique=False)

    # Create brands table
    op.create_table(
        'brands',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('profile_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('industry', sa.String(length=255), nullable=True),
        sa.Column('logo_url', sa.String(length=500), nullable=True),
        sa.Column('website_url', sa.String(length=500), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_brands_profile_id'), 'brands', ['profile_id'], unique=True)
    op.create_index(op.f('ix_brands_company_name'), 'brands', ['company_name'], unique=False)
    op.create_index(op.f('ix_brands_is_verified'), 'brands', ['is_verified'], unique=False)

    # Create brand_industries table
    op.create_table(
        'brand_industries',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('brand_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('industry', sa.String(length=100), nullable=False),
        sa.Column('is_primary', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['brand_id'], ['brands.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_brand_industries_brand_id'), 'brand_industries', ['brand_id'], unique=False)
    op.create_index(op.f('ix_brand_industries_industry'), 'brand_industries', ['industry'], unique=False)
    # At most one primary industry per brand
    op.create_index(
        'uq_brand_industries_primary', 'brand_industries', ['brand_id'],
        unique=True, postgresql_where=sa.text('is_primary')
    )

    # Create athlete_brand_matches table
    op.create_table(
        'athlete_brand_matches',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('athlete_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('brand_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('match_score', sa.Integer(), nullable=False),
        sa.Column('major_match', sa.Boolean(), nullable=False),
        sa.Column('industry_match', sa.Boolean(), nullable=False),
        sa.Column('values_match', sa.Boolean(), nullable=False),
        sa.Column('calculated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('match_score >= 0 AND match_score <= 100', name='ck_match_score_range'),
        sa.ForeignKeyConstraint(['athlete_id'], ['athletes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['brand_id'], ['brands.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('athlete_id', 'brand_id', name='uq_athlete_brand_match')
    )
    op.create_index(op.f('ix_athlete_brand_matches_athlete_id'), 'athlete_brand_matches', ['athlete_id'], unique=False)
    op.create_index(op.f('ix_athlete_brand_matches_brand_id'), 'athlete_brand_matches', ['brand_id'], unique=False)
    op.create_index(op.f('ix_athlete_brand_matches_match_score'), 'athlete_brand_matches', ['match_score'], unique=False)
    op.create_index(
        'ix_athlete_brand_matches_athlete_score', 'athlete_brand_matches',
        ['athlete_id', sa.text('match_score DESC')], unique=False
    )

    # Create academic_calendars table
    op.create_table(
        'academic_calendars',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('school_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            'event_type',
            sa.Enum('finals', 'midterms', 'break', 'graduation', 'registration', 'other', name='academic_event_type'),
            nullable=False
        ),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('no_nil_activity', sa.Boolean(), nullable=False),
        sa.Column('academic_year', sa.String(length=20), nullable=True),
        sa.Column('semester', sa.Enum('fall', 'spring', 'summer', 'winter', name='semester'), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('start_date <= end_date', name='ck_academic_event_dates'),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_academic_calendars_school_id'), 'academic_calendars', ['school_id'], unique=False)
    op.create_index(op.f('ix_academic_calendars_event_type'), 'academic_calendars', ['event_type'], unique=False)
    op.create_index(
        'ix_academic_calendars_school_dates', 'academic_calendars',
        ['school_id', 'start_date', 'end_date'], unique=False
    )

    # Create athlete_availability table
    op.create_table(
        'athlete_availability',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('athlete_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('blocked_periods', postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column('study_hours', postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column('max_deals_per_month', sa.Integer(), server_default='5', nullable=False),
        sa.Column('no_finals_deals', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('no_midterms_deals', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column(
            'preferred_deal_days', postgresql.ARRAY(sa.String()),
            server_default=sa.text("ARRAY['friday', 'saturday', 'sunday']"), nullable=False
        ),
        sa.Column('min_notice_days', sa.Integer(), server_default='3', nullable=False),
        sa.Column('max_hours_per_week', sa.Integer(), server_default='10', nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('version', sa.Integer(), server_default='1', nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['athlete_id'], ['athletes.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_athlete_availability_athlete_id'), 'athlete_availability', ['athlete_id'], unique=True)

    # Seed major categories
    now = datetime.now(timezone.utc)
    op.bulk_insert(
        major_categories,
        [
            {
                'id': uuid.uuid4(),
                'name': name,
                'description': MAJOR_CATEGORY_DESCRIPTIONS.get(name),
                'industries': list(industries),
                'created_at': now,
                'updated_at': now,
            }
            for name, industries in MAJOR_INDUSTRY_MAP.items()
        ]
    )


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_index(op.f('ix_athlete_availability_athlete_id'), table_name='athlete_availability')
    op.drop_table('athlete_availability')

    op.drop_index('ix_academic_calendars_school_dates', table_name='academic_calendars')
    op.drop_index(op.f('ix_academic_calendars_event_type'), table_name='academic_calendars')
    op.drop_index(op.f('ix_academic_calendars_school_id'), table_name='academic_calendars')
    op.drop_table('academic_calendars')

    op.drop_index('ix_athlete_brand_matches_athlete_score', table_name='athlete_brand_matches')
    op.drop_index(op.f('ix_athlete_brand_matches_match_score'), table_name='athlete_brand_matches')
    op.drop_index(op.f('ix_athlete_brand_matches_brand_id'), table_name='athlete_brand_matches')
    op.drop_index(op.f('ix_athlete_brand_matches_athlete_id'), table_name='athlete_brand_matches')
    op.drop_table('athlete_brand_matches')

    op.drop_index('uq_brand_industries_primary', table_name='brand_industries')
    op.drop_index(op.f('ix_brand_industries_industry'), table_name='brand_industries')
    op.drop_index(op.f('ix_brand_industries_brand_id'), table_name='brand_industries')
    op.drop_table('brand_industries')

    op.drop_index(op.f('ix_brands_is_verified'), table_name='brands')
    op.drop_index(op.f('ix_brands_company_name'), table_name='brands')
    op.drop_index(op.f('ix_brands_profile_id'), table_name='brands')
    op.drop_table('brands')

    op.drop_index(op.f('ix_athletes_accepting_deals'), table_name='athletes')
    op.drop_index(op.f('ix_athletes_is_searchable'), table_name='athletes')
    op.drop_index(op.f('ix_athletes_gradeup_score'), table_name='athletes')
    op.drop_index(op.f('ix_athletes_major_category_id'), table_name='athletes')
    op.drop_index(op.f('ix_athletes_sport_id'), table_name='athletes')
    op.drop_index(op.f('ix_athletes_school_id'), table_name='athletes')
    op.drop_index(op.f('ix_athletes_profile_id'), table_name='athletes')
    op.drop_table('athletes')

    op.drop_index('ix_major_categories_industries', table_name='major_categories')
    op.drop_table('major_categories')

    op.drop_index(op.f('ix_athletic_directors_school_id'), table_name='athletic_directors')
    op.drop_index(op.f('ix_athletic_directors_profile_id'), table_name='athletic_directors')
    op.drop_table('athletic_directors')

    op.drop_table('sports')

    op.drop_index(op.f('ix_schools_division'), table_name='schools')
    op.drop_index(op.f('ix_schools_name'), table_name='schools')
    op.drop_table('schools')

    op.drop_index(op.f('ix_profiles_email'), table_name='profiles')
    op.drop_table('profiles')

    # Drop enums
    sa.Enum(name='semester').drop(op.get_bind())
    sa.Enum(name='academic_event_type').drop(op.get_bind())
    sa.Enum(name='scholar_tier').drop(op.get_bind())
    sa.Enum(name='profile_role').drop(op.get_bind())
