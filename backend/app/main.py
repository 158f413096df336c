"""FastAPI application entry point"""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from backend.app.core.config import settings
from backend.app.core.database import async_session_factory, engine
from backend.app.core.logging import setup_logging, get_logger
from backend.app.core.middleware import RequestContextMiddleware
from backend.app.core.exceptions import GradeUpException
from backend.app.repositories.taxonomy_repository import TaxonomyRepository
from backend.app.services.taxonomy_service import taxonomy_cache

# Setup logging
setup_logging()
logger = get_logger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
## GradeUp Matching - NIL Brand/Athlete Matching

Scores how well student-athletes fit brands and works out when athletes
can take on NIL work around their academic calendar.

### Features

* **Match Scoring**: 0-100 compatibility score from major, GPA, verification, scholar tier and reach
* **Match Queries**: Top brands for an athlete, filtered and paginated athletes for a brand, score stats
* **Taxonomy**: Major category to industry map and brand industry tags
* **Availability**: Athlete preferences, blackout windows and suggested deal dates
* **Academic Calendars**: Finals, midterms and breaks per school, maintained by athletic directors

### Authentication

All `/api/v1` endpoints except the taxonomy reads require a bearer token:
`Authorization: Bearer <token>`. The token subject is the caller's profile id.

### Roles

* **athlete**: Own availability, own matches and school calendar
* **brand**: Own industry tags and matched athletes
* **athletic_director**: Calendar of their school
* **admin**: Full access, including taxonomy refresh
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    openapi_tags=[
        {
            "name": "Matching",
            "description": "Score calculation, recalculation and match queries"
        },
        {
            "name": "Taxonomy",
            "description": "Industries, major categories and brand industry tags"
        },
        {
            "name": "Availability",
            "description": "Athlete availability preferences and deal timing"
        },
        {
            "name": "Calendar",
            "description": "School academic calendars"
        },
    ],
)

# Add custom middleware (order matters - first added is outermost)
app.add_middleware(RequestContextMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(GradeUpException)
async def gradeup_exception_handler(request: Request, exc: GradeUpException):
    """Handle custom GradeUp exceptions"""
    request_id = getattr(request.state, "request_id", "unknown")

    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"GradeUp exception: {exc.message}",
        extra={
            "request_id": request_id,
            "status_code": exc.status_code,
            "details": exc.details,
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.message,
            "details": exc.details,
            "request_id": request_id,
        }
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    request_id = getattr(request.state, "request_id", "unknown")

    logger.warning(
        f"Validation error: {exc.errors()}",
        extra={"request_id": request_id}
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation error",
            "details": jsonable_encoder(exc.errors()),
            "request_id": request_id,
        }
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    """Handle database integrity errors"""
    request_id = getattr(request.state, "request_id", "unknown")

    logger.error(
        f"Database integrity error: {str(exc)}",
        extra={"request_id": request_id},
        exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "error": "Conflicting write",
            "details": {"message": "The record already exists or references a missing record"},
            "request_id": request_id,
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all other exceptions"""
    request_id = getattr(request.state, "request_id", "unknown")

    logger.error(
        f"Unhandled exception: {str(exc)}",
        extra={"request_id": request_id},
        exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "details": {"message": "An unexpected error occurred"},
            "request_id": request_id,
        }
    )


@app.on_event("startup")
async def startup_event():
    """Application startup tasks"""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    # The service still starts without a database; requests load the map lazily
    try:
        async with async_session_factory() as session:
            await taxonomy_cache.refresh(TaxonomyRepository(session))
    except Exception as e:
        logger.warning(f"Could not preload taxonomy: {str(e)}")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown tasks"""
    logger.info("Shutting down application")
    await engine.dispose()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "taxonomy_loaded": taxonomy_cache.loaded}


# API routers
from backend.app.api import matches, taxonomy, availability, calendar

app.include_router(matches.router, prefix=f"{settings.API_V1_PREFIX}/matches", tags=["Matching"])
app.include_router(taxonomy.router, prefix=f"{settings.API_V1_PREFIX}/taxonomy", tags=["Taxonomy"])
app.include_router(availability.router, prefix=f"{settings.API_V1_PREFIX}/availability", tags=["Availability"])
app.include_router(calendar.router, prefix=f"{settings.API_V1_PREFIX}/calendar", tags=["Calendar"])
