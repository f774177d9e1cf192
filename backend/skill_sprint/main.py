"""FastAPI application entry point."""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from skill_sprint.api.routes import agent, goals, insights, portfolio, roadmap, state
from skill_sprint.core.config import get_settings
from skill_sprint.core.database import close_db, init_db
from skill_sprint.core.logging import configure_logging, get_logger
from skill_sprint.services.roadmap_service import RoadmapCache

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    configure_logging(debug=settings.DEBUG)
    logger.info(
        "Starting Skill Sprint Coach",
        version=settings.APP_VERSION,
        env=settings.ENV,
        roadmap=str(settings.ROADMAP_PATH),
    )
    await init_db()
    yield
    # Shutdown
    logger.info("Shutting down Skill Sprint Coach")
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Learning-sprint tracker: roadmap progress, rituals, logs, goals and insights",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)
app.state.roadmap_cache = RoadmapCache(settings.ROADMAP_PATH)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def tag_and_log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Skill-Coach"] = "v1"
    if request.url.path.startswith("/api"):
        logger.info(
            "Request handled",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
    return response


# Include routers
app.include_router(roadmap.router, prefix="/api")
app.include_router(state.router, prefix="/api")
app.include_router(insights.router, prefix="/api")
app.include_router(portfolio.router, prefix="/api")
app.include_router(goals.router, prefix="/api")
app.include_router(agent.router, prefix="/api")


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "env": settings.ENV,
    }


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }


def run() -> None:
    """Console entry point: ``skill-sprint``."""
    import uvicorn

    uvicorn.run(
        "skill_sprint.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
