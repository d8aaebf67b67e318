"""MoodFeed API - FastAPI application."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from sqlalchemy import select, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine

from moodfeed.api.v1.api import api_router
from moodfeed.core.config import settings
from moodfeed.core.errors import AppError, SetupRequiredError, StoreUnavailableError, classify_db_error, error_body
from moodfeed.core.logging import setup_logging
from moodfeed.models.user import Profile

setup_logging()
logger = logging.getLogger("moodfeed")


async def check_database(engine: AsyncEngine) -> AppError | None:
    """None when the store is reachable and migrated, else the classified error."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.execute(select(Profile.id).limit(1))
    except DBAPIError as e:
        return classify_db_error(e)
    except OSError:
        return StoreUnavailableError("Database is unreachable, try again later.")
    return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    from moodfeed.db.session import engine

    problem = await check_database(engine)
    if problem is None:
        logger.info("Database: OK")
    elif isinstance(problem, SetupRequiredError):
        logger.error("Database schema missing: run `alembic upgrade head`")
    else:
        logger.warning("Database check failed: %s", problem.message)
    logger.info("API: /api/v1 | Docs: /docs | Health: /health | Ready (DB): /ready")
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix="/api")

# Serve uploaded selfies (mapped to users: uploads/users/{user_id}/...)
uploads_dir = Path(settings.UPLOAD_DIR).resolve()
uploads_dir.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(uploads_dir)), name="uploads")


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=error_body(exc), headers=headers)


@app.exception_handler(DBAPIError)
async def db_error_handler(request: Request, exc: DBAPIError):
    err = classify_db_error(exc)
    logger.error("%s %s failed: %s (%s)", request.method, request.url.path, err.kind, exc.__class__.__name__)
    return JSONResponse(status_code=err.status_code, content=error_body(err))


@app.get("/")
async def root():
    return {
        "name": settings.APP_NAME,
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "api": "/api/v1",
    }


@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    return Response(status_code=204)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/ready")
async def ready():
    """Health check including DB and schema - distinguishes 'retry later' from 'setup required'."""
    from moodfeed.db.session import engine

    problem = await check_database(engine)
    if problem is None:
        return {"status": "ok", "database": "connected"}
    return JSONResponse(status_code=problem.status_code, content={"status": "error", **error_body(problem)})
