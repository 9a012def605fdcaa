import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lounge import __version__
from lounge.api import api_router
from lounge.core.config import settings
from lounge.core.exceptions import StoreConflictError
from lounge.core.logging import setup_logging
from lounge.db.base import create_tables

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    await create_tables()
    logger.info(f"{settings.PROJECT_NAME} started, storage key '{settings.STORAGE_KEY}'")
    yield


app = FastAPI(
    title="Lounge Membership API",
    description="Airport lounge memberships, digital cards and access verification",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.exception_handler(StoreConflictError)
async def store_conflict_handler(request: Request, exc: StoreConflictError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": "Customer data changed in another session, please retry"},
    )


@app.get("/health")
async def health_check():
    return {"status": "ok", "version": __version__}
