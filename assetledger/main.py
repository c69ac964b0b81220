from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import os

from assetledger.database import engine, Base
import assetledger.models  # noqa: F401 - register all models
from assetledger.config import settings
from assetledger.errors import DomainError, PartialCascadeFailure
from assetledger.routers import health, assets, employees, consumables, software, cascades, reports, ui

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    # Create tables for dev mode without alembic
    if settings.DATABASE_URL.startswith("sqlite:///./"):
        os.makedirs(os.path.dirname(settings.DATABASE_URL.removeprefix("sqlite:///")), exist_ok=True)
    Base.metadata.create_all(bind=engine)
    logger.info("assetledger started (%s)", settings.APP_ENV)
    yield


app = FastAPI(
    title="assetledger",
    description="Asset, employee and consumable records with an append-only audit ledger",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    body = {"detail": exc.detail, "error": type(exc).__name__}
    if isinstance(exc, PartialCascadeFailure):
        body["cascade"] = exc.report
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body))


app.include_router(health.router)
app.include_router(assets.router)
app.include_router(employees.router)
app.include_router(consumables.router)
app.include_router(software.router)
app.include_router(cascades.router)
app.include_router(reports.router)
app.include_router(ui.router)
