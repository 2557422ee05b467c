import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.api.routes import deadlines, dependencies, signups, topics
from app.core.config import get_settings
from app.core.errors import NotFoundError, SignUpSheetError
from app.db.base import Base
from app.db.session import engine
from app import models  # noqa: F401

settings = get_settings()

# Logging configuration
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title=settings.project_name, lifespan=lifespan)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


@app.exception_handler(SignUpSheetError)
async def sign_up_sheet_error_handler(request: Request, exc: SignUpSheetError):
    logger.warning(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message})


app.include_router(topics.router, tags=["topics"])
app.include_router(signups.router, tags=["signups"])
app.include_router(dependencies.router, tags=["dependencies"])
app.include_router(deadlines.router, tags=["deadlines"])
