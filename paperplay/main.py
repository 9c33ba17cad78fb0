import logging
import os

import uvicorn as uvicorn
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request

from paperplay.core.config import settings
from paperplay.core.celery_utils import create_celery
from paperplay.core.exceptions import (AlreadyBoundError, DuplicateCodeError, InvalidPayloadError, NotFoundError,
                                       TicketingException, UploadFailedError)
from paperplay.api.api_v1.api import api_router
from paperplay import schemas

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    NotFoundError: 404,
    DuplicateCodeError: 409,
    AlreadyBoundError: 409,
    UploadFailedError: 502,
    InvalidPayloadError: 400,
}


def status_code_of(exc: TicketingException) -> int:
    for exc_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return status_code
    return 500


async def ticketing_exception_handler(_request: Request, exc: TicketingException):
    status_code = status_code_of(exc)
    if status_code >= 500:
        logger.error(f"{exc.error_kind}: {exc.message}")
    response_content = schemas.ErrorResult(error_kind=exc.error_kind, detail=exc.message, code=exc.code)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(response_content, exclude_none=True)
    )


def create_app() -> FastAPI:
    current_app = FastAPI(title=settings.PROJECT_NAME,
                          description=settings.PROJECT_DESCRIPTION,
                          openapi_url=f"{settings.API_V1_STR}/paperplay_api.json",
                          docs_url="/",
                          version=settings.PROJECT_VERSION)

    from paperplay.core.logging import configure_logging
    configure_logging()

    current_app.celery_app = create_celery()
    current_app.include_router(api_router, prefix=settings.API_V1_STR)
    current_app.add_exception_handler(TicketingException, ticketing_exception_handler)

    if settings.STORAGE_BACKEND == "local":
        os.makedirs(settings.FILE_STORAGE, exist_ok=True)
        current_app.mount("/media", StaticFiles(directory=settings.FILE_STORAGE), name="media")

    if settings.BACKEND_CORS_ORIGINS:
        current_app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if settings.CREATE_TABLES_ON_STARTUP:
        from paperplay.db.init_db import init_db
        from paperplay.db.session import engine
        init_db(engine)

    return current_app


app = create_app()
celery = app.celery_app


if __name__ == "__main__":
    uvicorn.run("paperplay.main:app", port=8000, reload=True)
