#!/usr/bin/env python
"""
FastAPI server for the Retro Meeting app
Serves the GraphQL API used by the web client, plus billing webhooks
"""
import logging

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from retro_meeting.billing_routes import router as billing_router
from retro_meeting.config import config
from retro_meeting.db import init_db
from retro_meeting.db.engine import test_connection
from retro_meeting.dependencies import get_storage
from retro_meeting.exceptions import (
    AppError,
    app_error_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from retro_meeting.graphql import graphql_app
from retro_meeting.logging_config import RequestIDMiddleware, setup_logging
from retro_meeting.services.storage_provider import LocalDiskStorageProvider, StorageProvider

setup_logging(env=config.ENV, log_level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

if config.is_dev:
    # Migrations own the schema outside dev
    try:
        init_db()
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

app = FastAPI(title="Retro Meeting API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(graphql_app, prefix="/graphql")
app.include_router(billing_router)


@app.get("/")
async def root():
    return {"message": "Retro Meeting API", "status": "running"}


@app.get("/health")
async def health():
    """Health check endpoint for load balancers and monitoring"""
    if not test_connection():
        return Response(
            content='{"status": "unhealthy", "database": "unreachable"}',
            media_type="application/json",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return {"status": "healthy", "service": "retro-meeting"}


@app.put("/storage/{key:path}")
async def put_local_upload(key: str, request: Request,
                           storage: StorageProvider = Depends(get_storage)):
    """Receive uploads signed by the local storage provider (dev only)"""
    if not isinstance(storage, LocalDiskStorageProvider):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    content_type = request.headers.get("Content-Type", "application/octet-stream")
    declared_length = request.headers.get("Content-Length")
    if declared_length is not None and (not declared_length.isdigit()
                                        or int(declared_length) > config.MAX_AVATAR_FILE_SIZE):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="upload is too large")

    # Chunked uploads carry no length, so the limit also applies while reading
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > config.MAX_AVATAR_FILE_SIZE:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="upload is too large")

    url = storage.put(key, bytes(body), content_type)
    logger.info(f"Stored local upload {key} ({len(body)} bytes)")
    return {"url": url}


@app.get("/storage/{key:path}")
async def get_local_upload(key: str, storage: StorageProvider = Depends(get_storage)):
    if not isinstance(storage, LocalDiskStorageProvider):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    data = storage.get(key)
    if data is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return Response(content=data)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
