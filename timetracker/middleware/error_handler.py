import logging

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from timetracker.exceptions import OpenSegmentExists, SegmentNotFound

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI):
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        sentry_sdk.capture_exception(exc)
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "type": type(exc).__name__,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc)},
        )

    @app.exception_handler(SegmentNotFound)
    async def segment_not_found_handler(request: Request, exc: SegmentNotFound):
        return JSONResponse(
            status_code=404,
            content={"detail": "Segment not found"},
        )

    @app.exception_handler(OpenSegmentExists)
    async def open_segment_exists_handler(request: Request, exc: OpenSegmentExists):
        return JSONResponse(
            status_code=409,
            content={"detail": str(exc), "open_segment_id": exc.segment_id},
        )
