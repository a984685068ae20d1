"""Centralized mapping of exceptions to error responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from photo_album.api.schemas import ErrorModel
from photo_album.config import Settings
from photo_album.domain.errors import PhotoAlbumError

_logger = logging.getLogger(__name__)


def error_response(model: ErrorModel, status_code: int) -> JSONResponse:
    """Serialize an error payload, omitting empty fields."""
    return JSONResponse(
        status_code=status_code,
        content=model.model_dump(by_alias=True, exclude_none=True),
    )


def register_error_handlers(app: FastAPI, settings: Settings) -> None:
    """Install the application-wide exception handlers."""

    async def handle_domain_error(
        request: Request, exc: PhotoAlbumError
    ) -> JSONResponse:
        return error_response(
            ErrorModel(error=exc.message, status_code=int(exc.status_code)),
            int(exc.status_code),
        )

    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        _logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(
            ErrorModel(
                error="Internal Server Error",
                message=str(exc) if settings.is_development else None,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            ),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    app.add_exception_handler(PhotoAlbumError, handle_domain_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
