import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from geophoto.core.errors import AppError, ErrorKind

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.STORAGE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.DB: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed ({exc.kind.value}): {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.kind.value}): {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.kind is ErrorKind.NOT_AUTHENTICATED else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "kind": exc.kind.value},
        headers=headers,
    )


def init_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
