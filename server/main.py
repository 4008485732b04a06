"""Entry point for the storage server."""

import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.exceptions import (
    AuthenticationFailure,
    MalformedRequest,
    NerestException,
    PathNotFound,
    UnableToPerformOperation,
)
from common.logging_config import setup_logging
from server.config import SERVER_HOST, SERVER_PORT
from server.routes import storage_router
from server.schemas import ErrorResponse

logger = setup_logging('server')

app = FastAPI(
    title="Nerest Storage Server",
    description="Local file hierarchy exposed through path-bound capability tokens",
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


def _error_response(status_code: int, exc: NerestException, headers: dict = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=str(exc), code=exc.code).model_dump(),
        headers=headers,
    )


@app.exception_handler(AuthenticationFailure)
async def authentication_failure_handler(request: Request, exc: AuthenticationFailure):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Authentication failure: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(
        status.HTTP_401_UNAUTHORIZED, exc, headers={"WWW-Authenticate": "Bearer"}
    )


@app.exception_handler(MalformedRequest)
async def malformed_request_handler(request: Request, exc: MalformedRequest):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Malformed request: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, exc)


@app.exception_handler(PathNotFound)
async def path_not_found_handler(request: Request, exc: PathNotFound):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Path not found: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(status.HTTP_404_NOT_FOUND, exc)


@app.exception_handler(UnableToPerformOperation)
async def unable_to_perform_handler(request: Request, exc: UnableToPerformOperation):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Storage operation failed: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc)


@app.exception_handler(NerestException)
async def nerest_exception_handler(request: Request, exc: NerestException):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Nerest exception: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(detail=str(exc), code=NerestException.code).model_dump()
    )


app.include_router(storage_router)


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "server.main:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
    )


if __name__ == "__main__":
    main()
