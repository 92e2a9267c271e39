import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .custom import (
    ConfigurationError,
    CrawlTimeoutError,
    EmptyInputError,
    EmptyResultError,
    InvalidArgumentError,
    JobFailedError,
    NotFoundError,
    ParseError,
    RateLimitError,
    RemoteServiceError,
)

logger = logging.getLogger(__name__)


async def configuration_error_handler(_request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("Configuration error: %s", exc.message)
    return JSONResponse(status_code=500, content={"detail": exc.message})


async def invalid_argument_error_handler(_request: Request, exc: InvalidArgumentError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": exc.message})


async def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": exc.message})


async def empty_input_error_handler(_request: Request, exc: EmptyInputError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": exc.message})


async def remote_service_error_handler(_request: Request, exc: RemoteServiceError) -> JSONResponse:
    logger.error(
        "%s error: %s (status=%s)", exc.service, exc.message, exc.status_code
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": f"{exc.service} error: {exc.message}",
            "service": exc.service,
            "upstream_status": exc.status_code,
            "upstream_body": exc.body,
        },
    )


async def rate_limit_error_handler(_request: Request, exc: RateLimitError) -> JSONResponse:
    logger.warning("Rate limit hit for %s", exc.service)
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded for {exc.service}"},
    )


async def job_failed_error_handler(_request: Request, exc: JobFailedError) -> JSONResponse:
    logger.error("Crawl job %s failed: %s", exc.job_id, exc.message)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


async def crawl_timeout_error_handler(_request: Request, exc: CrawlTimeoutError) -> JSONResponse:
    logger.warning("Crawl timed out after %d attempts", exc.attempts)
    return JSONResponse(
        status_code=504,
        content={"detail": str(exc), "elapsed_seconds": round(exc.elapsed_seconds, 1)},
    )


async def empty_result_error_handler(_request: Request, exc: EmptyResultError) -> JSONResponse:
    logger.error("Empty crawl result: %s", exc.message)
    return JSONResponse(status_code=502, content={"detail": exc.message})


async def parse_error_handler(_request: Request, exc: ParseError) -> JSONResponse:
    logger.error("LLM output could not be parsed: %s", exc.message)
    return JSONResponse(status_code=502, content={"detail": exc.message})
