"""
Logging middleware for FastAPI
Logs incoming requests and their responses
"""
import time
from fastapi import FastAPI, Request
from loguru import logger


class RequestLoggingMiddleware:
    """Middleware to log request information"""

    async def __call__(self, request: Request, call_next):
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(f"{request.method} {request.url.path}: {str(e)} occurred after {process_time:.3f}s")
            raise

        # For SSE this is the time to the first byte, not the stream lifetime
        process_time = time.time() - start_time
        logger.debug(f"{request.method} {request.url.path} -> {response.status_code} in {process_time:.3f}s")
        return response


def add_logging_middleware(app: FastAPI) -> None:
    """Add the request logging middleware to the FastAPI application"""
    app.middleware("http")(RequestLoggingMiddleware())
