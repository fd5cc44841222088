"""
Global handler for exceptions that escape a route.

Service-level failures are raised as HTTPException subclasses (see
app.core.exceptions) and handled by FastAPI itself. Anything else ends up
here: it is logged with its traceback and answered with a generic 500 so one
failed action never takes the process down.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error on %s %s: %s", request.method, request.url.path, exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "detail": "Internal server error",
        },
    )
