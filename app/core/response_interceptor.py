"""
Success Response Interceptor Middleware.
Wraps every successful JSON response in the envelope both front ends expect.
"""

from typing import Callable
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.middleware.base import BaseHTTPMiddleware
import json


# Key for skipping the interceptor on specific routes
SKIP_INTERCEPTOR_KEY = "skip_interceptor"

# FastAPI's own documentation endpoints are never wrapped
EXCLUDED_PATHS = ("/openapi.json", "/docs", "/redoc")


class SuccessResponseInterceptor(BaseHTTPMiddleware):
    """
    Wraps 2xx JSON responses as:
    {
        "success": true,
        "count": <length> (only when data is a list),
        "data": <original response>
    }

    Routes decorated with @skip_interceptor are passed through untouched.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        if request.url.path in EXCLUDED_PATHS:
            return response

        if not (200 <= response.status_code < 300):
            return response

        if getattr(request.state, SKIP_INTERCEPTOR_KEY, False):
            return response

        if "application/json" not in response.headers.get("content-type", ""):
            return response

        body = b""
        async for chunk in response.body_iterator:
            body += chunk

        headers = dict(response.headers)
        headers.pop("content-length", None)

        try:
            payload = json.loads(body.decode())
        except (json.JSONDecodeError, UnicodeDecodeError):
            return Response(
                content=body,
                status_code=response.status_code,
                headers=headers,
            )

        envelope = {"success": True, "data": payload}
        if isinstance(payload, list):
            envelope["count"] = len(payload)

        return JSONResponse(
            content=envelope,
            status_code=response.status_code,
            headers=headers,
        )


def skip_interceptor(func: Callable) -> Callable:
    """
    Mark a route so its response is returned without the success envelope.

    Usage:
        @router.delete("/{order_id}")
        @skip_interceptor
        async def delete_order(...):
            return {"message": "Order deleted successfully"}
    """
    setattr(func, SKIP_INTERCEPTOR_KEY, True)
    return func


class CustomAPIRoute(APIRoute):
    """Copies the skip_interceptor flag from the endpoint onto request.state."""

    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def custom_route_handler(request: Request) -> Response:
            if getattr(self.endpoint, SKIP_INTERCEPTOR_KEY, False):
                setattr(request.state, SKIP_INTERCEPTOR_KEY, True)
            return await original_route_handler(request)

        return custom_route_handler
