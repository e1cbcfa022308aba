import time
import logging
from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("access")


def _operator(request: Request) -> str:
    context = getattr(request.app.state, "context", None)
    user = context.auth.user if context is not None else None
    return user.username if user else "anonymous"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Access log of the gateway routes, tagged with the signed-in operator"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"

        response = await call_next(request)

        process_time = time.time() - start_time
        if response.status_code == status.HTTP_401_UNAUTHORIZED:
            icon = "🔒"
        elif response.status_code >= 400:
            icon = "⚠️"
        else:
            icon = "✅"
        logger.info(
            f"{icon} {request.method} {path} - "
            f"Operator: {_operator(request)} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.4f}s"
        )

        response.headers["X-Process-Time"] = str(process_time)
        return response
