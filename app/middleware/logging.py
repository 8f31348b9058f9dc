import logging
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

PROGRESS_PATH_PARAMS = ("course_id", "lesson_id", "achievement_id")


def request_context(request: Request) -> dict:
    """Request id, acting user and progress ids known for this request so far."""
    context = {
        "request_id": request.state.request_id,
        "method": request.method,
        "path": request.url.path,
        "user_id": getattr(request.state, "user_id", None),
    }
    # Routing fills path params into the shared scope once the endpoint matched
    path_params = request.scope.get("path_params") or {}
    for name in PROGRESS_PATH_PARAMS:
        if name in path_params:
            context[name] = path_params[name]
    return context


def _describe(context: dict) -> str:
    who = context["user_id"] or "anonymous"
    ids = " ".join(f"{name}={context[name]}" for name in PROGRESS_PATH_PARAMS if name in context)
    return f"[{context['request_id']}] {context['method']} {context['path']} user={who}" + (f" {ids}" if ids else "")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request.state.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            context = request_context(request)
            context["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            logger.error(f"{_describe(context)} failed: {exc}", extra=context)
            raise

        context = request_context(request)
        context["status_code"] = response.status_code
        context["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
        logger.log(
            logging.WARNING if response.status_code >= 400 else logging.INFO,
            f"{_describe(context)} -> {response.status_code} ({context['duration_ms']}ms)",
            extra=context,
        )

        response.headers["X-Request-ID"] = context["request_id"]
        return response
