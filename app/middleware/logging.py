import logging
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _duration_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request, tagged with a request id.

    A caller-supplied X-Request-ID is kept, so a client retrying a submit can
    be traced across attempts. The id is echoed back and reused in error bodies.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        log_extra = {"request_id": request_id, "method": request.method, "path": request.url.path}
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} - ERROR",
                extra={**log_extra, "duration_ms": _duration_ms(started), "error": str(exc)}
            )
            raise

        status_code = response.status_code
        if status_code >= 500:
            log_level = logging.ERROR
        elif status_code >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO
        logger.log(
            log_level,
            f"[{request_id}] {request.method} {request.url.path} - {status_code}",
            extra={**log_extra, "status_code": status_code, "duration_ms": _duration_ms(started)}
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
