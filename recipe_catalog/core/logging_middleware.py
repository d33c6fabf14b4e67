import logging
import json
import time
import random
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from recipe_catalog.core.config import settings

# One JSON line per kept request. Not propagated so the root handler does not repeat it.
structured_logger = logging.getLogger("api.structured_log")
structured_logger.propagate = False

if not structured_logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    structured_logger.addHandler(handler)
    structured_logger.setLevel(logging.INFO)


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    Wide-event request logging with tail sampling.

    Kept requests:
    1. every server error (status >= 500)
    2. every slow request (> SLOW_THRESHOLD_MS)
    3. a random LOG_SAMPLE_RATE share of the rest
    """

    SLOW_THRESHOLD_MS = 500

    def __init__(self, app, sample_rate: float | None = None):
        super().__init__(app)
        self.sample_rate = settings.LOG_SAMPLE_RATE if sample_rate is None else sample_rate

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = None
        error_details = None
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            error_details = str(e)
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000

            if status_code >= 500:
                should_log = True
            elif duration_ms > self.SLOW_THRESHOLD_MS:
                should_log = True
            else:
                should_log = random.random() < self.sample_rate

            if should_log:
                # Set by get_current_user on authenticated routes
                user = getattr(request.state, "user", None)

                log_payload = {
                    "timestamp": time.time(),
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                    "duration_ms": round(duration_ms, 2),
                    "client_ip": request.client.host if request.client else None,
                    "user_agent": request.headers.get("user-agent"),
                    "query_params": dict(request.query_params),
                    "error": error_details,
                    "user_id": str(user.id) if user else None,
                    "user_email": user.email if user else None,
                    "user_name": user.name if user else None,
                }

                structured_logger.info(json.dumps(log_payload))

        return response
