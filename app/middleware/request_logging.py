import time
import logging

from fastapi import Request

logger = logging.getLogger("access")

PROCESS_TIME_HEADER = "X-Process-Time-Ms"


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


async def request_logging_middleware(request: Request, call_next):
    """Log one access line per request, tagged with the acting user and tenant."""
    start_time = time.perf_counter()

    response = await call_next(request)

    process_time = round((time.perf_counter() - start_time) * 1000, 2)
    response.headers[PROCESS_TIME_HEADER] = str(process_time)

    # set by get_current_user; absent for public and rejected requests
    user = getattr(request.state, "user", None)

    logger.log(
        _level_for(response.status_code),
        "",
        extra={
            "client_addr": request.client.host if request.client else "unknown",
            "user_id": user.id if user else "-",
            "company_id": user.company_id if user else "-",
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": process_time,
        },
    )

    return response
