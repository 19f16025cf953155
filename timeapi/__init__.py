from timeapi.handler import (
    ALLOWED_METHODS,
    ALLOWED_ORIGIN,
    cors_headers,
    get_time,
    now_millis,
)

__all__ = [
    "ALLOWED_METHODS",
    "ALLOWED_ORIGIN",
    "cors_headers",
    "get_time",
    "now_millis",
]
