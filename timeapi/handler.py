import json
import logging
import time
from typing import Callable, Dict

import azure.functions as func

# CORS - the static site lives on a different origin than the function app
ALLOWED_ORIGIN = "*"
ALLOWED_METHODS = "GET"


def cors_headers() -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": ALLOWED_ORIGIN,
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
    }


def now_millis(clock: Callable[[], float] = time.time) -> int:
    """Current wall-clock time as milliseconds since the Unix epoch."""
    return int(clock() * 1000)


def get_time(req: func.HttpRequest, clock: Callable[[], float] = time.time) -> func.HttpResponse:
    """
    Answers GET with {"now": <unix-millis>} and OPTIONS with an empty preflight.
    CORS headers go on every response.
    """
    headers = cors_headers()

    if req.method.upper() == "OPTIONS":
        return func.HttpResponse(status_code=204, headers=headers)

    headers["Content-Type"] = "application/json"
    now = now_millis(clock)
    logging.info(f"Serving server time: {now}")

    return func.HttpResponse(
        json.dumps({"now": now}),
        status_code=200,
        headers=headers,
        mimetype="application/json"
    )
