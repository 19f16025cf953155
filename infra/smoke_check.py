"""
Checks a live deployment using the stack outputs.

Usage:
    python -m infra.smoke_check --site-url "$(pulumi stack output siteURL)" \
        --api-url "$(pulumi stack output apiURL)"
"""
import argparse
import logging
import sys
import time
from typing import Callable, List, Optional

import requests

DEFAULT_TOLERANCE_MS = 5 * 60 * 1000
TIMEOUT = 10


def _join(base: str, path: str) -> str:
    return f"{base.rstrip('/')}/{path}"


def check_deployment(
    site_url: str,
    api_url: Optional[str] = None,
    session: Optional[requests.Session] = None,
    tolerance_ms: int = DEFAULT_TOLERANCE_MS,
    clock: Callable[[], float] = time.time,
) -> List[str]:
    """Returns the list of failed checks, empty when the deployment looks healthy."""
    session = session or requests.Session()
    failures = []

    try:
        r = session.get(_join(site_url, "config.json"), timeout=TIMEOUT)
        r.raise_for_status()
        config = r.json()
    except (requests.RequestException, ValueError) as e:
        logging.error(f"Could not read config.json from {site_url}: {str(e)}")
        return [f"config.json unreadable: {str(e)}"]

    api = config.get("api") if isinstance(config, dict) else None
    if not isinstance(api, str) or not api:
        logging.error(f"config.json from {site_url} has no 'api' URL: {config!r}")
        return [f"config.json has no 'api' URL: {config!r}"]

    if api_url and api_url.rstrip("/") != api.rstrip("/"):
        failures.append(f"config.json api '{api}' does not match '{api_url}'")

    try:
        r = session.get(_join(api, "data"), timeout=TIMEOUT)
        if r.status_code != 200:
            failures.append(f"GET data returned {r.status_code}")
        else:
            body = r.json()
            now = body.get("now") if isinstance(body, dict) else None
            if not isinstance(body, dict) or list(body) != ["now"]:
                failures.append(f"GET data returned unexpected body: {body}")
            elif not isinstance(now, int) or isinstance(now, bool):
                failures.append(f"GET data 'now' is not an integer: {now!r}")
            elif abs(now - int(clock() * 1000)) > tolerance_ms:
                failures.append(f"GET data 'now' is {now}, too far from local time")

        r = session.options(_join(api, "data"), timeout=TIMEOUT)
        if r.status_code != 204:
            failures.append(f"OPTIONS data returned {r.status_code}")
        if r.headers.get("Access-Control-Allow-Origin") != "*":
            failures.append("OPTIONS data is missing Access-Control-Allow-Origin: *")
        if r.headers.get("Access-Control-Allow-Methods") != "GET":
            failures.append("OPTIONS data is missing Access-Control-Allow-Methods: GET")
    except (requests.RequestException, ValueError) as e:
        logging.error(f"API call failed: {str(e)}")
        failures.append(f"API unreachable: {str(e)}")

    for failure in failures:
        logging.error(failure)
    return failures


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Smoke-check a deployed static site and time API.")
    parser.add_argument("--site-url", type=str, required=True, help="The siteURL stack output.")
    parser.add_argument("--api-url", type=str, default=None, help="The apiURL stack output.")
    parser.add_argument("--tolerance-ms", type=int, default=DEFAULT_TOLERANCE_MS,
                        help="Allowed clock difference between server and local time.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    failures = check_deployment(args.site_url, args.api_url, tolerance_ms=args.tolerance_ms)
    if failures:
        sys.exit(1)
    logging.info("Deployment looks healthy.")


if __name__ == "__main__":
    main()
