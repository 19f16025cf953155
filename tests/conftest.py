"""Shared pytest fixtures for the time API tests."""

import azure.functions as func
import pytest

FIXED_MILLIS = 1700000000000


def make_request(method: str, url: str = "/api/data") -> func.HttpRequest:
    return func.HttpRequest(method=method, url=url, headers={}, params={}, body=b"")


@pytest.fixture
def fixed_clock():
    """Clock pinned to FIXED_MILLIS, in epoch seconds like time.time."""
    return lambda: FIXED_MILLIS / 1000
