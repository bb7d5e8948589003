"""Shared helper functions for the HTTP transport routes."""

import json
from typing import Any

from robyn import Response


def json_response(data: Any, status_code: int = 200) -> Response:
    """Create a JSON response.

    Args:
        data: Data to serialize to JSON. Pydantic models are dumped with
            their aliases.
        status_code: HTTP status code (default: 200)

    Returns:
        Robyn Response with JSON body and appropriate headers
    """
    if hasattr(data, "model_dump"):
        body = json.dumps(data.model_dump(by_alias=True))
    else:
        body = json.dumps(data)

    return Response(
        status_code,
        {"Content-Type": "application/json"},
        body,
    )


def error_response(message: str, status_code: int = 400) -> Response:
    """Create an ``{"error": message}`` JSON response."""
    return json_response({"error": message}, status_code)
