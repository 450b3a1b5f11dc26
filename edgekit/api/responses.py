"""Uniform JSON responses for edge handlers."""

from collections.abc import Mapping
from typing import Any

from fastapi.responses import JSONResponse, Response


def create_response(
    body: Mapping[str, Any] | None = None,
    status: int = 200,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """
    Create a response.

    Args:
        body: JSON body, None for an empty response. An empty mapping is
            sent as `{}`
        status: Status code, defaults to 200
        headers: Additional headers. ``Content-Type: application/json`` is
            added automatically when there is a body

    Returns:
        A JSON response, or an empty response
    """
    if body is not None:
        return JSONResponse(dict(body), status_code=status, headers=dict(headers or {}))

    return Response(status_code=status, headers=dict(headers or {}))


def create_response_from_error(
    error: BaseException,
    status: int = 500,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """Create a JSON response carrying an error's class name and message."""
    return create_response(
        {"errorCode": type(error).__name__, "errorMessage": str(error)},
        status,
        headers,
    )
