"""Request routing and responses for edge handlers."""

from edgekit.api.responses import create_response, create_response_from_error
from edgekit.api.router import Router

__all__ = [
    "Router",
    "create_response",
    "create_response_from_error",
]
