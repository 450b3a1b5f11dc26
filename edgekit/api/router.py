"""A tiny pattern router with handler chains.

Routes are tried in the order they were registered. Each route carries a
chain of handlers; the first handler returning a truthy value ends the
request. Handlers returning ``None`` act as middleware: they may inspect the
request, attach data to ``request.state`` and let the chain continue.
"""

import inspect
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from fastapi.responses import Response
from starlette.routing import compile_path
from starlette.types import Receive, Scope, Send

from edgekit.api.responses import create_response

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]

METHODS = ("get", "post", "put", "patch", "delete", "head", "options", "trace")
ALL = "all"


@dataclass
class Route:
    """A registered route."""
    method: str
    pattern: str
    regex: re.Pattern
    convertors: dict
    handlers: tuple[Handler, ...]

    def match(self, method: str, path: str) -> dict[str, Any] | None:
        """Return path parameters if the route matches, otherwise None."""
        if self.method != ALL and self.method != method.lower():
            return None
        found = self.regex.match(path)
        if not found:
            return None
        return {
            key: self.convertors[key].convert(value)
            for key, value in found.groupdict().items()
        }


class Router:
    """
    Pattern router for edge handlers.

    Usage:
        router = Router(base="/edge")
        router.get("/files/{name}", require_signed_url, serve_file)
        response = await router.fetch(request, settings)

    The router is also an ASGI application, so it can be served directly or
    mounted inside a FastAPI app.
    """

    def __init__(self, base: str = ""):
        """
        Args:
            base: Path prefix prepended to every pattern
        """
        self.base = base.rstrip("/")
        self.routes: list[Route] = []

    def route(self, method: str, pattern: str, *handlers: Handler) -> "Router":
        """Register handlers for a method (or ``"all"``) and path pattern."""
        regex, _, convertors = compile_path(self.base + pattern)
        self.routes.append(
            Route(
                method=method.lower(),
                pattern=pattern,
                regex=regex,
                convertors=convertors,
                handlers=handlers,
            )
        )
        return self

    def all(self, pattern: str, *handlers: Handler) -> "Router":
        return self.route(ALL, pattern, *handlers)

    def get(self, pattern: str, *handlers: Handler) -> "Router":
        return self.route("get", pattern, *handlers)

    def post(self, pattern: str, *handlers: Handler) -> "Router":
        return self.route("post", pattern, *handlers)

    def put(self, pattern: str, *handlers: Handler) -> "Router":
        return self.route("put", pattern, *handlers)

    def patch(self, pattern: str, *handlers: Handler) -> "Router":
        return self.route("patch", pattern, *handlers)

    def delete(self, pattern: str, *handlers: Handler) -> "Router":
        return self.route("delete", pattern, *handlers)

    def head(self, pattern: str, *handlers: Handler) -> "Router":
        return self.route("head", pattern, *handlers)

    def options(self, pattern: str, *handlers: Handler) -> "Router":
        return self.route("options", pattern, *handlers)

    def trace(self, pattern: str, *handlers: Handler) -> "Router":
        return self.route("trace", pattern, *handlers)

    async def fetch(self, request: Request, *arguments: Any) -> Any:
        """
        Handle a request.

        Args:
            request: The incoming request. Handlers may extend
                ``request.state``
            arguments: Extra arguments passed to every handler

        Returns:
            The return value of the first handler returning a truthy value,
            or None if no handler did
        """
        path = request.url.path

        for route in self.routes:
            params = route.match(request.method, path)
            if params is None:
                continue

            request.scope["path_params"] = params
            for handler in route.handlers:
                result = handler(request, *arguments)
                if inspect.isawaitable(result):
                    result = await result
                if result:
                    return result

        return None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI entry point. Unhandled requests get a 404 JSON response."""
        if scope["type"] != "http":
            return

        request = Request(scope, receive)
        response = await self.fetch(request)

        if not isinstance(response, Response):
            if response is not None:
                logger.warning(
                    f"Handler returned {type(response).__name__} "
                    f"for {request.method} {request.url.path}, expected a Response"
                )
            response = create_response(
                {"errorCode": "NotFound", "errorMessage": "No route matched"},
                404,
            )

        await response(scope, receive, send)
