# backend/brain/api/routing.py

from typing import Any, Callable
from fastapi import Request, Response
from fastapi.routing import APIRoute
from brain.utils.sanitize import sanitize

class SanitizedRequest(Request):
    """Request whose decoded JSON body has operator keys removed."""

    async def json(self) -> Any:
        if not hasattr(self, "_sanitized_json"):
            self._sanitized_json = sanitize(await super().json())
        return self._sanitized_json

class SanitizedRoute(APIRoute):
    """Route class that hands endpoints a SanitizedRequest.

    FastAPI decodes JSON bodies through ``Request.json()`` before validation, so
    every body parameter of a route using this class is built from sanitized data.
    """

    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def sanitized_route_handler(request: Request) -> Response:
            request = SanitizedRequest(request.scope, request.receive)
            return await original_route_handler(request)

        return sanitized_route_handler
