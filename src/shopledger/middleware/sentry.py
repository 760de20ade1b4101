"""Attach request context to Sentry events."""

import sentry_sdk
from starlette.types import ASGIApp, Receive, Scope, Send

from shopledger.core.logging import NO_REQUEST_ID, get_request_id
from shopledger.middleware.logging import request_id_from_scope


class SentryContextMiddleware:
    """Tag Sentry events with the request id, method and path."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            # Outermost middleware: the id may not be in the context yet
            request_id = request_id_from_scope(scope) or get_request_id()
            if request_id != NO_REQUEST_ID:
                sentry_sdk.set_tag("request_id", request_id)
            sentry_sdk.set_context(
                "request",
                {"method": scope.get("method"), "path": scope.get("path"), "request_id": request_id},
            )

        await self.app(scope, receive, send)
