"""Request id propagation and request logging."""

import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from shopledger.core.logging import get_logger, set_request_id

REQUEST_ID_HEADER = b"x-request-id"

logger = get_logger(__name__)


def request_id_from_scope(scope: Scope) -> str | None:
    """Client-supplied X-Request-ID, if any."""
    for name, value in scope.get("headers", []):
        if name.lower() == REQUEST_ID_HEADER and value:
            return value.decode("latin1")
    return None


class RequestIDMiddleware:
    """
    Give every request an id and log its start and completion.

    The client's X-Request-ID is reused when present, otherwise a UUID is
    generated. The id is echoed back on the response.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = request_id_from_scope(scope) or str(uuid.uuid4())
        set_request_id(request_id)
        logger.info("request.start", method=scope["method"], path=scope["path"])

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (REQUEST_ID_HEADER, request_id.encode("latin1")),
                ]
                logger.info("request.complete", status_code=message.get("status"))
            await send(message)

        await self.app(scope, receive, send_with_request_id)
