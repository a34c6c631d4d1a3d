"""Request body caps for the upload routes.

FastAPI parses a multipart form before any route dependency runs, so the
size of an upload has to be policed while the body is still arriving. The
storage layer still checks every admitted file on its own.
"""

import logging

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from comply.api.errors import http_error
from comply.exceptions import SizeExceededError

logger = logging.getLogger(__name__)

# Boundaries, part headers and the metadata fields around the file
MULTIPART_ALLOWANCE = 64 * 1024

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class UploadSizeLimitMiddleware:
    """Refuse request bodies larger than the file limit of their route.

    ``limits`` maps a path prefix to the largest file accepted under it. A
    declared Content-Length over the cap is refused before any byte is read;
    otherwise the body is counted as it streams in and reading stops as soon
    as the cap is passed.
    """

    def __init__(
        self,
        app: ASGIApp,
        limits: dict[str, int],
        allowance: int = MULTIPART_ALLOWANCE,
    ):
        self.app = app
        self.limits = limits
        self.allowance = allowance

    def file_limit(self, scope: Scope) -> int | None:
        """Largest file accepted for this request, or None if unrestricted."""
        if scope["type"] != "http" or scope["method"] not in BODY_METHODS:
            return None
        path = scope["path"]
        for prefix, max_bytes in self.limits.items():
            if path == prefix or path.startswith(f"{prefix}/"):
                return max_bytes
        return None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        max_bytes = self.file_limit(scope)
        if max_bytes is None:
            await self.app(scope, receive, send)
            return

        error = SizeExceededError(max_bytes)
        max_body = max_bytes + self.allowance

        declared = Headers(scope=scope).get("content-length", "")
        if declared.isdigit() and int(declared) > max_body:
            logger.warning(
                f"Upload rejected: {scope['path']} declared {declared} bytes, cap is {max_body}"
            )
            await _too_large(error)(scope, receive, send)
            return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > max_body:
                    logger.warning(
                        f"Upload rejected: {scope['path']} streamed past the {max_body} byte cap"
                    )
                    # Surfaces as a 413 through FastAPI's exception handling
                    raise http_error(error)
            return message

        async def tracked_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracked_send)
        except Exception:
            if received <= max_body or response_started:
                raise
            await _too_large(error)(scope, receive, send)


def _too_large(error: SizeExceededError) -> JSONResponse:
    exc = http_error(error)
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)
