"""
Bearer-token guard for the skills server's SSE transport.

serve_sse() builds the FastMCP SSE app, wraps it with TokenGuard when
settings.mcp.auth_token (SKILLSHELF_MCP_AUTH_TOKEN) is set, and runs it
under uvicorn. Requests must then carry

    Authorization: Bearer <token>

and get HTTP 401 otherwise. stdio mode never goes through this module.
"""

import hmac
import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("skillshelf.mcp.auth")


class TokenGuard(BaseHTTPMiddleware):
    """Reject requests whose bearer token does not match the configured one."""

    def __init__(self, app, token: str) -> None:
        super().__init__(app)
        self._expected = token.encode()

    def _presented_token(self, request: Request) -> Optional[str]:
        scheme, _, value = request.headers.get("authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not value.strip():
            return None
        return value.strip()

    async def dispatch(self, request: Request, call_next):
        presented = self._presented_token(request)
        if presented is None:
            logger.warning("Skills SSE: no bearer token from %s", request.client)
            return Response("Unauthorized", status_code=401)
        if not hmac.compare_digest(presented.encode(), self._expected):
            logger.warning("Skills SSE: wrong bearer token from %s", request.client)
            return Response("Unauthorized", status_code=401)
        return await call_next(request)


def secure_app(app, token: Optional[str]):
    """Return app behind a TokenGuard, or app itself when token is blank."""
    token = (token or "").strip()
    if not token:
        return app
    return TokenGuard(app, token=token)


def serve_sse(mcp, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """
    Serve a FastMCP server over SSE, guarded by the configured token.

    host and port default to settings.mcp.host / settings.mcp.port.
    """
    import anyio
    import uvicorn

    from ..config import settings

    host = host or settings.mcp.host
    port = port or settings.mcp.port
    app = secure_app(mcp.sse_app(), settings.mcp.auth_token)
    if isinstance(app, TokenGuard):
        logger.info("Skills SSE on %s:%d with bearer auth", host, port)
    else:
        logger.info("Skills SSE on %s:%d without auth (SKILLSHELF_MCP_AUTH_TOKEN unset)", host, port)

    async def _serve():
        config = uvicorn.Config(app, host=host, port=port, log_level=mcp.settings.log_level.lower())
        await uvicorn.Server(config).serve()

    anyio.run(_serve)
