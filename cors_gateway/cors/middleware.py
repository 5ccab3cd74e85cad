import logging

from starlette.datastructures import MutableHeaders
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from cors_gateway.cors.policy import CorsPolicy

logger = logging.getLogger("uvicorn.error")


def apply_cors_headers(headers: MutableHeaders, policy: CorsPolicy, origin) -> None:
    """Replace any Access-Control-* headers on a response with the policy's own."""
    for name in {k.lower() for k in headers.keys()}:
        if name.startswith("access-control-"):
            del headers[name]
    for name, value in policy.response_headers(origin).items():
        if name == "Vary":
            headers.add_vary_header(value)
        else:
            headers[name] = value


class CorsHeadersMiddleware(BaseHTTPMiddleware):
    """
    Answers every OPTIONS request itself and stamps CORS headers on
    every other response, whatever the upstream sent.
    """

    def __init__(self, app, policy: CorsPolicy):
        super().__init__(app)
        self.policy = policy

    async def dispatch(self, request: Request, call_next) -> Response:
        origin = request.headers.get("origin")
        if request.method == "OPTIONS":
            logger.debug(f"Preflight {request.url.path} from origin {origin}")
            response = Response(status_code=200)
        else:
            response = await call_next(request)
        apply_cors_headers(response.headers, self.policy, origin)
        return response
