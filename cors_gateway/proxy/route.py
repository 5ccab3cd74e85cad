import logging

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from opentelemetry import trace

from cors_gateway.config import GatewayConfig
from cors_gateway.utils import redact_headers
from cors_gateway.utils.exception_logging import (
    format_exception_message,
    log_exception_with_details,
)

tracer = trace.get_tracer(__name__)
logger = logging.getLogger("uvicorn.error")

PROXY_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]

# Hop-by-hop headers that should NOT be forwarded (RFC 2616)
HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
}

# httpx hands us the decoded body, so the upstream framing no longer applies
STRIPPED_RESPONSE_HEADERS = HOP_BY_HOP_HEADERS | {"content-encoding", "content-length"}


class UpstreamError(Exception):
    """The upstream could not be reached, the connection broke, or its body was undecodable."""

    def __init__(self, method: str, target_url: str, cause: BaseException):
        self.method = method
        self.target_url = target_url
        self.message = format_exception_message(cause)
        super().__init__(f"{method} {target_url} failed: {self.message}")


def get_target_url(request: Request, backend_url: str) -> str:
    """Upstream URL for a request: same path and query on the backend."""
    path = request.url.path
    if not path.startswith("/"):
        path = "/" + path

    query_string = str(request.url.query)
    if query_string:
        path = f"{path}?{query_string}"

    return f"{backend_url.rstrip('/')}{path}"


def prepare_headers(request: Request, config: GatewayConfig) -> httpx.Headers:
    """
    Prepare headers for forwarding to the backend.
    Removes hop-by-hop headers and makes the request look like it was
    addressed to the backend itself (Host and Origin rewritten).
    Repeated headers are kept as separate entries.
    """
    headers = httpx.Headers(
        [
            (name, value)
            for name, value in request.headers.items()
            if name.lower() not in HOP_BY_HOP_HEADERS
            and name.lower() not in ("host", "content-length")
        ]
    )

    client_ip = request.client.host if request.client else "unknown"
    existing_xff = ", ".join(headers.get_list("x-forwarded-for"))
    headers["x-forwarded-for"] = f"{existing_xff}, {client_ip}".strip(", ")
    headers["x-forwarded-host"] = request.headers.get("host", "")
    headers["x-forwarded-proto"] = request.url.scheme

    headers["host"] = config.backend_host
    headers["origin"] = config.backend_url
    return headers


def build_relay_response(upstream: httpx.Response, head: bool = False) -> Response:
    """
    Copy status, body and end-to-end headers of an upstream response.

    A HEAD answer has no body to decode, so its Content-Length and
    Content-Encoding still describe the GET representation and are kept.
    """
    response = Response(content=upstream.content, status_code=upstream.status_code)
    stripped = STRIPPED_RESPONSE_HEADERS
    if head:
        stripped = HOP_BY_HOP_HEADERS
        if "content-length" in upstream.headers:
            del response.headers["content-length"]
    for name, value in upstream.headers.multi_items():
        if name.lower() in stripped:
            continue
        response.headers.append(name, value)
    return response


async def forward_to_upstream(request: Request, config: GatewayConfig) -> Response:
    """
    Forward an incoming request to the backend and relay its answer.
    Transport failures and undecodable bodies surface as UpstreamError;
    HTTP error statuses from the backend are relayed like any other response.
    """
    with tracer.start_as_current_span("proxy_request") as span:
        target_url = get_target_url(request, config.backend_url)
        span.set_attribute("proxy.target_url", target_url)
        span.set_attribute("proxy.method", request.method)

        headers = prepare_headers(request, config)
        body = await request.body()

        logger.info(f"Proxying {request.method} {request.url.path} -> {target_url}")
        logger.debug(f"Forwarded headers: {redact_headers(headers)}")

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(config.timeout),
                follow_redirects=False,
            ) as client:
                upstream = await client.request(
                    method=request.method,
                    url=target_url,
                    headers=headers,
                    content=body,
                )
        # RequestError covers transport failures and DecodingError
        except httpx.RequestError as e:
            span.set_attribute("proxy.error", type(e).__name__)
            log_exception_with_details(
                logger, f"[Proxy] {request.method} {request.url.path}", e
            )
            raise UpstreamError(request.method, target_url, e) from e

        span.set_attribute("proxy.status_code", upstream.status_code)
        logger.info(
            f"Response {upstream.status_code} for {request.method} {request.url.path}"
        )
        return build_relay_response(upstream, head=request.method == "HEAD")


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Proxy server error",
            "error": exc.message,
        },
    )


def build_proxy_router(config: GatewayConfig) -> APIRouter:
    """Catch-all router forwarding everything under the proxy prefix."""
    router = APIRouter(prefix=config.proxy_prefix)

    async def proxy_all(request: Request) -> Response:
        return await forward_to_upstream(request, config)

    if config.proxy_prefix:
        router.add_api_route("", proxy_all, methods=PROXY_METHODS)
    router.add_api_route("/{path:path}", proxy_all, methods=PROXY_METHODS)
    return router
