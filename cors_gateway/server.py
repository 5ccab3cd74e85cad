import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import CollectorRegistry, Info
from prometheus_fastapi_instrumentator import Instrumentator

from cors_gateway.config import GatewayConfig, load_config
from cors_gateway.cors import CorsHeadersMiddleware
from cors_gateway.proxy.route import (
    UpstreamError,
    build_proxy_router,
    upstream_error_handler,
)
from cors_gateway.routes import build_health_router

logger = logging.getLogger("uvicorn.error")


def configure_tracing(config: GatewayConfig) -> None:
    """Install the global tracer provider; spans are exported only with an OTLP endpoint."""
    tracer_provider = TracerProvider(
        resource=Resource.create({"service.name": config.service_name})
    )
    trace.set_tracer_provider(tracer_provider)
    if config.otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(
            endpoint=config.otlp_endpoint,
            headers=config.otlp_headers or None,
        )
        tracer_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
        logger.info(f"Exporting traces to {config.otlp_endpoint}")


def log_startup_banner(config: GatewayConfig) -> None:
    proxy_url = f"http://localhost:{config.port}"
    logger.info("CORS Proxy Server Started")
    logger.info("=" * 30)
    logger.info(f"Proxy URL: {proxy_url}")
    logger.info(f"Backend URL: {config.backend_url}")
    logger.info(f"CORS policy: {config.cors_policy.name} ({config.environment})")
    logger.info(f"Clients should use: {proxy_url}{config.proxy_prefix}")
    logger.info("Available endpoints:")
    logger.info(f"   GET  {proxy_url}/health - Proxy health check")
    logger.info(f"   ALL  {proxy_url}{config.proxy_prefix}/* - Proxied to backend")
    if config.metrics_enabled:
        logger.info(f"   GET  {proxy_url}/metrics - Prometheus metrics")
    if config.cors_policy.allow_any_origin:
        logger.warning(
            "Any origin may read proxied responses; never expose this gateway publicly"
        )


def create_app(config: Optional[GatewayConfig] = None) -> FastAPI:
    """Build the gateway application; reads the environment when no config is given."""
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log_startup_banner(config)
        yield

    app = FastAPI(title=config.service_name, lifespan=lifespan)
    app.state.config = config

    app.add_middleware(CorsHeadersMiddleware, policy=config.cors_policy)
    app.add_exception_handler(UpstreamError, upstream_error_handler)

    app.include_router(build_health_router(config))

    if config.metrics_enabled:
        registry = CollectorRegistry()
        Instrumentator(registry=registry).instrument(app).expose(app)
        app_info = Info("cors_gateway", "Gateway Info", registry=registry)
        app_info.info(
            {"app_name": config.service_name, "backend": config.backend_url}
        )

    # Registered last: with an empty prefix this router is a catch-all
    app.include_router(build_proxy_router(config))

    if config.otlp_endpoint:
        FastAPIInstrumentor.instrument_app(app)

    return app
