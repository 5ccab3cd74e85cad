from dataclasses import dataclass, field
from typing import Optional, Tuple
from urllib.parse import urlparse

from cors_gateway import vars as gateway_vars
from cors_gateway.cors.policy import (
    ConfigurationError,
    CorsPolicy,
    PRODUCTION,
    select_policy,
)

__all__ = ["ConfigurationError", "GatewayConfig", "load_config"]

# Levels uvicorn.run accepts for log_level
LOG_LEVELS = ("critical", "error", "warning", "info", "debug", "trace")

TRUE_VALUES = ("true", "1", "yes", "on")
FALSE_VALUES = ("false", "0", "no", "off")


@dataclass(frozen=True)
class GatewayConfig:
    """
    Settings the gateway is started with; built once and passed to create_app.

    The CORS policy is not set directly: it follows from ``environment``
    (and ``allowed_origins`` in production).
    """

    backend_url: str = "http://localhost:5001"
    host: str = "0.0.0.0"
    port: int = 8081
    proxy_prefix: str = "/api"
    timeout: float = 30.0
    environment: str = PRODUCTION
    allowed_origins: Tuple[str, ...] = ()
    log_level: str = "info"
    metrics_enabled: bool = True
    service_name: str = "cors-gateway"
    otlp_endpoint: Optional[str] = None
    otlp_headers: str = ""
    cors_policy: CorsPolicy = field(init=False)

    def __post_init__(self):
        environment = (self.environment or "").strip().lower()
        object.__setattr__(self, "environment", environment)
        object.__setattr__(self, "allowed_origins", tuple(self.allowed_origins))
        object.__setattr__(
            self, "cors_policy", select_policy(environment, self.allowed_origins)
        )

    @property
    def backend_host(self) -> str:
        return urlparse(self.backend_url).netloc


def normalize_backend_url(url: str) -> str:
    parsed = urlparse((url or "").strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(
            f"Backend URL must be an absolute http(s) URL, got '{url}'"
        )
    return url.strip().rstrip("/")


def normalize_prefix(prefix: str) -> str:
    prefix = (prefix or "").strip().rstrip("/")
    if prefix and not prefix.startswith("/"):
        prefix = "/" + prefix
    return prefix


def _parse_port(value: str) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Port must be an integer, got '{value}'")
    if not 0 < port < 65536:
        raise ConfigurationError(f"Port out of range: {port}")
    return port


def _parse_timeout(value: str) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Proxy timeout must be a number, got '{value}'")
    if timeout <= 0:
        raise ConfigurationError(f"Proxy timeout must be positive, got {timeout}")
    return timeout


def _parse_log_level(value: str) -> str:
    level = (value or "").strip().lower()
    if level not in LOG_LEVELS:
        raise ConfigurationError(
            f"Log level must be one of {', '.join(LOG_LEVELS)}, got '{value}'"
        )
    return level


def _parse_flag(name: str, value: str) -> bool:
    flag = (value or "").strip().lower()
    if flag in TRUE_VALUES:
        return True
    if flag in FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be true or false, got '{value}'")


def load_config() -> GatewayConfig:
    """Build a validated GatewayConfig from the environment (see cors_gateway.vars)."""
    return GatewayConfig(
        backend_url=normalize_backend_url(gateway_vars.BACKEND_URL),
        host=gateway_vars.HOST,
        port=_parse_port(gateway_vars.PORT),
        proxy_prefix=normalize_prefix(gateway_vars.PROXY_PREFIX),
        timeout=_parse_timeout(gateway_vars.PROXY_TIMEOUT),
        environment=gateway_vars.ENVIRONMENT,
        allowed_origins=tuple(gateway_vars.CORS_ALLOWED_ORIGINS),
        log_level=_parse_log_level(gateway_vars.LOG_LEVEL),
        metrics_enabled=_parse_flag(
            "GATEWAY_METRICS_ENABLED", gateway_vars.METRICS_ENABLED
        ),
        service_name=gateway_vars.SERVICE_NAME,
        otlp_endpoint=gateway_vars.OTLP_ENDPOINT,
        otlp_headers=gateway_vars.OTLP_HEADERS,
    )
