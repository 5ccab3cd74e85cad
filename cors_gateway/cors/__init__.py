from cors_gateway.cors.backend import configure_backend_cors
from cors_gateway.cors.middleware import CorsHeadersMiddleware
from cors_gateway.cors.policy import (
    DEVELOPMENT_POLICY,
    ConfigurationError,
    CorsPolicy,
    production_policy,
    select_policy,
)

__all__ = [
    "DEVELOPMENT_POLICY",
    "ConfigurationError",
    "CorsHeadersMiddleware",
    "CorsPolicy",
    "configure_backend_cors",
    "production_policy",
    "select_policy",
]
