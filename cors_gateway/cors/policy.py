"""
Named cross-origin policies shared by the gateway and the backend helper.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

DEVELOPMENT = "development"
PRODUCTION = "production"

DEFAULT_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS")


class ConfigurationError(ValueError):
    """Raised when the gateway is started with invalid settings."""


@dataclass(frozen=True)
class CorsPolicy:
    name: str
    allow_origins: Tuple[str, ...]
    allow_methods: Tuple[str, ...] = DEFAULT_METHODS
    allow_headers: Tuple[str, ...] = ()
    expose_headers: Tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: Optional[int] = None

    @property
    def allow_any_origin(self) -> bool:
        return "*" in self.allow_origins

    def is_origin_allowed(self, origin: Optional[str]) -> bool:
        if self.allow_any_origin:
            return True
        return bool(origin) and origin in self.allow_origins

    def response_headers(self, origin: Optional[str] = None) -> Dict[str, str]:
        """
        Headers to attach to a response for a request carrying ``origin``.

        A restricted policy echoes an allowed origin back and adds
        ``Vary: Origin``; a disallowed origin gets no CORS headers at all.
        """
        headers: Dict[str, str] = {}
        if self.allow_any_origin:
            headers["Access-Control-Allow-Origin"] = "*"
        elif self.is_origin_allowed(origin):
            headers["Access-Control-Allow-Origin"] = origin
            headers["Vary"] = "Origin"
        else:
            return {"Vary": "Origin"}

        headers["Access-Control-Allow-Methods"] = ", ".join(self.allow_methods)
        if self.allow_headers:
            headers["Access-Control-Allow-Headers"] = ", ".join(self.allow_headers)
        if self.allow_credentials:
            headers["Access-Control-Allow-Credentials"] = "true"
        if self.expose_headers:
            headers["Access-Control-Expose-Headers"] = ", ".join(self.expose_headers)
        if self.max_age is not None:
            headers["Access-Control-Max-Age"] = str(self.max_age)
        return headers


DEVELOPMENT_POLICY = CorsPolicy(
    name="DevelopmentCorsPolicy",
    allow_origins=("*",),
    allow_headers=(
        "Content-Type",
        "Authorization",
        "X-Requested-With",
        "Accept",
        "Origin",
    ),
    expose_headers=("Content-Type", "Authorization"),
    allow_credentials=True,
)

PRODUCTION_ALLOWED_HEADERS = ("Content-Type", "Authorization", "X-Requested-With")


def production_policy(allowed_origins: Iterable[str]) -> CorsPolicy:
    """Build the restricted policy for an explicit list of origins."""
    origins = tuple(o.rstrip("/") for o in allowed_origins if o)
    if "*" in origins:
        raise ConfigurationError(
            "The production CORS policy cannot allow '*'; "
            "set GATEWAY_ENVIRONMENT=development for an allow-all policy"
        )
    return CorsPolicy(
        name="ProductionCorsPolicy",
        allow_origins=origins,
        allow_headers=PRODUCTION_ALLOWED_HEADERS,
        allow_credentials=True,
    )


def select_policy(
    environment: str, allowed_origins: Optional[Iterable[str]] = None
) -> CorsPolicy:
    env = (environment or "").strip().lower()
    if env == DEVELOPMENT:
        return DEVELOPMENT_POLICY
    if env == PRODUCTION:
        return production_policy(allowed_origins or ())
    raise ConfigurationError(
        f"Unknown environment '{environment}', expected '{DEVELOPMENT}' or '{PRODUCTION}'"
    )
