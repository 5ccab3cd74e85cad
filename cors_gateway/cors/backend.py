"""
Cross-origin setup for the backend the gateway sits in front of.

A backend built on FastAPI or Starlette can call ``configure_backend_cors``
during startup to get the same development/production policy pair the
gateway enforces, without running the gateway at all::

    app = FastAPI()
    configure_backend_cors(app, os.environ.get("GATEWAY_ENVIRONMENT", "production"))
"""

import logging
from typing import Iterable, Optional

from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware

from cors_gateway.cors.policy import CorsPolicy, select_policy

logger = logging.getLogger("uvicorn.error")


def backend_middleware_options(policy: CorsPolicy) -> dict:
    """Translate a CorsPolicy into CORSMiddleware keyword arguments."""
    if policy.allow_any_origin:
        # Any origin, method and header; every response header readable
        return {
            "allow_origins": ["*"],
            "allow_methods": ["*"],
            "allow_headers": ["*"],
            "expose_headers": ["*"],
            "allow_credentials": False,
        }
    options = {
        "allow_origins": list(policy.allow_origins),
        "allow_methods": list(policy.allow_methods),
        "allow_headers": list(policy.allow_headers),
        "allow_credentials": policy.allow_credentials,
    }
    if policy.expose_headers:
        options["expose_headers"] = list(policy.expose_headers)
    if policy.max_age is not None:
        options["max_age"] = policy.max_age
    return options


def configure_backend_cors(
    app: Starlette,
    environment: str,
    allowed_origins: Optional[Iterable[str]] = None,
) -> CorsPolicy:
    policy = select_policy(environment, allowed_origins)
    app.add_middleware(CORSMiddleware, **backend_middleware_options(policy))
    logger.info(f"Backend CORS policy: {policy.name}")
    return policy
