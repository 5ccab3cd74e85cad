from datetime import datetime, timezone

from fastapi import APIRouter

from cors_gateway.config import GatewayConfig


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def build_health_router(config: GatewayConfig) -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    async def health():
        # Liveness only; the backend is never contacted here
        return {
            "status": "healthy",
            "proxy": "running",
            "backend": config.backend_url,
            "timestamp": utc_timestamp(),
        }

    return router
