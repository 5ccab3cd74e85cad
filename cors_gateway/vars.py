import os

SERVICE_NAME = os.getenv("SERVICE_NAME", "cors-gateway")

BACKEND_URL = os.environ.get("GATEWAY_BACKEND_URL", "http://localhost:5001")
HOST = os.environ.get("GATEWAY_HOST", "0.0.0.0")
PORT = os.environ.get("GATEWAY_PORT", "8081")
PROXY_PREFIX = os.environ.get("GATEWAY_PROXY_PREFIX", "/api")
PROXY_TIMEOUT = os.environ.get("GATEWAY_PROXY_TIMEOUT", "30")
LOG_LEVEL = os.environ.get("GATEWAY_LOG_LEVEL", "info").lower()

# Only an explicit "development" enables the allow-all CORS policy
ENVIRONMENT = os.environ.get("GATEWAY_ENVIRONMENT", "production").lower()
CORS_ALLOWED_ORIGINS = [
    o.strip()
    for o in os.environ.get(
        "CORS_ALLOWED_ORIGINS", "https://yourdomain.com,https://www.yourdomain.com"
    ).split(",")
    if o.strip()
]

METRICS_ENABLED = os.getenv("GATEWAY_METRICS_ENABLED", "true").strip().lower()

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
OTLP_HEADERS = os.getenv("OTLP_HEADERS", "")
