"""Development reverse proxy that forwards API calls to a backend and adds CORS headers."""

__version__ = "0.1.0"
