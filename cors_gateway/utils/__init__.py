from typing import Dict, Mapping

SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "cookie", "set-cookie"}


def mask_token(text: str, token: str) -> str:
    return text.replace(token, f"{token[:4]}****") if token else text


def redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Copy of ``headers`` safe to log: credential-bearing values are masked."""
    redacted = {}
    for name, value in headers.items():
        if name.lower() in SENSITIVE_HEADERS:
            value = mask_token(value, value)
        redacted[name] = value
    return redacted
