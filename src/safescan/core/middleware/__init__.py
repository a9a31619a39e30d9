"""Custom middleware components."""

from safescan.core.middleware.logging import LoggingMiddleware
from safescan.core.middleware.request_id import RequestIDMiddleware


__all__ = [
    "LoggingMiddleware",
    "RequestIDMiddleware",
]
