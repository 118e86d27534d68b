"""
ProposalGen API Middleware

Security headers and request tracing middleware.
"""

from .security import SecurityHeadersMiddleware
from .tracing import RequestIDMiddleware, get_request_id

__all__ = [
    "SecurityHeadersMiddleware",
    "RequestIDMiddleware",
    "get_request_id",
]
