"""
Security middleware and utilities.

Implements:
- Security headers (CSP, X-Frame-Options, etc.)
- PII redaction from logs
"""

import re
from typing import Any, Dict, Optional
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to all responses.

    Headers added:
    - Content-Security-Policy: Restricts resource loading
    - X-Frame-Options: Prevents clickjacking
    - X-Content-Type-Options: Prevents MIME sniffing
    - Referrer-Policy: Controls referrer information
    - Permissions-Policy: Controls browser features
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        response = await call_next(request)

        # The contact table and notes panel only ever load same-origin resources
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "connect-src 'self'; "
            "frame-ancestors 'none';"
        )

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = (
            "geolocation=(), microphone=(), camera=()"
        )

        return response


class PIIRedactor:
    """
    Redact Personally Identifiable Information (PII) from logs and data.

    Contact records carry email addresses and phone numbers; neither should
    reach the log stream in clear text.
    """

    EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b')
    PHONE_PATTERN = re.compile(r'\b\d{3}[-.]?\d{3}[-.]?\d{4}\b|\b\d{3}-\d{4}\b')
    TOKEN_PATTERN = re.compile(r'(token|key|secret|password)[\s:=]+["\']?([^"\'\s]+)["\']?', re.IGNORECASE)

    @classmethod
    def redact_email(cls, text: str) -> str:
        """Redact email addresses."""
        return cls.EMAIL_PATTERN.sub('[EMAIL_REDACTED]', text)

    @classmethod
    def redact_phone(cls, text: str) -> str:
        """Redact phone numbers."""
        return cls.PHONE_PATTERN.sub('[PHONE_REDACTED]', text)

    @classmethod
    def redact_tokens(cls, text: str) -> str:
        """Redact tokens, keys, secrets, passwords."""
        return cls.TOKEN_PATTERN.sub(r'\1=[REDACTED]', text)

    @classmethod
    def redact_all(cls, text: str) -> str:
        """Apply all redaction rules."""
        text = cls.redact_email(text)
        text = cls.redact_phone(text)
        text = cls.redact_tokens(text)
        return text

    @classmethod
    def redact_dict(cls, data: Dict[str, Any], keys_to_redact: Optional[list[str]] = None) -> Dict[str, Any]:
        """
        Redact sensitive keys from dictionary.

        Args:
            data: Dictionary to redact
            keys_to_redact: List of keys to redact (default: contact PII keys)

        Returns:
            Dictionary with redacted values
        """
        if keys_to_redact is None:
            keys_to_redact = ['email', 'phone', 'password', 'token', 'secret', 'authorization', 'cookie']

        redacted = data.copy()
        for key in keys_to_redact:
            if key in redacted and redacted[key] is not None:
                redacted[key] = '[REDACTED]'

        return redacted


class PIIRedactionFilter(logging.Filter):
    """Logging filter that rewrites message and args through PIIRedactor."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = PIIRedactor.redact_all(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    k: PIIRedactor.redact_all(v) if isinstance(v, str) else v
                    for k, v in record.args.items()
                }
            else:
                record.args = tuple(
                    PIIRedactor.redact_all(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )

        return True


def setup_security_logging() -> None:
    """
    Configure logging to automatically redact PII.

    The filter goes on the root logger's handlers so records propagated from
    module loggers are redacted before formatting. Calling it twice is a no-op.
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if not any(isinstance(f, PIIRedactionFilter) for f in handler.filters):
            handler.addFilter(PIIRedactionFilter())
    logger.info("PII redaction filter installed on root handlers")
