"""
Request-side audit helpers.

Collects the request context (client IP, request id) attached to every
audit event a request produces, and logs the HTTP-level security events
the pipeline itself cannot see.
"""

from flask import g, request

from authforms.logging_config import audit_log, sanitize_log_value


def get_request_context() -> dict:
    """
    Extract audit context from the current request.

    Returns:
        dict with ip and request_id for audit logging.
    """
    return {
        'ip': request.remote_addr or 'unknown',
        'request_id': g.get('request_id', 'unknown'),
    }


def log_csrf_failure(reason: str) -> None:
    """Audit log: CSRF token validation failure."""
    audit_log(
        event='csrf_failure',
        message='CSRF token validation failed',
        reason=sanitize_log_value(reason),
        **get_request_context(),
    )


def log_rate_limited(limit: str) -> None:
    """Audit log: a client hit a rate limit."""
    audit_log(
        event='rate_limit_exceeded',
        message=f'Rate limit exceeded on {sanitize_log_value(request.path)}',
        reason=sanitize_log_value(limit),
        **get_request_context(),
    )
