"""
Structured audit logging for the form pipeline.

Submission events are logged as JSON for machine parsing.
Events include: submission_started, submission_accepted,
submission_rejected, submission_transport_failure, locale_fallback.

NEVER logs: passwords or full submission payloads. Transport failures
carry the exception for operators; users only ever see the generic
retry message.
"""

import json
import logging
import re
import time
from typing import Any, Dict

AUDIT_LOGGER_NAME = 'authforms.audit'

# Control characters that could enable log injection attacks.
_LOG_INJECTION_PATTERN = re.compile(r'[\x00-\x08\x0a-\x1f\x7f]')


def sanitize_log_value(value: str, max_length: int = 256) -> str:
    """
    Sanitize a string for safe inclusion in log output.

    Removes control characters (newlines included, so a crafted email
    cannot forge a second log line) and truncates to ``max_length``.
    """
    cleaned = _LOG_INJECTION_PATTERN.sub('', str(value))
    return cleaned[:max_length]


class SecurityAuditFormatter(logging.Formatter):
    """JSON formatter for audit events."""

    CONTEXT_FIELDS = ('form', 'attempt', 'outcome', 'email', 'ip', 'request_id', 'locale', 'reason')

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            'timestamp': time.strftime('%Y-%m-%dT%H:%M:%S%z', time.gmtime(record.created)),
            'level': record.levelname,
            'event': getattr(record, 'event', 'unknown'),
            'message': record.getMessage(),
        }

        for field in self.CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = sanitize_log_value(str(value))

        if record.exc_info:
            log_entry['error'] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def setup_audit_logging(app=None) -> logging.Logger:
    """
    Configure the audit logger.

    Returns the dedicated 'authforms.audit' logger writing JSON to stderr.
    The level comes from the app's AUDIT_LOG_LEVEL when an app is given.
    """
    logger = logging.getLogger(AUDIT_LOGGER_NAME)
    level = app.config.get('AUDIT_LOG_LEVEL', 'INFO') if app is not None else 'INFO'
    logger.setLevel(level)

    # Repeated create_app() calls (tests) must not stack handlers.
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(SecurityAuditFormatter())
    logger.addHandler(console_handler)

    return logger


def audit_log(event: str, message: str, level: int = logging.INFO, exc_info=None, **context) -> None:
    """
    Log an audit event.

    Args:
        event: Event type (e.g., 'submission_accepted')
        message: Human-readable description
        level: Logging level, INFO unless the event is a failure
        exc_info: Exception to attach for diagnostics
        **context: Additional context (form, attempt, email, ip, request_id)
    """
    logger = logging.getLogger(AUDIT_LOGGER_NAME)
    extra = {'event': event}
    extra.update(context)
    logger.log(level, message, exc_info=exc_info, extra=extra)
