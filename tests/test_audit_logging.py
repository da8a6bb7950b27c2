"""
Tests for the JSON audit log format.

Covers: log injection sanitization, JSON structure, context fields and
attached exceptions.
"""

import json
import logging

from authforms.logging_config import SecurityAuditFormatter, sanitize_log_value


def make_record(**extra):
    record = logging.LogRecord('authforms.audit', logging.INFO, __file__, 1, 'hello', None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSanitize:
    """Control characters cannot forge log lines."""

    def test_newlines_stripped(self):
        assert sanitize_log_value('jean@exemple.com\n{"event": "forged"}') == 'jean@exemple.com{"event": "forged"}'

    def test_truncated(self):
        assert len(sanitize_log_value('a' * 1000)) == 256
        assert sanitize_log_value('abcdef', max_length=3) == 'abc'


class TestFormatter:
    """One JSON object per record."""

    def test_event_and_context_fields(self):
        record = make_record(event='submission_rejected', form='sign-in', attempt=3, email='a@b.co')
        entry = json.loads(SecurityAuditFormatter().format(record))
        assert entry['event'] == 'submission_rejected'
        assert entry['message'] == 'hello'
        assert entry['form'] == 'sign-in'
        assert entry['attempt'] == '3'
        assert entry['email'] == 'a@b.co'
        assert 'ip' not in entry

    def test_missing_event_is_unknown(self):
        entry = json.loads(SecurityAuditFormatter().format(make_record()))
        assert entry['event'] == 'unknown'

    def test_exception_attached(self):
        try:
            raise ConnectionError('refused')
        except ConnectionError as exc:
            record = make_record(event='submission_transport_failure')
            record.exc_info = (type(exc), exc, exc.__traceback__)
        entry = json.loads(SecurityAuditFormatter().format(record))
        assert 'ConnectionError: refused' in entry['error']
