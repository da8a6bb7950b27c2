"""
Application configuration: every form policy threshold in one place.

Every threshold includes a comment explaining the value chosen.
No magic numbers.
"""

import os
import secrets


class BaseConfig:
    """Shared configuration for all environments."""

    # --- Flask Core ---
    # Signs the CSRF tokens. In production, load from environment variable.
    SECRET_KEY = os.environ.get('SECRET_KEY') or secrets.token_hex(32)

    # Reject request bodies larger than 16KB.
    # A sign-up payload is well under 1KB.
    MAX_CONTENT_LENGTH = 16 * 1024

    # --- Field Policy ---
    # Minimum password length for new accounts (strength criterion #1).
    PASSWORD_MIN_LENGTH = 8
    # Bounds password size before it reaches the authentication service.
    PASSWORD_MAX_LENGTH = 128
    # RFC 5321 limits the total email address to 254 characters.
    EMAIL_MAX_LENGTH = 254
    # Generous for compound names, small enough to reject pasted garbage.
    NAME_MAX_LENGTH = 50

    # --- Locale ---
    # Used whenever the requested locale is missing or unsupported.
    DEFAULT_LOCALE = 'fr'

    # --- Authentication Service ---
    AUTH_SERVICE_URL = os.environ.get('AUTH_SERVICE_URL', 'http://localhost:8000')
    AUTH_SIGN_IN_PATH = '/sign-in'
    AUTH_SIGN_UP_PATH = '/sign-up'
    # The only timeout on a submission; the pipeline itself never cancels.
    AUTH_REQUEST_TIMEOUT = 10.0

    # --- Logging ---
    AUDIT_LOG_LEVEL = os.environ.get('AUDIT_LOG_LEVEL', 'INFO')

    # --- Rate Limiting (flask-limiter) ---
    RATELIMIT_ENABLED = True
    # In-memory storage for single-instance deployment.
    # Production: use Redis ("redis://localhost:6379")
    RATELIMIT_STORAGE_URI = 'memory://'
    RATELIMIT_HEADERS_ENABLED = True
    # Validation runs on every keystroke; this only stops scripted floods.
    RATELIMIT_DEFAULT = '600/minute'

    # --- Submission Rate Limits ---
    # Per-IP: 10 submissions/minute. A user retrying after typos stays well under.
    SUBMIT_RATE_LIMIT_IP = '10/minute'
    # Per-account: 5 submissions/minute against the same email.
    SUBMIT_RATE_LIMIT_ACCOUNT = '5/minute'


class ProductionConfig(BaseConfig):
    """Production environment: secrets and service URL must come from the environment."""

    DEBUG = False
    TESTING = False

    # Never fall back to a random key in production: tokens issued by one
    # worker would be rejected by the others.
    SECRET_KEY = os.environ.get('SECRET_KEY')
    AUTH_SERVICE_URL = os.environ.get('AUTH_SERVICE_URL')

    @classmethod
    def init_app(cls, app):
        """Validate required configuration at startup."""
        missing = [name for name in ('SECRET_KEY', 'AUTH_SERVICE_URL') if not getattr(cls, name)]
        if missing:
            raise RuntimeError(
                f'{", ".join(missing)} environment variable(s) required in production.'
            )


class DevelopmentConfig(BaseConfig):
    """Development environment."""

    DEBUG = True
    AUDIT_LOG_LEVEL = 'DEBUG'


class TestConfig(BaseConfig):
    """Test environment: CSRF and rate limiting off by default."""

    TESTING = True
    # Specific test files enable them via dedicated config classes.
    RATELIMIT_ENABLED = False
    WTF_CSRF_ENABLED = False
    AUTH_SERVICE_URL = 'http://auth.test'


class RateLimitTestConfig(TestConfig):
    """Test config with rate limiting enabled."""

    RATELIMIT_ENABLED = True


class CSRFTestConfig(TestConfig):
    """Test config with CSRF protection enabled."""

    WTF_CSRF_ENABLED = True
