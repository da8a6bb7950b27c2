"""
WSGI entry point for production deployment (gunicorn).

Usage:
    gunicorn -c gunicorn.conf.py wsgi:app

This module creates the Flask app with ProductionConfig and validates
that all required environment variables are set.
"""

import sys

from authforms.config import ProductionConfig

# Fail fast with a clear error message if required settings are missing.
if not ProductionConfig.SECRET_KEY or not ProductionConfig.AUTH_SERVICE_URL:
    print(
        'FATAL: SECRET_KEY and AUTH_SERVICE_URL environment variables are required.\n'
        'Generate a key with: python -c "import secrets; print(secrets.token_hex(32))"',
        file=sys.stderr,
    )
    sys.exit(1)

from authforms import create_app  # noqa: E402

app = create_app(config_class=ProductionConfig)
