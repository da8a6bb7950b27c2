"""
Flask extension instances: created here, initialized in the app factory.

This pattern (separate from __init__.py) prevents circular imports
and allows extensions to be imported independently by blueprints.
"""

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_wtf.csrf import CSRFProtect

# CSRF protection: validates the token (form field or X-CSRFToken header)
# on every POST, including the JSON endpoints.
csrf = CSRFProtect()

# Rate limiting: per-IP by default, per-account on the submit endpoint.
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri='memory://',
)
