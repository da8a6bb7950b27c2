"""
Forms blueprint: JSON endpoints for live validation, password strength
and submission of the sign-in and sign-up forms.
"""

from flask import Blueprint

forms_bp = Blueprint('forms', __name__)

# Import routes to register them with the blueprint.
# This import must be at the bottom to avoid circular imports.
from authforms.auth import routes  # noqa: E402, F401
