"""
Flask application factory.

Creates the app hosting the credential-intake pipeline: the forms
blueprint, CSRF protection, rate limiting, audit logging and the
authentication actions the pipeline submits to. Uses the factory pattern
for testability: each test can create an app with a different config
class and its own (fake) authentication actions.

Extension initialization order:
1. csrf: registers before_request hook for CSRF validation
2. limiter: conditional on RATELIMIT_ENABLED config
"""

from flask import Flask, jsonify

from authforms.config import DevelopmentConfig


def create_app(config_class=None, actions=None):
    """
    Create and configure the Flask application.

    Args:
        config_class: Configuration class to use. Defaults to DevelopmentConfig.
                      Tests pass TestConfig, RateLimitTestConfig, etc.
        actions: Authentication actions exposing ``for_variant(name)``.
                 Defaults to HttpAuthenticationActions built from config.

    Returns:
        Configured Flask application instance.
    """
    if config_class is None:
        config_class = DevelopmentConfig

    app = Flask(__name__)
    app.config.from_object(config_class)
    # Keep non-ASCII (French) messages readable in JSON responses.
    app.json.ensure_ascii = False
    if hasattr(config_class, 'init_app'):
        config_class.init_app(app)

    # --- Initialize Extensions ---

    from authforms.extensions import csrf, limiter

    csrf.init_app(app)

    # Disabled in most tests (TestConfig) for speed; enabled in RateLimitTestConfig.
    limiter.init_app(app)
    limiter.enabled = app.config.get('RATELIMIT_ENABLED', True)

    # --- Logging ---
    from authforms.logging_config import setup_audit_logging
    setup_audit_logging(app)

    # --- Form Variants and Authentication Actions ---
    from authforms.forms.schema import build_variants

    app.extensions['authforms.variants'] = build_variants(
        password_min_length=app.config['PASSWORD_MIN_LENGTH'],
        password_max_length=app.config['PASSWORD_MAX_LENGTH'],
        email_max_length=app.config['EMAIL_MAX_LENGTH'],
        name_max_length=app.config['NAME_MAX_LENGTH'],
    )

    if actions is None:
        from authforms.auth.actions import HttpAuthenticationActions
        actions = HttpAuthenticationActions(
            app.config['AUTH_SERVICE_URL'],
            sign_in_path=app.config['AUTH_SIGN_IN_PATH'],
            sign_up_path=app.config['AUTH_SIGN_UP_PATH'],
            timeout=app.config['AUTH_REQUEST_TIMEOUT'],
        )
    app.extensions['authforms.actions'] = actions

    # --- Register Blueprints ---
    from authforms.auth import forms_bp
    app.register_blueprint(forms_bp)

    # --- CSRF Error Handler ---
    from flask_wtf.csrf import CSRFError
    from authforms.auth.audit import log_csrf_failure, log_rate_limited

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        """The client must fetch a fresh token from /api/csrf-token and retry."""
        log_csrf_failure(e.description)
        return jsonify(error='csrf', message='Your form session has expired. Please try again.'), 400

    # --- HTTP Error Handlers ---
    # JSON everywhere: no stack traces or internal details in responses.

    @app.errorhandler(400)
    def handle_bad_request(e):
        return jsonify(error='bad_request', message='Malformed request body.'), 400

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify(error='not_found', message='Not found.'), 404

    @app.errorhandler(413)
    def handle_request_too_large(e):
        """Request body exceeds MAX_CONTENT_LENGTH (16KB)."""
        return jsonify(error='too_large', message='Request body too large.'), 413

    @app.errorhandler(429)
    def handle_rate_limit(e):
        log_rate_limited(str(e.description))
        return jsonify(error='rate_limited', message=e.description), 429

    @app.errorhandler(500)
    def handle_server_error(e):
        return jsonify(error='server_error', message='An unexpected error occurred.'), 500

    return app
