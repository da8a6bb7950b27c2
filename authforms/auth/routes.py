"""
Form routes: describe, live-validate and submit the authentication forms.

Request flow (submit POST):
1. Rate limiter (flask-limiter decorators): per IP and per email
2. CSRF validation (CSRFProtect before_request hook)
3. WTForms validation: same FieldSpec rules as the live controller
4. FormController.submit(): coordinator calls the authentication action
5. Outcome → JSON: {success, message, redirect?, notification}

Bodies may be JSON objects or form-encoded; both are flat
field-name -> value mappings.
"""

import asyncio
import uuid

from flask import abort, current_app, g, jsonify, request
from flask_limiter.util import get_remote_address
from flask_wtf.csrf import generate_csrf

from authforms.auth import forms_bp
from authforms.auth.audit import get_request_context
from authforms.extensions import csrf, limiter
from authforms.forms.controller import FormController
from authforms.forms.coordinator import Outcome, SubmissionCoordinator
from authforms.forms.feedback import CollectingChannel, Navigator
from authforms.forms.strength import describe, score
from authforms.forms.wtf import form_class_for
from authforms.i18n import SUPPORTED_LOCALES, get_messages


# --- Helpers ---

def current_messages():
    """Locale bundle for this request: ?lang= first, then Accept-Language."""
    requested = request.args.get('lang') or request.accept_languages.best_match(SUPPORTED_LOCALES)
    return get_messages(requested, current_app.config['DEFAULT_LOCALE'])


def get_variant(variant_name: str):
    variants = current_app.extensions['authforms.variants']
    if variant_name not in variants:
        abort(404)
    return variants[variant_name]


def read_body() -> dict:
    """Flat body as str -> str; 400 for anything else."""
    if request.is_json:
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            abort(400)
    else:
        body = request.form.to_dict()
    return {str(key): '' if value is None else str(value) for key, value in body.items()}


def submitted_email() -> str:
    """Per-account rate limit key: the normalized submitted email."""
    body = request.get_json(silent=True) if request.is_json else request.form
    email = body.get('email') if hasattr(body, 'get') else None
    if isinstance(email, str) and email.strip():
        return email.strip().lower()
    return get_remote_address()


def build_controller(variant, messages, channel=None, navigate=None) -> FormController:
    actions = current_app.extensions['authforms.actions']
    coordinator = SubmissionCoordinator(
        actions.for_variant(variant.name),
        generic_message=messages.get('submit.generic_failure'),
        form_name=variant.name,
        log_context=get_request_context(),
    )
    return FormController(variant, coordinator, channel=channel, navigate=navigate, messages=messages)


def strength_report(controller: FormController, messages):
    spec = controller.variant.strength_field
    if spec is None or controller.password_strength is None:
        return None
    return describe(controller.password_strength, messages, spec.min_length)


# --- Request Hooks ---

@forms_bp.before_app_request
def set_request_id() -> None:
    """Short request ID for log correlation."""
    g.request_id = str(uuid.uuid4())[:8]


# --- Routes ---

@forms_bp.route('/api/csrf-token')
def csrf_token():
    """Token for the X-CSRFToken header of subsequent POSTs."""
    return jsonify(csrf_token=generate_csrf())


@forms_bp.route('/api/forms/<variant_name>')
def describe_form(variant_name):
    """Field descriptors for rendering the form."""
    variant = get_variant(variant_name)
    messages = current_messages()
    return jsonify(
        form=variant.name,
        locale=messages.locale,
        fields=[
            {
                'name': spec.name,
                'kind': spec.kind.value,
                'label': messages.get(spec.label_key),
                'required': spec.required,
                'max_length': spec.max_length,
                'strength_indicator': spec is variant.strength_field,
            }
            for spec in variant.fields
        ],
    )


@forms_bp.route('/api/forms/<variant_name>/validate', methods=['POST'])
@csrf.exempt
def validate_form(variant_name):
    """
    Live validation, called on every change event.

    Only the fields present in the body count as touched, so errors are
    reported for those alone; is_valid always covers the whole form.
    Exempt from CSRF: it has no side effects.
    """
    variant = get_variant(variant_name)
    messages = current_messages()
    values = read_body()

    unknown = sorted(set(values) - set(variant.field_names))
    if unknown:
        return jsonify(error='unknown_fields', fields=unknown), 400

    controller = build_controller(variant, messages)
    controller.change_many(values)

    data = controller.snapshot()
    report = strength_report(controller, messages)
    if report is not None:
        data['password_strength'] = report
    return jsonify(data)


@forms_bp.route('/api/password-strength', methods=['POST'])
@csrf.exempt
def password_strength():
    """Strength indicator for a candidate password."""
    messages = current_messages()
    password = read_body().get('password', '')
    min_length = current_app.config['PASSWORD_MIN_LENGTH']
    return jsonify(describe(score(password, min_length), messages, min_length))


@forms_bp.route('/api/forms/<variant_name>/submit', methods=['POST'])
@limiter.limit(
    lambda: current_app.config.get('SUBMIT_RATE_LIMIT_IP', '10/minute'),
    error_message='Too many submissions. Please wait a moment and try again.',
)
@limiter.limit(
    lambda: current_app.config.get('SUBMIT_RATE_LIMIT_ACCOUNT', '5/minute'),
    key_func=submitted_email,
    error_message='Too many submissions for this account. Please wait a moment.',
)
def submit_form(variant_name):
    """
    Validate and submit a form.

    Responses:
        200: accepted or rejected by the authentication service
        422: field validation failed, nothing was sent
        502: the authentication service could not be reached
    """
    variant = get_variant(variant_name)
    messages = current_messages()
    read_body()  # 400 unless the body is a flat object

    form = form_class_for(variant)(messages=messages)
    if not form.validate_on_submit():
        return jsonify(success=False, errors=form.field_errors), 422

    channel = CollectingChannel()
    navigator = Navigator()
    controller = build_controller(variant, messages, channel=channel, navigate=navigator)
    controller.change_many({name: form[name].data for name in variant.field_names})

    result = asyncio.run(controller.submit())
    if result is None:
        return jsonify(success=False, errors=controller.errors), 422

    body = {'success': result.success, 'message': result.message}
    if navigator.target:
        body['redirect'] = navigator.target
    if channel.last is not None:
        body['notification'] = channel.last.to_dict()

    status = 502 if result.outcome is Outcome.TRANSPORT_FAILURE else 200
    return jsonify(body), status
