"""
Pytest fixtures for the credential-intake test suite.

Provides multiple app configurations for testing different controls in
isolation, all wired to scripted authentication actions instead of the
network:
- app/client: Base test config (CSRF off, rate limiting off)
- csrf_app/csrf_client: CSRF enabled
- rate_limit_app/rate_limit_client: Rate limiting enabled

Plus pipeline helpers for the framework-free tests:
- ScriptedAction: awaitable action returning a canned response
- make_controller: FormController wired to a ScriptedAction
"""

import pytest

from authforms import create_app
from authforms.config import CSRFTestConfig, RateLimitTestConfig, TestConfig
from authforms.extensions import limiter
from authforms.forms.controller import FormController
from authforms.forms.coordinator import SubmissionCoordinator
from authforms.forms.feedback import CollectingChannel, Navigator
from authforms.forms.schema import SIGN_IN, SIGN_UP
from authforms.i18n import FR_MESSAGES

SIGN_IN_ACCEPTED = {
    'success': True,
    'message': 'Connexion réussie.',
    'redirect': '/tableau-de-bord',
}
SIGN_UP_ACCEPTED = {
    'success': True,
    'message': 'Compte créé. Vérifiez votre boîte mail.',
}
VALID_SIGN_IN = {
    'email': 'jean.dupont@exemple.com',
    'password': 'Secret123!',
}
VALID_SIGN_UP = {
    'firstName': 'jean',
    'lastName': 'DUPONT',
    'email': 'jean.dupont@exemple.com',
    'password': 'Secret123!',
}


class ScriptedAction:
    """
    Stand-in for an authentication action.

    Records every payload. Raises ``error`` if set, otherwise returns
    ``response``. If ``gate`` is set, waits on it before answering so
    tests can observe a submission in flight.
    """

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else dict(SIGN_IN_ACCEPTED)
        self.error = error
        self.gate = None
        self.calls = []

    async def __call__(self, payload):
        self.calls.append(dict(payload))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.response


class FakeActions:
    """Authentication actions for the Flask app, one ScriptedAction per form."""

    def __init__(self):
        self.actions = {
            'sign-in': ScriptedAction(dict(SIGN_IN_ACCEPTED)),
            'sign-up': ScriptedAction(dict(SIGN_UP_ACCEPTED)),
        }

    def for_variant(self, name):
        return self.actions[name]

    def __getitem__(self, name):
        return self.actions[name]


# --- Pipeline fixtures ---

@pytest.fixture
def make_controller():
    """
    Factory: make_controller(variant='sign-in', response=..., error=...)
    returns (controller, action, channel, navigator).
    """
    def factory(variant='sign-in', response=None, error=None):
        form_variant = {'sign-in': SIGN_IN, 'sign-up': SIGN_UP}[variant]
        if response is None:
            response = SIGN_IN_ACCEPTED if variant == 'sign-in' else SIGN_UP_ACCEPTED
        action = ScriptedAction(dict(response), error=error)
        coordinator = SubmissionCoordinator(
            action,
            generic_message=FR_MESSAGES.get('submit.generic_failure'),
            form_name=variant,
        )
        channel = CollectingChannel()
        navigator = Navigator()
        controller = FormController(
            form_variant, coordinator, channel=channel, navigate=navigator, messages=FR_MESSAGES,
        )
        return controller, action, channel, navigator

    return factory


# --- Value fixtures ---

@pytest.fixture
def sign_in_values():
    return dict(VALID_SIGN_IN)


@pytest.fixture
def sign_up_values():
    return dict(VALID_SIGN_UP)


# --- App fixtures ---

@pytest.fixture
def actions():
    return FakeActions()


@pytest.fixture
def app(actions):
    """Create a Flask app with the base test configuration."""
    yield create_app(TestConfig, actions=actions)


@pytest.fixture
def client(app):
    """Test client for the base app configuration."""
    return app.test_client()


@pytest.fixture
def csrf_app(actions):
    """Create a Flask app with CSRF protection enabled."""
    yield create_app(CSRFTestConfig, actions=actions)


@pytest.fixture
def csrf_client(csrf_app):
    """Test client with CSRF protection enabled."""
    return csrf_app.test_client()


@pytest.fixture
def rate_limit_app(actions):
    """Create a Flask app with rate limiting enabled and empty counters."""
    app = create_app(RateLimitTestConfig, actions=actions)
    with app.app_context():
        limiter.reset()
    yield app


@pytest.fixture
def rate_limit_client(rate_limit_app):
    """Test client with rate limiting enabled."""
    return rate_limit_app.test_client()
