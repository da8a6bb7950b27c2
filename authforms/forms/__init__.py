"""
Credential-intake pipeline: schema validation, password strength,
form controller and submission coordinator.

Framework-free; the Flask host in authforms.auth wires it to HTTP.
"""

from authforms.forms.controller import FormController, SubmissionPhase, ValidationPhase
from authforms.forms.coordinator import Outcome, SubmissionCoordinator, SubmissionResult
from authforms.forms.schema import SIGN_IN, SIGN_UP, FieldKind, FieldSpec, FormVariant, validate, validate_all
from authforms.forms.strength import Criterion, PasswordStrength, StrengthLevel, score

__all__ = [
    'Criterion',
    'FieldKind',
    'FieldSpec',
    'FormController',
    'FormVariant',
    'Outcome',
    'PasswordStrength',
    'SIGN_IN',
    'SIGN_UP',
    'StrengthLevel',
    'SubmissionCoordinator',
    'SubmissionPhase',
    'SubmissionResult',
    'ValidationPhase',
    'score',
    'validate',
    'validate_all',
]
