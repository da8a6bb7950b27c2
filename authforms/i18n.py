"""
Locale resolution and message bundles.

Every supported locale is registered up front in MESSAGE_BUNDLES, so the
set of locales is known statically and nothing is imported by path at
runtime. Unsupported or missing locales fall back to DEFAULT_LOCALE.

The fallback is silent for the user. Operators see it as a debug-level
'locale_fallback' audit event.
"""

import logging
from typing import Dict, Mapping, Optional, Tuple

from authforms.logging_config import audit_log, sanitize_log_value

DEFAULT_LOCALE = 'fr'


class MessageBundle:
    """Immutable set of user-facing strings for one locale."""

    def __init__(self, locale: str, messages: Mapping[str, str]):
        self.locale = locale
        self._messages = dict(messages)

    def get(self, key: str, **params) -> str:
        """Return the message for ``key``, formatted with ``params``."""
        template = self._messages[key]
        return template.format(**params) if params else template

    def __contains__(self, key: str) -> bool:
        return key in self._messages

    def keys(self):
        return self._messages.keys()

    def __repr__(self) -> str:
        return f'MessageBundle({self.locale!r})'


FR_MESSAGES = MessageBundle('fr', {
    # Field labels
    'label.firstName': 'Prénom',
    'label.lastName': 'Nom',
    'label.email': 'E-mail',
    'label.password': 'Mot de passe',

    # Field validation
    'error.required': '{label} est requis.',
    'error.email_invalid': 'Veuillez saisir une adresse e-mail valide.',
    'error.too_long': '{label} ne doit pas dépasser {max} caractères.',
    'error.password.min_length': 'Le mot de passe doit contenir au moins {min} caractères.',
    'error.password.lowercase': 'Le mot de passe doit contenir au moins une lettre minuscule.',
    'error.password.uppercase': 'Le mot de passe doit contenir au moins une lettre majuscule.',
    'error.password.digit': 'Le mot de passe doit contenir au moins un chiffre.',
    'error.password.symbol': 'Le mot de passe doit contenir au moins un caractère spécial.',

    # Strength indicator
    'strength.very_weak': 'Très faible',
    'strength.weak': 'Faible',
    'strength.medium': 'Moyen',
    'strength.strong': 'Fort',
    'strength.very_strong': 'Très fort',
    'hint.min_length': 'Utilisez au moins {min} caractères',
    'hint.lowercase': 'Ajoutez une lettre minuscule',
    'hint.uppercase': 'Ajoutez une lettre majuscule',
    'hint.digit': 'Ajoutez un chiffre',
    'hint.symbol': 'Ajoutez un caractère spécial',

    # Submission
    'submit.generic_failure': 'Une erreur inattendue est survenue. Veuillez réessayer.',
})

EN_MESSAGES = MessageBundle('en', {
    'label.firstName': 'First name',
    'label.lastName': 'Last name',
    'label.email': 'Email',
    'label.password': 'Password',

    'error.required': '{label} is required.',
    'error.email_invalid': 'Please enter a valid email address.',
    'error.too_long': '{label} must be at most {max} characters.',
    'error.password.min_length': 'Password must be at least {min} characters long.',
    'error.password.lowercase': 'Password must contain at least one lower-case letter.',
    'error.password.uppercase': 'Password must contain at least one upper-case letter.',
    'error.password.digit': 'Password must contain at least one digit.',
    'error.password.symbol': 'Password must contain at least one special character.',

    'strength.very_weak': 'Very weak',
    'strength.weak': 'Weak',
    'strength.medium': 'Medium',
    'strength.strong': 'Strong',
    'strength.very_strong': 'Very strong',
    'hint.min_length': 'Use at least {min} characters',
    'hint.lowercase': 'Add a lower-case letter',
    'hint.uppercase': 'Add an upper-case letter',
    'hint.digit': 'Add a digit',
    'hint.symbol': 'Add a special character',

    'submit.generic_failure': 'An unexpected error occurred. Please try again.',
})

MESSAGE_BUNDLES: Dict[str, MessageBundle] = {
    'fr': FR_MESSAGES,
    'en': EN_MESSAGES,
}

SUPPORTED_LOCALES: Tuple[str, ...] = tuple(MESSAGE_BUNDLES)


def resolve_locale(requested: Optional[str], default: str = DEFAULT_LOCALE) -> str:
    """
    Return ``requested`` if it is a supported locale, else ``default``.

    Region subtags are ignored ('en-GB' resolves to 'en').
    """
    if requested:
        candidate = requested.strip().replace('_', '-').split('-')[0].lower()
        if candidate in MESSAGE_BUNDLES:
            return candidate

    audit_log(
        event='locale_fallback',
        message=f'Unsupported locale {sanitize_log_value(requested or "")!r}, using {default}',
        level=logging.DEBUG,
        locale=default,
    )
    return default


def get_messages(requested: Optional[str] = None, default: str = DEFAULT_LOCALE) -> MessageBundle:
    """Resolve ``requested`` and return its message bundle."""
    return MESSAGE_BUNDLES[resolve_locale(requested, default)]
