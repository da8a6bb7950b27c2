"""
Declarative field schema and the pure validation functions over it.

Each form variant is a table of FieldSpec entries. Validation dispatches
on FieldSpec.kind, never on the runtime type of the value, and returns
errors as values: nothing in this module raises for user input.

Input constraints:
- Email: required, valid address syntax (email-validator), trimmed, case
  preserved, max 254 chars
- Password: required, max 128 chars, never trimmed; sign-up passwords must
  also satisfy every strength criterion
- Names: required after trim, max 50 chars
"""

import enum
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple, Union

from email_validator import EmailNotValidError, validate_email

from authforms.forms import strength
from authforms.i18n import DEFAULT_LOCALE, MESSAGE_BUNDLES, MessageBundle

# RFC 5321 limits the total email address to 254 characters.
DEFAULT_EMAIL_MAX_LENGTH = 254
# Bounds password input size before it reaches any hashing backend.
DEFAULT_PASSWORD_MAX_LENGTH = 128
DEFAULT_NAME_MAX_LENGTH = 50


class FieldKind(enum.Enum):
    EMAIL = 'email'
    PASSWORD = 'password'
    TEXT = 'text'


class Normalization(enum.Enum):
    """How a raw value is normalized before it is validated."""

    NONE = 'none'
    TRIM = 'trim'
    # First letter upper-case, remainder lower-case ("jean" -> "Jean").
    CAPITALIZE = 'capitalize'


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind
    required: bool = True
    max_length: Optional[int] = None
    enforce_strength: bool = False
    min_length: int = strength.DEFAULT_MIN_LENGTH
    normalization: Normalization = Normalization.NONE

    @property
    def label_key(self) -> str:
        return f'label.{self.name}'

    def display(self, raw: str) -> str:
        """Display normalization, applied on every change event."""
        if self.normalization is Normalization.CAPITALIZE:
            # Leading whitespace is kept; the first letter after it is capitalized.
            text = raw.lstrip()
            lead = raw[:len(raw) - len(text)]
            return lead + text[:1].upper() + text[1:].lower()
        return raw

    def normalize(self, value: str) -> str:
        """Normalization applied by the validator to produce the submitted value."""
        if self.normalization in (Normalization.TRIM, Normalization.CAPITALIZE):
            return value.strip()
        return value


@dataclass(frozen=True)
class FormVariant:
    name: str
    fields: Tuple[FieldSpec, ...]
    navigates_on_success: bool = False

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    def field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)

    def initial_values(self) -> Dict[str, str]:
        return {spec.name: '' for spec in self.fields}

    @property
    def strength_field(self) -> Optional[FieldSpec]:
        """The password field scored by the strength indicator, if any."""
        for spec in self.fields:
            if spec.kind is FieldKind.PASSWORD and spec.enforce_strength:
                return spec
        return None


@dataclass(frozen=True)
class Ok:
    value: str
    ok = True


@dataclass(frozen=True)
class Err:
    message: str
    ok = False


FieldResult = Union[Ok, Err]


@dataclass(frozen=True)
class ValidationReport:
    is_valid: bool
    errors: Dict[str, str] = field(default_factory=dict)
    values: Dict[str, str] = field(default_factory=dict)


def _default_messages() -> MessageBundle:
    return MESSAGE_BUNDLES[DEFAULT_LOCALE]


def _validate_email(spec: FieldSpec, value: str, messages: MessageBundle) -> FieldResult:
    # Syntax only: no DNS lookups while the user is typing.
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return Err(messages.get('error.email_invalid'))
    # The library's normalized form is discarded so case is preserved.
    return Ok(value)


def _validate_password(spec: FieldSpec, value: str, messages: MessageBundle) -> FieldResult:
    # Strength policy applies at account creation, not at login.
    if spec.enforce_strength:
        result = strength.score(value, spec.min_length)
        if result.unmet:
            first = result.unmet[0]
            return Err(messages.get(f'error.password.{first.value}', min=spec.min_length))
    return Ok(value)


def _validate_text(spec: FieldSpec, value: str, messages: MessageBundle) -> FieldResult:
    return Ok(value)


_VALIDATORS = {
    FieldKind.EMAIL: _validate_email,
    FieldKind.PASSWORD: _validate_password,
    FieldKind.TEXT: _validate_text,
}


def validate(
    spec: FieldSpec,
    raw_value: Optional[str],
    all_values: Optional[Mapping[str, str]] = None,
    messages: Optional[MessageBundle] = None,
) -> FieldResult:
    """
    Validate one field.

    ``all_values`` is the whole form, for cross-field rules; none of the
    current field kinds need it.

    Returns:
        Ok(normalized_value) or Err(message).
    """
    messages = messages or _default_messages()
    label = messages.get(spec.label_key) if spec.label_key in messages else spec.name
    value = spec.normalize(raw_value or '')

    if not value:
        if spec.required:
            return Err(messages.get('error.required', label=label))
        return Ok(value)

    if spec.max_length is not None and len(value) > spec.max_length:
        return Err(messages.get('error.too_long', label=label, max=spec.max_length))

    return _VALIDATORS[spec.kind](spec, value, messages)


def validate_all(
    variant: FormVariant,
    values: Mapping[str, str],
    messages: Optional[MessageBundle] = None,
) -> ValidationReport:
    """Validate every field of ``variant``; missing fields count as empty."""
    errors: Dict[str, str] = {}
    normalized: Dict[str, str] = {}
    for spec in variant.fields:
        result = validate(spec, values.get(spec.name, ''), values, messages)
        if result.ok:
            normalized[spec.name] = result.value
        else:
            errors[spec.name] = result.message
    return ValidationReport(is_valid=not errors, errors=errors, values=normalized)


def build_variants(
    password_min_length: int = strength.DEFAULT_MIN_LENGTH,
    password_max_length: int = DEFAULT_PASSWORD_MAX_LENGTH,
    email_max_length: int = DEFAULT_EMAIL_MAX_LENGTH,
    name_max_length: int = DEFAULT_NAME_MAX_LENGTH,
) -> Dict[str, FormVariant]:
    """Build the sign-in and sign-up tables from policy thresholds."""
    email = FieldSpec(
        'email', FieldKind.EMAIL,
        max_length=email_max_length,
        normalization=Normalization.TRIM,
    )

    def name_field(name: str) -> FieldSpec:
        return FieldSpec(
            name, FieldKind.TEXT,
            max_length=name_max_length,
            normalization=Normalization.CAPITALIZE,
        )

    sign_in = FormVariant(
        name='sign-in',
        fields=(
            email,
            FieldSpec('password', FieldKind.PASSWORD, max_length=password_max_length),
        ),
        navigates_on_success=True,
    )
    sign_up = FormVariant(
        name='sign-up',
        fields=(
            name_field('firstName'),
            name_field('lastName'),
            email,
            FieldSpec(
                'password', FieldKind.PASSWORD,
                max_length=password_max_length,
                enforce_strength=True,
                min_length=password_min_length,
            ),
        ),
    )
    return {sign_in.name: sign_in, sign_up.name: sign_up}


VARIANTS = build_variants()
SIGN_IN = VARIANTS['sign-in']
SIGN_UP = VARIANTS['sign-up']
