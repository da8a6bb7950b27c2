"""
WTForms form classes generated from the FieldSpec tables.

The HTTP layer validates submissions with these forms, and every field
carries one SchemaRule validator delegating to schema.validate(), so the
server-side check and the live controller use the same rules.

CSRF is enforced app-wide by CSRFProtect (see extensions.py), which also
accepts the X-CSRFToken header used by JSON clients, so the per-form
CSRF field is disabled.
"""

from functools import lru_cache

from flask_wtf import FlaskForm
from wtforms import EmailField, PasswordField, StringField
from wtforms.validators import StopValidation

from authforms.forms.schema import FieldKind, FieldSpec, FormVariant, validate
from authforms.i18n import DEFAULT_LOCALE, MESSAGE_BUNDLES

_FIELD_TYPES = {
    FieldKind.EMAIL: EmailField,
    FieldKind.PASSWORD: PasswordField,
    FieldKind.TEXT: StringField,
}


class SchemaRule:
    """WTForms validator running the schema check for one FieldSpec."""

    def __init__(self, spec: FieldSpec):
        self.spec = spec
        self.field_flags = {'required': spec.required}

    def __call__(self, form, field):
        raw = '' if field.data is None else str(field.data)
        value = self.spec.display(raw)
        result = validate(self.spec, value, form.raw_values(), form.messages)
        if not result.ok:
            raise StopValidation(result.message)
        field.data = result.value


class SchemaForm(FlaskForm):
    """Base class; accepts the locale bundle used for error messages."""

    class Meta:
        csrf = False

    def __init__(self, *args, messages=None, **kwargs):
        self.messages = messages or MESSAGE_BUNDLES[DEFAULT_LOCALE]
        super().__init__(*args, **kwargs)

    def raw_values(self) -> dict:
        return {name: '' if f.data is None else str(f.data) for name, f in self._fields.items()}

    @property
    def field_errors(self) -> dict:
        """First error per field, keyed like the schema."""
        return {name: errors[0] for name, errors in self.errors.items() if errors}


@lru_cache(maxsize=None)
def form_class_for(variant: FormVariant):
    """Build (once per variant) the FlaskForm subclass for ``variant``."""
    attrs = {
        spec.name: _FIELD_TYPES[spec.kind](
            spec.name,
            validators=[SchemaRule(spec)],
        )
        for spec in variant.fields
    }
    class_name = ''.join(part.capitalize() for part in variant.name.split('-')) + 'Form'
    return type(class_name, (SchemaForm,), attrs)
