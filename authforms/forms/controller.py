"""
Form controller: owns one form instance's state.

Two state machines run side by side:

    validation:  IDLE -> VALIDATING -> VALID | INVALID   (every change)
    submission:  IDLE -> SUBMITTING -> SUCCEEDED | FAILED

A change event revalidates the whole form synchronously and never touches
the submission phase. Submitting is only possible while the form is valid
and no submission is in flight; values are captured when submit() is
called, so edits made while the request is pending do not leak into it.
"""

import enum
import logging
from typing import Callable, Dict, Mapping, Optional, Set

from authforms.forms import strength
from authforms.forms.coordinator import Outcome, SubmissionCoordinator, SubmissionResult, next_attempt_id
from authforms.forms.feedback import ERROR, SUCCESS, CollectingChannel, Notification, NotificationChannel
from authforms.forms.schema import FormVariant, ValidationReport, validate_all
from authforms.i18n import DEFAULT_LOCALE, MESSAGE_BUNDLES, MessageBundle
from authforms.logging_config import audit_log


class ValidationPhase(enum.Enum):
    IDLE = 'idle'
    VALIDATING = 'validating'
    VALID = 'valid'
    INVALID = 'invalid'


class SubmissionPhase(enum.Enum):
    IDLE = 'idle'
    SUBMITTING = 'submitting'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'


# Phases from which a new submission may start (FAILED allows a retry).
_SUBMITTABLE = (SubmissionPhase.IDLE, SubmissionPhase.FAILED)


class FormController:
    """
    Stateful controller for one mounted form.

    Args:
        variant: The FieldSpec table (sign-in or sign-up).
        coordinator: Submission coordinator wired to the variant's action.
        channel: Feedback channel; one notification per attempt.
        navigate: Called with the redirect target after a successful
                  submission, if the variant navigates.
        messages: Locale bundle for field errors.
    """

    def __init__(
        self,
        variant: FormVariant,
        coordinator: SubmissionCoordinator,
        channel: Optional[NotificationChannel] = None,
        navigate: Optional[Callable[[str], None]] = None,
        messages: Optional[MessageBundle] = None,
    ):
        self.variant = variant
        self.coordinator = coordinator
        self.channel = channel if channel is not None else CollectingChannel()
        self.navigate = navigate
        self.messages = messages or MESSAGE_BUNDLES[DEFAULT_LOCALE]

        self.submission_phase = SubmissionPhase.IDLE
        self.last_result: Optional[SubmissionResult] = None
        self._init_fields()

    def _init_fields(self) -> None:
        self.values: Dict[str, str] = self.variant.initial_values()
        self.touched: Set[str] = set()
        self.validation_phase = ValidationPhase.IDLE
        self._report: ValidationReport = validate_all(self.variant, self.values, self.messages)
        self._strength: Optional[strength.PasswordStrength] = None
        self._update_strength()

    # --- Field events ---

    def change(self, name: str, raw_value: str) -> Optional[str]:
        """
        Apply a change event to field ``name``.

        Display normalization runs first, so validation always sees the
        normalized value. Returns the field's error message, or None.
        """
        spec = self.variant.field(name)
        self.values[name] = spec.display(raw_value or '')
        self.touched.add(name)
        self._revalidate()
        if spec is self.variant.strength_field:
            self._update_strength()
        return self.errors.get(name)

    def change_many(self, values: Mapping[str, str]) -> None:
        """Apply several change events, in the variant's field order."""
        for name in self.variant.field_names:
            if name in values:
                self.change(name, values[name])

    def _revalidate(self) -> None:
        self.validation_phase = ValidationPhase.VALIDATING
        self._report = validate_all(self.variant, self.values, self.messages)
        self.validation_phase = ValidationPhase.VALID if self._report.is_valid else ValidationPhase.INVALID

    def _update_strength(self) -> None:
        spec = self.variant.strength_field
        if spec is not None:
            self._strength = strength.score(self.values[spec.name], spec.min_length)

    # --- Derived state ---

    @property
    def is_valid(self) -> bool:
        return self._report.is_valid

    @property
    def errors(self) -> Dict[str, str]:
        """Errors for fields the user has touched; untouched fields stay quiet."""
        return {name: msg for name, msg in self._report.errors.items() if name in self.touched}

    @property
    def password_strength(self) -> Optional[strength.PasswordStrength]:
        return self._strength

    @property
    def can_submit(self) -> bool:
        return self.is_valid and self.submission_phase in _SUBMITTABLE

    # --- Submission ---

    async def submit(self) -> Optional[SubmissionResult]:
        """
        Submit the validated values.

        A no-op returning None while the form is invalid or a submission is
        already in flight.
        """
        if not self.can_submit:
            return None

        # Captured now: later change events do not alter this request.
        captured = dict(self._report.values)
        self.submission_phase = SubmissionPhase.SUBMITTING

        try:
            result = await self.coordinator.submit(captured)
        except Exception as exc:
            # Backstop: the coordinator handles its own failures.
            audit_log(
                event='submission_transport_failure',
                message=f'{self.variant.name} coordinator raised',
                level=logging.ERROR,
                exc_info=exc,
                form=self.variant.name,
            )
            result = SubmissionResult(
                success=False,
                message=self.coordinator.generic_message,
                outcome=Outcome.TRANSPORT_FAILURE,
                attempt=next_attempt_id(),
            )
        except BaseException:
            # Cancellation must not leave the form stuck in SUBMITTING.
            self.submission_phase = SubmissionPhase.FAILED
            raise

        self._apply_outcome(result)
        return result

    def _apply_outcome(self, result: SubmissionResult) -> None:
        self.last_result = result
        if result.success:
            self.submission_phase = SubmissionPhase.SUCCEEDED
            self.channel.publish(Notification(result.attempt, SUCCESS, result.message))
            self.reset()
            if self.variant.navigates_on_success and result.redirect and self.navigate is not None:
                self.navigate(result.redirect)
        else:
            self.submission_phase = SubmissionPhase.FAILED
            self.channel.publish(Notification(result.attempt, ERROR, result.message))

    def reset(self) -> None:
        """Back to the initial empty state."""
        self._init_fields()
        self.submission_phase = SubmissionPhase.IDLE

    def snapshot(self) -> dict:
        """Plain view of the FormState."""
        return {
            'values': dict(self.values),
            'errors': self.errors,
            'is_valid': self.is_valid,
            'can_submit': self.can_submit,
            'validation_phase': self.validation_phase.value,
            'submission_phase': self.submission_phase.value,
        }
