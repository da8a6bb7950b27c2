"""
Submission coordinator: hands validated values to an authentication action.

Three outcome classes:
1. Accepted: the action reports success
2. Rejected: the action reports a domain failure (bad credentials,
   duplicate account). A normal outcome, not an exception.
3. Transport failure: the call raised, or returned something that is not
   a valid response. Logged for operators, shown as a generic message.

The coordinator trusts its input (the controller validated it) and never
retries on its own.
"""

import enum
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr, ValidationError

from authforms.logging_config import audit_log, sanitize_log_value

AuthAction = Callable[[Dict[str, str]], Awaitable[Mapping[str, Any]]]

_attempt_counter = itertools.count(1)


def next_attempt_id() -> int:
    """Process-wide submission attempt number, used to key notifications."""
    return next(_attempt_counter)


class Outcome(enum.Enum):
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'
    TRANSPORT_FAILURE = 'transport_failure'


@dataclass(frozen=True)
class SubmissionResult:
    success: bool
    message: str
    redirect: Optional[str] = None
    outcome: Outcome = Outcome.ACCEPTED
    attempt: int = 0


class ActionResponse(BaseModel):
    """Shape every authentication action must return."""

    model_config = ConfigDict(extra='ignore')

    success: StrictBool
    message: StrictStr
    redirect: Optional[StrictStr] = None


def build_payload(values: Mapping[str, str]) -> Dict[str, str]:
    """Flat field-name -> string mapping, values passed through untouched."""
    return {name: value for name, value in values.items()}


class SubmissionCoordinator:
    """
    Submits one form's values to an external authentication action.

    Args:
        action: Awaitable callable taking the payload, returning a mapping
                with ``success``, ``message`` and optionally ``redirect``.
        generic_message: Message shown for transport failures.
        form_name: Form variant name, for the audit log.
        log_context: Extra audit fields (request id, client ip) added to
                     every event this coordinator logs.
    """

    def __init__(
        self,
        action: AuthAction,
        generic_message: str,
        form_name: str = 'form',
        log_context: Optional[Mapping[str, str]] = None,
    ):
        self.action = action
        self.generic_message = generic_message
        self.form_name = form_name
        self.log_context = dict(log_context or {})

    async def submit(self, values: Mapping[str, str]) -> SubmissionResult:
        attempt = next_attempt_id()
        payload = build_payload(values)
        context = {
            **self.log_context,
            'form': self.form_name,
            'attempt': attempt,
            'email': sanitize_log_value(payload.get('email', '')) or None,
        }

        audit_log(
            event='submission_started',
            message=f'{self.form_name} submission #{attempt} started',
            **context,
        )

        try:
            raw = await self.action(payload)
            response = ActionResponse.model_validate(raw)
        except ValidationError as exc:
            return self._transport_failure(attempt, exc, 'malformed_response', context)
        except Exception as exc:
            return self._transport_failure(attempt, exc, type(exc).__name__, context)

        if response.success:
            audit_log(
                event='submission_accepted',
                message=f'{self.form_name} submission #{attempt} accepted',
                outcome=Outcome.ACCEPTED.value,
                **context,
            )
            return SubmissionResult(
                success=True,
                message=response.message,
                redirect=response.redirect,
                outcome=Outcome.ACCEPTED,
                attempt=attempt,
            )

        audit_log(
            event='submission_rejected',
            message=f'{self.form_name} submission #{attempt} rejected',
            outcome=Outcome.REJECTED.value,
            **context,
        )
        return SubmissionResult(
            success=False,
            message=response.message,
            outcome=Outcome.REJECTED,
            attempt=attempt,
        )

    def _transport_failure(self, attempt: int, exc: BaseException, reason: str, context: dict) -> SubmissionResult:
        # The exception goes to the log only; the user gets the generic message.
        audit_log(
            event='submission_transport_failure',
            message=f'{self.form_name} submission #{attempt} failed in transport',
            level=logging.ERROR,
            exc_info=exc,
            outcome=Outcome.TRANSPORT_FAILURE.value,
            reason=reason,
            **context,
        )
        return SubmissionResult(
            success=False,
            message=self.generic_message,
            outcome=Outcome.TRANSPORT_FAILURE,
            attempt=attempt,
        )
