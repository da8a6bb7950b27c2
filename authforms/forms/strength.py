"""
Password strength scoring.

Five independent criteria, each worth one point. The level buckets the
score; unmet criteria are always reported in the same order so the
strength indicator renders stable hints.
"""

import enum
from dataclasses import dataclass
from typing import Dict, List, Tuple

DEFAULT_MIN_LENGTH = 8


class Criterion(enum.Enum):
    """One boolean property of a password. Declaration order is display order."""

    MIN_LENGTH = 'min_length'
    LOWERCASE = 'lowercase'
    UPPERCASE = 'uppercase'
    DIGIT = 'digit'
    SYMBOL = 'symbol'


class StrengthLevel(enum.IntEnum):
    VERY_WEAK = 0
    WEAK = 1
    MEDIUM = 2
    STRONG = 3
    VERY_STRONG = 4


# score -> level; monotonic in score.
_LEVEL_BY_SCORE = {
    0: StrengthLevel.VERY_WEAK,
    1: StrengthLevel.VERY_WEAK,
    2: StrengthLevel.WEAK,
    3: StrengthLevel.MEDIUM,
    4: StrengthLevel.STRONG,
    5: StrengthLevel.VERY_STRONG,
}


@dataclass(frozen=True)
class PasswordStrength:
    level: StrengthLevel
    score: int
    unmet: Tuple[Criterion, ...]

    @property
    def satisfied(self) -> bool:
        """True when every criterion is met."""
        return not self.unmet


def _is_symbol(char: str) -> bool:
    return not char.isalnum() and not char.isspace()


def check_criteria(password: str, min_length: int = DEFAULT_MIN_LENGTH) -> Dict[Criterion, bool]:
    """Evaluate every criterion independently."""
    return {
        Criterion.MIN_LENGTH: len(password) >= min_length,
        Criterion.LOWERCASE: any(c.islower() for c in password),
        Criterion.UPPERCASE: any(c.isupper() for c in password),
        Criterion.DIGIT: any(c.isdigit() for c in password),
        Criterion.SYMBOL: any(_is_symbol(c) for c in password),
    }


def score(password: str, min_length: int = DEFAULT_MIN_LENGTH) -> PasswordStrength:
    """
    Score a password.

    Total over all strings: the empty password is VERY_WEAK with every
    criterion unmet.
    """
    results = check_criteria(password or '', min_length)
    points = sum(results.values())
    unmet = tuple(criterion for criterion in Criterion if not results[criterion])
    return PasswordStrength(level=_LEVEL_BY_SCORE[points], score=points, unmet=unmet)


def describe(strength: PasswordStrength, messages, min_length: int = DEFAULT_MIN_LENGTH) -> dict:
    """
    Render a strength for the indicator next to the password field.

    Returns the localized level label and one hint per unmet criterion.
    """
    hints: List[Dict[str, str]] = [
        {
            'criterion': criterion.value,
            'hint': messages.get(f'hint.{criterion.value}', min=min_length),
        }
        for criterion in strength.unmet
    ]
    return {
        'level': strength.level.name.lower(),
        'label': messages.get(f'strength.{strength.level.name.lower()}'),
        'score': strength.score,
        'max_score': len(Criterion),
        'unmet': hints,
    }
