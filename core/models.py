# core/models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

TOTAL_PERCENTAGE = 100
MIN_OPTIONS = 3


@dataclass(frozen=True)
class Option:
    text: str = ""
    percentage: int = 0


class ValidationError(Enum):
    """
    Reasons an evaluation is rejected. The value is the message shown on the page.
    """
    EMPTY_QUESTION = "Please enter a question"
    EMPTY_OPTION_TEXT = "Please fill in all option texts"
    PERCENTAGE_SUM_MISMATCH = "Percentages must add up to 100%"

    @property
    def message(self) -> str:
        return self.value


@dataclass(frozen=True)
class EvaluationInput:
    question: str
    options: Tuple[Option, ...]

    def __post_init__(self):
        # callers may hand in a list; keep a private tuple copy
        object.__setattr__(self, "options", tuple(self.options))


@dataclass(frozen=True)
class Selected:
    text: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    reason: ValidationError

    @property
    def ok(self) -> bool:
        return False


EvaluationResult = Union[Selected, Rejected]
