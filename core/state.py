# core/state.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Tuple

from core.engine import validate
from core.models import EvaluationInput, Option, ValidationError
from core.options import add_option, default_options, remove_option, update_option_field

logger = logging.getLogger(__name__)


class Phase(Enum):
    IDLE = "idle"
    EVALUATING = "evaluating"


@dataclass(frozen=True)
class DecisionState:
    """
    Everything the page shows, as one immutable value.
    The page keeps the only mutable reference and swaps it on each transition.
    """
    question: str = ""
    options: Tuple[Option, ...] = field(default_factory=lambda: tuple(default_options()))
    result: str = ""
    error: Optional[ValidationError] = None
    phase: Phase = Phase.IDLE

    @property
    def evaluating(self) -> bool:
        return self.phase is Phase.EVALUATING


def initial_state() -> DecisionState:
    return DecisionState()


def to_input(state: DecisionState) -> EvaluationInput:
    return EvaluationInput(state.question, state.options)


# ----------------- form edits -----------------
def with_question(state: DecisionState, text: str) -> DecisionState:
    return replace(state, question=text)


def with_option_field(state: DecisionState, index: int, field_name: str, value: Any) -> DecisionState:
    return replace(state, options=tuple(update_option_field(state.options, index, field_name, value)))


def with_added_option(state: DecisionState) -> DecisionState:
    return replace(state, options=tuple(add_option(state.options)))


def with_removed_option(state: DecisionState, index: int) -> DecisionState:
    return replace(state, options=tuple(remove_option(state.options, index)))


# ----------------- evaluation lifecycle -----------------
def begin_evaluation(state: DecisionState) -> DecisionState:
    """
    Idle -> Validating -> Rejected (idle, error set) | Evaluating (error and result cleared).
    Already evaluating: the request is dropped and the state comes back unchanged.
    """
    if state.evaluating:
        logger.warning("evaluation already in progress; ignoring request")
        return state

    err = validate(to_input(state))
    if err is not None:
        # the previous result stays on screen next to the error
        return replace(state, error=err, phase=Phase.IDLE)
    return replace(state, error=None, result="", phase=Phase.EVALUATING)


def resolve(state: DecisionState, text: str) -> DecisionState:
    if not state.evaluating:
        raise RuntimeError("resolve() called with no evaluation in progress")
    return replace(state, result=text, phase=Phase.IDLE)


def abandon(state: DecisionState) -> DecisionState:
    """
    Evaluating -> Idle with result and error untouched, for a draw that never ran.
    """
    if not state.evaluating:
        return state
    return replace(state, phase=Phase.IDLE)


def reject(state: DecisionState, reason: ValidationError) -> DecisionState:
    # engine-side rejection of an in-flight evaluation
    if not state.evaluating:
        raise RuntimeError("reject() called with no evaluation in progress")
    return replace(state, error=reason, phase=Phase.IDLE)
