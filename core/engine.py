# core/engine.py
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np

from core.models import (
    TOTAL_PERCENTAGE,
    EvaluationInput,
    EvaluationResult,
    Option,
    Rejected,
    Selected,
    ValidationError,
)

logger = logging.getLogger(__name__)

RandomUnit = Callable[[], float]


# ----------------- validation -----------------
def _blank(text: str) -> bool:
    return not (text or "").strip()


def validate(inp: EvaluationInput) -> Optional[ValidationError]:
    """
    First failing check wins: question, then option texts, then the 100% sum.
    """
    if _blank(inp.question):
        return ValidationError.EMPTY_QUESTION
    if any(_blank(o.text) for o in inp.options):
        return ValidationError.EMPTY_OPTION_TEXT
    if sum(o.percentage for o in inp.options) != TOTAL_PERCENTAGE:
        return ValidationError.PERCENTAGE_SUM_MISMATCH
    return None


# ----------------- weighted draw -----------------
def default_random_unit(seed: Optional[int] = None) -> RandomUnit:
    # Generator.random samples [0.0, 1.0)
    rng = np.random.default_rng(seed)
    return lambda: float(rng.random())


def pick_weighted(options: Sequence[Option], random_unit: Optional[RandomUnit] = None) -> str:
    """
    Options are consecutive intervals over [0, 100] in list order; the first
    option whose cumulative percentage reaches r = random_unit() * 100 wins.
    Falls back to the last option if nothing reaches r.
    """
    if not options:
        raise ValueError("pick_weighted needs at least one option")
    if random_unit is None:
        random_unit = default_random_unit()

    r = random_unit() * TOTAL_PERCENTAGE
    acc = np.cumsum([o.percentage for o in options])
    # side="left": first idx with acc[idx] >= r, i.e. r <= acc
    idx = int(np.searchsorted(acc, r, side="left"))
    if idx >= len(options):
        idx = len(options) - 1
    logger.debug("weighted draw r=%.4f -> option %d", r, idx)
    return options[idx].text


# ----------------- Engine -----------------
@dataclass
class EngineConfig:
    # seconds of simulated "thinking" before the draw; 0 disables it
    thinking_delay: float = 2.0
    seed: Optional[int] = None


class DecisionEngine:
    """
    One evaluation at a time: validate, wait out the thinking delay, draw.
    A request made while another is in flight is ignored (returns None).
    """

    def __init__(
        self,
        cfg: EngineConfig,
        random_unit: Optional[RandomUnit] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.cfg = cfg
        self.random_unit = random_unit or default_random_unit(cfg.seed)
        self._sleep = sleep
        self._in_flight = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    def evaluate(self, inp: EvaluationInput) -> Optional[EvaluationResult]:
        if not self._in_flight.acquire(blocking=False):
            logger.warning("evaluation already in progress; ignoring request")
            return None
        try:
            # snapshot so later edits by the caller can't leak into this draw
            options = tuple(inp.options)
            err = validate(EvaluationInput(inp.question, options))
            if err is not None:
                logger.info("evaluation rejected: %s", err.name)
                return Rejected(err)

            if self.cfg.thinking_delay > 0:
                self._sleep(self.cfg.thinking_delay)

            text = pick_weighted(options, self.random_unit)
            logger.info("evaluation resolved among %d options", len(options))
            return Selected(text)
        finally:
            self._in_flight.release()
