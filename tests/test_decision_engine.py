from __future__ import annotations

import threading

from core.engine import DecisionEngine, EngineConfig
from core.models import EvaluationInput, Option, Rejected, Selected, ValidationError

OPTIONS = [Option("Walk", 20), Option("Bike", 30), Option("Bus", 50)]


def _engine(r: float = 0.5, delay: float = 0.0, sleep=None) -> DecisionEngine:
    kwargs = {"sleep": sleep} if sleep is not None else {}
    return DecisionEngine(EngineConfig(thinking_delay=delay), random_unit=lambda: r, **kwargs)


def test_evaluate_selects_option():
    out = _engine(r=0.4).evaluate(EvaluationInput("How to commute?", OPTIONS))
    assert out == Selected("Bike")
    assert out.ok


def test_evaluate_rejects_without_drawing_or_waiting():
    calls = []

    def unit():
        calls.append("draw")
        return 0.5

    engine = DecisionEngine(EngineConfig(thinking_delay=5.0), random_unit=unit, sleep=calls.append)
    out = engine.evaluate(EvaluationInput(" ", OPTIONS))

    assert out == Rejected(ValidationError.EMPTY_QUESTION)
    assert not out.ok
    assert calls == []


def test_evaluate_waits_thinking_delay_before_draw():
    calls = []

    def unit():
        calls.append("draw")
        return 0.9

    engine = DecisionEngine(EngineConfig(thinking_delay=2.0), random_unit=unit, sleep=calls.append)
    out = engine.evaluate(EvaluationInput("How to commute?", OPTIONS))

    assert out == Selected("Bus")
    assert calls == [2.0, "draw"]


def test_zero_delay_skips_sleep():
    calls = []
    engine = _engine(sleep=calls.append)
    engine.evaluate(EvaluationInput("How to commute?", OPTIONS))
    assert calls == []


def test_seeded_engines_agree():
    inp = EvaluationInput("How to commute?", OPTIONS)
    a = DecisionEngine(EngineConfig(thinking_delay=0, seed=5))
    b = DecisionEngine(EngineConfig(thinking_delay=0, seed=5))
    assert [a.evaluate(inp) for _ in range(10)] == [b.evaluate(inp) for _ in range(10)]


def test_second_request_while_in_flight_is_ignored():
    entered = threading.Event()
    release = threading.Event()

    def blocking_sleep(_seconds):
        entered.set()
        release.wait(timeout=5)

    engine = _engine(r=0.1, delay=1.0, sleep=blocking_sleep)
    inp = EvaluationInput("How to commute?", OPTIONS)
    results = []
    worker = threading.Thread(target=lambda: results.append(engine.evaluate(inp)))
    worker.start()
    try:
        assert entered.wait(timeout=5)
        assert engine.busy
        assert engine.evaluate(inp) is None
    finally:
        release.set()
        worker.join(timeout=5)

    assert results == [Selected("Walk")]
    assert not engine.busy
    # accepts new work once the first evaluation finished
    assert engine.evaluate(inp) == Selected("Walk")


def test_evaluation_uses_a_snapshot_of_options():
    opts = list(OPTIONS)
    inp = EvaluationInput("How to commute?", opts)
    opts.append(Option("Drive", 0))

    assert len(inp.options) == 3
    assert _engine(r=0.99).evaluate(inp) == Selected("Bus")


def test_separate_engines_do_not_block_each_other():
    entered = threading.Event()
    release = threading.Event()

    def blocking_sleep(_seconds):
        entered.set()
        release.wait(timeout=5)

    first = _engine(r=0.1, delay=1.0, sleep=blocking_sleep)
    second = _engine(r=0.9, delay=1.0, sleep=lambda _s: None)
    inp = EvaluationInput("How to commute?", OPTIONS)
    results = []
    worker = threading.Thread(target=lambda: results.append(first.evaluate(inp)))
    worker.start()
    try:
        assert entered.wait(timeout=5)
        assert first.busy
        assert not second.busy
        assert second.evaluate(inp) == Selected("Bus")
    finally:
        release.set()
        worker.join(timeout=5)

    assert results == [Selected("Walk")]
