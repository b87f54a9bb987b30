# app.py
from __future__ import annotations

import logging

import streamlit as st

from core.engine import DecisionEngine, EngineConfig
from core.models import MIN_OPTIONS, TOTAL_PERCENTAGE, Rejected, Selected
from core.options import total_percentage
from core.state import (
    DecisionState,
    abandon,
    begin_evaluation,
    initial_state,
    reject,
    resolve,
    to_input,
    with_added_option,
    with_option_field,
    with_question,
    with_removed_option,
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

APP_TITLE = "Decision Maker"
APP_TAGLINE = (
    "Let me help you make a decision based on your preferences. Enter your options "
    "and assign percentage weights to reflect how much you favor each choice."
)


def get_engine() -> DecisionEngine:
    # one engine per browser session; its in-flight guard must not span sessions
    if "engine" not in st.session_state:
        st.session_state.engine = DecisionEngine(EngineConfig())
    return st.session_state.engine


# ----------------------------
# Helpers
# ----------------------------
def _state() -> DecisionState:
    if "decision" not in st.session_state:
        st.session_state.decision = initial_state()
    return st.session_state.decision


def _set_state(state: DecisionState) -> None:
    st.session_state.decision = state


def _drop_option_widgets():
    # widget keys are positional; after add/remove they must be re-seeded from state
    for k in [k for k in st.session_state.keys() if str(k).startswith("opt_")]:
        del st.session_state[k]


def _on_question():
    _set_state(with_question(_state(), st.session_state.question_input))


def _on_option_text(i: int):
    _set_state(with_option_field(_state(), i, "text", st.session_state[f"opt_{i}_text"]))


def _on_option_pct(i: int):
    _set_state(with_option_field(_state(), i, "percentage", st.session_state[f"opt_{i}_pct"]))
    # show the clamped value back in the widget
    st.session_state[f"opt_{i}_pct"] = _state().options[i].percentage


def _add_option():
    _set_state(with_added_option(_state()))
    _drop_option_widgets()


def _remove_option(i: int):
    _set_state(with_removed_option(_state(), i))
    _drop_option_widgets()


def _request_decision():
    _set_state(begin_evaluation(_state()))


# ----------------------------
# UI
# ----------------------------
st.set_page_config(page_title=APP_TITLE, page_icon="🎲", layout="centered")
engine = get_engine()
state = _state()

st.title(APP_TITLE)
st.caption(APP_TAGLINE)

if state.error is not None:
    st.error(state.error.message)

if state.result:
    st.success(f"Based on your preferences, I suggest:\n\n**{state.result}**")

if "question_input" not in st.session_state:
    st.session_state.question_input = state.question
st.text_input(
    "Your Question",
    key="question_input",
    placeholder="What should I decide on today?",
    on_change=_on_question,
)

head = st.columns([3, 2])
with head[0]:
    st.markdown("**Your Options**")
with head[1]:
    total = total_percentage(state.options)
    st.caption(f"Percentages must add up to {TOTAL_PERCENTAGE}% (now: {total}%)")

can_remove = len(state.options) > MIN_OPTIONS
for i, opt in enumerate(state.options):
    text_key, pct_key = f"opt_{i}_text", f"opt_{i}_pct"
    if text_key not in st.session_state:
        st.session_state[text_key] = opt.text
    if pct_key not in st.session_state:
        st.session_state[pct_key] = opt.percentage

    row = st.columns([6, 2, 1])
    with row[0]:
        st.text_input(
            f"Option {i + 1}",
            key=text_key,
            placeholder=f"Option {i + 1}",
            label_visibility="collapsed",
            on_change=_on_option_text,
            args=(i,),
        )
    with row[1]:
        st.number_input(
            "%",
            key=pct_key,
            step=1,
            label_visibility="collapsed",
            on_change=_on_option_pct,
            args=(i,),
        )
    with row[2]:
        st.button("🗑️", key=f"del_{i}", on_click=_remove_option, args=(i,), disabled=not can_remove)

btns = st.columns([1, 1])
with btns[0]:
    st.button("➕ Add Another Option", on_click=_add_option, use_container_width=True)
with btns[1]:
    st.button(
        "Make Decision",
        type="primary",
        on_click=_request_decision,
        disabled=state.evaluating,
        use_container_width=True,
    )

if state.evaluating:
    with st.spinner("Thinking..."):
        outcome = engine.evaluate(to_input(state))
    if isinstance(outcome, Selected):
        _set_state(resolve(state, outcome.text))
        st.rerun()
    elif isinstance(outcome, Rejected):
        _set_state(reject(state, outcome.reason))
        st.rerun()
    else:
        # the engine ignored the request; hand the button back instead of waiting
        _set_state(abandon(state))
        st.rerun()
