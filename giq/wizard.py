"""
Interactive credential setup.

The wizard is a pure state machine: ``transition(state, key)`` returns the
next ``WizardState`` and ``render(state)`` returns the screen text. The
``run_wizard`` driver feeds it keys from a terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional, Tuple

from .config import GiqConfig
from .errors import UserCancelled
from .providers import Backend, Field, backend_choices, get_backend
from .terminal import Terminal, run_machine


class Step(Enum):
    PROVIDER_SELECTION = "provider_selection"
    INPUT_CREDENTIAL = "input_credential"
    CONFIRM = "confirm"
    DONE = "done"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class WizardState:
    step: Step = Step.PROVIDER_SELECTION
    provider: Optional[str] = None
    field_index: int = 0
    buffer: str = ""
    # (label, value) pairs in entry order
    answers: Tuple[Tuple[str, str], ...] = ()

    @property
    def backend(self) -> Optional[Backend]:
        return get_backend(self.provider) if self.provider else None

    @property
    def fields(self) -> Tuple[Field, ...]:
        backend = self.backend
        return backend.fields if backend else ()

    @property
    def current_field(self) -> Optional[Field]:
        if self.step is Step.INPUT_CREDENTIAL and self.field_index < len(self.fields):
            return self.fields[self.field_index]
        return None

    @property
    def answer_map(self) -> Dict[str, str]:
        return dict(self.answers)

    @property
    def finished(self) -> bool:
        return self.step in {Step.DONE, Step.CANCELLED}


def _restart(state: WizardState) -> WizardState:
    return replace(state, step=Step.PROVIDER_SELECTION, field_index=0, buffer="", answers=())


def _choose_provider(state: WizardState, key: str) -> WizardState:
    if key in {"q", "quit", "escape"}:
        return replace(state, step=Step.CANCELLED)
    choices = backend_choices()
    if key.isdigit() and 1 <= int(key) <= len(choices):
        backend = choices[int(key) - 1]
        return WizardState(step=Step.INPUT_CREDENTIAL, provider=backend.name)
    return state


def _input_credential(state: WizardState, key: str) -> WizardState:
    if key == "quit":
        return replace(state, step=Step.CANCELLED)
    if key == "escape":
        return _restart(state)
    if key == "backspace":
        return replace(state, buffer=state.buffer[:-1])
    if key == "enter":
        value = state.buffer.strip()
        field = state.current_field
        if not value or field is None:
            return state
        answers = state.answers + ((field.label, value),)
        index = state.field_index + 1
        step = Step.CONFIRM if index >= len(state.fields) else Step.INPUT_CREDENTIAL
        return replace(state, step=step, field_index=index, buffer="", answers=answers)
    if len(key) == 1:
        return replace(state, buffer=state.buffer + key)
    return state


def _confirm(state: WizardState, key: str) -> WizardState:
    if key in {"y", "Y", "enter"}:
        return replace(state, step=Step.DONE)
    if key in {"n", "N"}:
        return WizardState()
    if key == "quit":
        return replace(state, step=Step.CANCELLED)
    if key == "escape":
        return _restart(state)
    return state


_HANDLERS = {
    Step.PROVIDER_SELECTION: _choose_provider,
    Step.INPUT_CREDENTIAL: _input_credential,
    Step.CONFIRM: _confirm,
}


def transition(state: WizardState, key: str) -> WizardState:
    handler = _HANDLERS.get(state.step)
    if handler is None:
        return state
    return handler(state, key)


def is_secret(label: str) -> bool:
    low = label.lower()
    return "key" in low or "token" in low


def mask_value(value: str, visible: int = 4) -> str:
    """Keep the first ``visible`` characters; values shorter than that are masked entirely."""
    if len(value) < visible:
        return "*" * len(value)
    return value[:visible] + "*" * (len(value) - visible)


def render(state: WizardState) -> str:
    lines = []
    if state.step is Step.PROVIDER_SELECTION:
        choices = backend_choices()
        lines += ["Select AI Provider:", ""]
        lines += [f"{i}. {b.title}" for i, b in enumerate(choices, start=1)]
        numbers = " or ".join(str(i) for i in range(1, len(choices) + 1))
        lines += ["", f"Press {numbers} to select a provider (q to cancel)"]
    elif state.step is Step.INPUT_CREDENTIAL:
        backend = state.backend
        lines += [f"Setting up {backend.title if backend else ''}", ""]
        for i, field in enumerate(state.fields):
            if i < state.field_index:
                lines.append(f"✓ {field.label}")
            elif i == state.field_index:
                lines += ["", f"> {field.label}:", state.buffer + "▏", "", "Press ENTER to confirm (ESC to start over)"]
            else:
                lines.append(f"  {field.label}")
    elif state.step is Step.CONFIRM:
        backend = state.backend
        lines += ["Please confirm your configuration:", ""]
        lines.append(f"AI Provider: {backend.title if backend else ''}")
        for label, value in state.answers:
            shown = mask_value(value) if is_secret(label) else value
            lines.append(f"{label}: {shown}")
        lines += ["", "Confirm? (Y/n): "]
    elif state.step is Step.DONE:
        lines.append("Configuration complete.")
    else:
        lines.append("Setup cancelled.")
    return "\n".join(lines)


def to_config(state: WizardState) -> GiqConfig:
    backend = state.backend
    if state.step is not Step.DONE or backend is None:
        raise UserCancelled("setup cancelled")
    answers = state.answer_map
    values = {field.key: answers[field.label] for field in backend.fields}
    return GiqConfig(ai_provider=backend.name, **values)


def run_wizard(terminal: Terminal) -> GiqConfig:
    """Collect provider credentials interactively; raises UserCancelled unless confirmed."""
    final = run_machine(terminal, WizardState(), transition, render, lambda s: s.finished)
    return to_config(final)
