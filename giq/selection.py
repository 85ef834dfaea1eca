from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

from .terminal import Terminal, run_machine

NAV_HINT = "Use ↑/↓ arrows to navigate, enter to select (q to quit)"


class Phase(Enum):
    ACTIVE = "active"
    SELECTED = "selected"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SelectionState:
    options: Tuple[str, ...]
    cursor: int = 0
    phase: Phase = Phase.ACTIVE
    selected: Optional[int] = None

    @property
    def finished(self) -> bool:
        return self.phase is not Phase.ACTIVE


def initial_state(options: Sequence[str]) -> SelectionState:
    if not options:
        raise ValueError("a selection needs at least one option")
    return SelectionState(options=tuple(options))


def transition(state: SelectionState, key: str) -> SelectionState:
    if state.finished:
        return state
    if key in {"up", "k"}:
        return replace(state, cursor=max(state.cursor - 1, 0))
    if key in {"down", "j"}:
        return replace(state, cursor=min(state.cursor + 1, len(state.options) - 1))
    if key == "enter":
        return replace(state, phase=Phase.SELECTED, selected=state.cursor)
    if key in {"q", "quit", "escape"}:
        return replace(state, phase=Phase.CANCELLED, selected=None)
    return state


def render(state: SelectionState, title: str) -> str:
    lines = [title, ""]
    for i, option in enumerate(state.options):
        marker = "> " if i == state.cursor else "  "
        lines.append(f"{marker}{option}")
    if not state.finished:
        lines += ["", NAV_HINT]
    return "\n".join(lines)


def select(terminal: Terminal, title: str, options: Sequence[str]) -> Optional[int]:
    """Show ``options`` and return the chosen index, or None when cancelled."""
    final = run_machine(
        terminal,
        initial_state(options),
        transition,
        lambda s: render(s, title),
        lambda s: s.finished,
    )
    return final.selected
