"""Application states, deferred state machines and state-change logging."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Generic, Hashable, Mapping, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Hashable)


class AppState(Enum):
    """Top-level screens and transitions of the game."""

    START_MENU = "StartMenu"
    IN_GAME = "InGame"
    IN_EDITOR = "InEditor"
    PAUSE_MENU = "PauseMenu"
    SETTINGS = "Settings"
    TO_EDITOR = "ToEditor"
    TO_GAME = "ToGame"
    EXIT = "Exit"

    @classmethod
    def default(cls) -> "AppState":
        return cls.START_MENU


class StateMachine(Generic[S]):
    """A state holder whose transitions are queued and applied once per frame.

    A freshly created machine counts as changed until the first ``apply``.
    """

    def __init__(self, initial: S) -> None:
        self.current: S = initial
        self.pending: S | None = None
        self._changed = True

    def set(self, state: S) -> None:
        """Queue ``state`` to become current on the next ``apply``."""
        self.pending = state

    def apply(self) -> bool:
        """Apply a queued state, if any; return whether a transition happened."""
        if self.pending is None:
            self._changed = False
            return False
        self.current = self.pending
        self.pending = None
        self._changed = True
        return True

    def is_changed(self) -> bool:
        """Whether the last ``apply`` (or creation) changed the state."""
        return self._changed

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StateMachine):
            return self.current == other.current
        return self.current == other

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"StateMachine(current={self.current!r}, pending={self.pending!r})"


def _describe(state: object) -> str:
    if isinstance(state, Enum):
        return state.name
    return repr(state)


class StateLogger:
    """Reports every labelled state machine whose state has just changed."""

    def __init__(self, machines: Mapping[str, StateMachine]) -> None:
        self.machines = dict(machines)

    def log_changes(self) -> list[str]:
        """Log and return one line for each changed machine, in label order given."""
        lines = [
            f"{label}: {_describe(machine.current)}"
            for label, machine in self.machines.items()
            if machine.is_changed()
        ]
        for line in lines:
            logger.info(line)
        return lines