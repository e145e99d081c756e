"""Canonical state transition helpers for multi-step workflows."""

from __future__ import annotations

from collections.abc import Sequence

from pipedash.core.exceptions import InvalidTransitionError


class StateMachine:
    """Simple in-memory state machine over an explicit transition table."""

    def __init__(self, transitions: dict[str, set[str]]) -> None:
        self._transitions = transitions

    @classmethod
    def linear(cls, states: Sequence[str], allow_back: bool = True) -> "StateMachine":
        """Build a machine where each state advances to the next one.

        With ``allow_back`` every state may also return to any earlier state.
        """
        transitions: dict[str, set[str]] = {}
        for index, state in enumerate(states):
            targets = set(states[index + 1 : index + 2])
            if allow_back:
                targets.update(states[:index])
            transitions[state] = targets
        return cls(transitions)

    @property
    def states(self) -> list[str]:
        return list(self._transitions)

    def targets(self, current: str) -> set[str]:
        return set(self._transitions.get(current, set()))

    def can_transition(self, current: str, target: str) -> bool:
        return target in self._transitions.get(current, set())

    def assert_transition(self, current: str, target: str) -> None:
        if not self.can_transition(current=current, target=target):
            raise InvalidTransitionError(f"Transition not allowed: {current} -> {target}")
