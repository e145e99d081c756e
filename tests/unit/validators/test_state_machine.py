from __future__ import annotations

import pytest

from pipedash.core.exceptions import InvalidTransitionError
from pipedash.orchestration.state_machine import StateMachine


def test_state_machine_allows_valid_transition():
    sm = StateMachine({"new": {"running"}, "running": {"completed"}})
    assert sm.can_transition("new", "running") is True
    sm.assert_transition("new", "running")


def test_state_machine_rejects_invalid_transition():
    sm = StateMachine({"new": {"running"}})
    with pytest.raises(InvalidTransitionError):
        sm.assert_transition("new", "completed")


def test_linear_machine_only_steps_forward_one_state():
    sm = StateMachine.linear(["a", "b", "c", "d"])
    assert sm.can_transition("a", "b") is True
    assert sm.can_transition("a", "c") is False
    assert sm.can_transition("d", "a") is True
    assert sm.targets("c") == {"d", "a", "b"}


def test_linear_machine_without_back_transitions():
    sm = StateMachine.linear(["a", "b", "c"], allow_back=False)
    assert sm.can_transition("c", "a") is False
    assert sm.targets("c") == set()
    assert sm.states == ["a", "b", "c"]
