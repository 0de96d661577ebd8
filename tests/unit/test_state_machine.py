"""Unit tests for the instance lifecycle state machine."""

from __future__ import annotations

import pytest

from cloudapi.backends.machines import DRIVER_TRANSITIONS, MOCK_TRANSITIONS, machine_for
from cloudapi.core.errors import ValidationFailure
from cloudapi.core.state_machine import StateMachine, StateMachineError


def test_actions_available_from_running_excludes_automatic_transitions():
    machine = StateMachine(
        [
            ("start", "pending", "create"),
            ("pending", "running", None),
            ("running", "stopped", "stop"),
            ("running", "running", "reboot"),
            ("running", "finish", "destroy"),
            ("stopped", "running", "start"),
        ]
    )

    assert machine.actions_available_from("running") == {"stop", "reboot", "destroy"}
    assert machine.actions_available_from("pending") == set()
    assert machine.actions_available_from("nowhere") == set()


def test_transitions_preserve_declaration_order():
    machine = StateMachine(MOCK_TRANSITIONS)

    transitions = machine.transitions_from("running")

    assert [(t.destination, t.action) for t in transitions] == [("running", "reboot"), ("stopped", "stop")]
    assert machine.is_automatic(machine.transitions_from("pending")[0]) is True
    assert machine.is_automatic(transitions[0]) is False


def test_start_and_terminal_states_are_detected():
    machine = StateMachine(MOCK_TRANSITIONS)

    assert machine.start == "start"
    assert machine.terminals == ("finish",)
    assert machine.state("finish").terminal is True


def test_self_loop_does_not_disqualify_start_state():
    machine = StateMachine([("start", "start", "poke"), ("start", "done", "finish")])

    assert machine.start == "start"


@pytest.mark.parametrize(
    "table",
    [
        [],
        [("a", "b", "go"), ("c", "b", "go")],  # two start states
        [("a", "b", "go"), ("b", "a", "back")],  # no start, no terminal
        [("start", "a", "go"), ("a", "b", "go"), ("b", "a", "back")],  # no terminal
    ],
)
def test_invalid_machines_are_rejected_at_construction(table):
    with pytest.raises(StateMachineError):
        StateMachine(table)


def test_as_graph_is_order_preserving_projection():
    machine = StateMachine(MOCK_TRANSITIONS)

    graph = machine.as_graph()

    assert graph["nodes"] == ["start", "pending", "running", "stopped", "finish"]
    assert [(e["from"], e["to"], e["action"]) for e in graph["edges"]] == MOCK_TRANSITIONS
    assert graph["edges"][1]["auto"] is True


def test_require_action_rejects_illegal_action():
    machine = StateMachine(MOCK_TRANSITIONS)

    machine.require_action("running", "stop")
    with pytest.raises(ValidationFailure) as exc_info:
        machine.require_action("stopped", "reboot")

    assert exc_info.value.cause == "validation_failure"
    assert machine.next_state("stopped", "start") == "running"


def test_document_round_trip_reproduces_the_machine():
    machine = StateMachine(MOCK_TRANSITIONS)

    parsed = StateMachine.from_document(machine.to_document())

    assert parsed.as_graph() == machine.as_graph()
    assert parsed.start == "start"


@pytest.mark.parametrize("driver", sorted(DRIVER_TRANSITIONS))
def test_reference_driver_machines_are_valid(driver):
    machine = machine_for(driver)

    assert machine.start == "start"
    assert "finish" in machine.terminals


def test_machine_for_unknown_driver_raises():
    with pytest.raises(ValueError):
        machine_for("nonexistent")
