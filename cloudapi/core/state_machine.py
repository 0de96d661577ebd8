"""Instance lifecycle state machine.

A backend declares its machine as an ordered table of transitions:

    StateMachine([
        ("start", "pending", "create"),
        ("pending", "running", None),     # automatic
        ("running", "stopped", "stop"),
        ("stopped", "finish", "destroy"),
    ])

The server uses it to decide which actions a resource may advertise and to
reject illegal ones; the client parses the same table back from the
lifecycle-states listing.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass

from cloudapi.core.errors import ValidationFailure


class StateMachineError(ValueError):
    """A declared machine violates the start/terminal invariants."""


@dataclass(frozen=True)
class Transition:
    destination: str
    action: str | None = None

    @property
    def automatic(self) -> bool:
        return self.action is None


@dataclass(frozen=True)
class State:
    name: str
    transitions: tuple[Transition, ...] = ()

    @property
    def terminal(self) -> bool:
        return not self.transitions


class StateMachine:
    """Validated, read-only lifecycle graph."""

    def __init__(self, transitions: list[tuple[str, str, str | None]]):
        order: list[str] = []
        outbound: dict[str, list[Transition]] = {}
        incoming: dict[str, set[str]] = {}

        for source, destination, action in transitions:
            for name in (source, destination):
                if name not in outbound:
                    order.append(name)
                    outbound[name] = []
                    incoming[name] = set()
            outbound[source].append(Transition(destination, action or None))
            incoming[destination].add(source)

        if not order:
            raise StateMachineError("State machine declares no transitions")

        starts = [name for name in order if not (incoming[name] - {name})]
        if len(starts) != 1:
            raise StateMachineError(
                f"Expected exactly one start state, found {len(starts)}: {starts}"
            )

        terminals = [name for name in order if not outbound[name]]
        if not terminals:
            raise StateMachineError("State machine has no terminal state")

        self._table = [(s, d, a or None) for s, d, a in transitions]
        self._states = {name: State(name, tuple(outbound[name])) for name in order}
        self.start = starts[0]
        self.terminals = tuple(terminals)

    # --- Queries ---

    @property
    def states(self) -> list[State]:
        return list(self._states.values())

    def state(self, name: str) -> State | None:
        return self._states.get(name)

    def transitions_from(self, state_name: str) -> list[Transition]:
        state = self._states.get(state_name)
        return list(state.transitions) if state else []

    @staticmethod
    def is_automatic(transition: Transition) -> bool:
        return transition.action is None

    def actions_available_from(self, state_name: str) -> set[str]:
        """Explicit trigger actions legal from a state (automatic ones excluded)."""
        return {t.action for t in self.transitions_from(state_name) if t.action is not None}

    def next_state(self, state_name: str, action: str) -> str:
        """Destination reached by firing `action` from `state_name`."""
        self.require_action(state_name, action)
        return next(
            t.destination for t in self.transitions_from(state_name) if t.action == action
        )

    def require_action(self, state_name: str, action: str) -> None:
        """Raise ValidationFailure unless `action` is legal from `state_name`."""
        if action not in self.actions_available_from(state_name):
            raise ValidationFailure(
                f"Action '{action}' is not available in state '{state_name}'",
                status=400,
                cause="validation_failure",
                details={"state": state_name, "action": action},
            )

    def as_graph(self) -> dict:
        """Nodes in declaration order and one edge per declared transition."""
        return {
            "nodes": list(self._states),
            "edges": [
                {"from": source, "to": destination, "action": action, "auto": action is None}
                for source, destination, action in self._table
            ],
        }

    # --- Documents ---

    def to_document(self) -> str:
        """Render the lifecycle-states listing."""
        root = ET.Element("states")
        for state in self._states.values():
            state_el = ET.SubElement(root, "state", name=state.name)
            for transition in state.transitions:
                attrs = {"to": transition.destination}
                if transition.automatic:
                    attrs["auto"] = "true"
                else:
                    attrs["action"] = transition.action
                ET.SubElement(state_el, "transition", attrs)
        return ET.tostring(root, encoding="unicode")

    @classmethod
    def from_document(cls, body: str | ET.Element) -> StateMachine:
        """Parse a lifecycle-states listing back into a validated machine."""
        root = ET.fromstring(body) if isinstance(body, str) else body
        table = []
        for state_el in root.findall("state"):
            for transition_el in state_el.findall("transition"):
                auto = transition_el.get("auto", "").lower() == "true"
                table.append(
                    (
                        state_el.get("name"),
                        transition_el.get("to"),
                        None if auto else transition_el.get("action"),
                    )
                )
        return cls(table)

    def __repr__(self) -> str:
        return f"StateMachine(start={self.start!r}, states={list(self._states)!r})"
