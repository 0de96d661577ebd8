"""Instance lifecycle machines declared by the reference backend drivers.

Each table is an ordered list of (from_state, to_state, action) tuples; an
action of None marks an automatic transition.
"""

from __future__ import annotations

from cloudapi.core.state_machine import StateMachine

MOCK_TRANSITIONS = [
    ("start", "pending", "create"),
    ("pending", "running", None),
    ("running", "running", "reboot"),
    ("running", "stopped", "stop"),
    ("stopped", "running", "start"),
    ("stopped", "finish", "destroy"),
]

GOGRID_TRANSITIONS = [
    ("start", "pending", None),
    ("pending", "running", None),
    ("running", "stopped", "stop"),
    ("stopped", "running", "start"),
    ("running", "finish", "destroy"),
    ("stopped", "finish", "destroy"),
]

RHEVM_TRANSITIONS = [
    ("start", "stopped", "create"),
    ("pending", "shutting_down", "stop"),
    ("pending", "running", None),
    ("running", "pending", "reboot"),
    ("running", "shutting_down", "stop"),
    ("shutting_down", "stopped", None),
    ("stopped", "pending", "start"),
    ("stopped", "finish", "destroy"),
]

VIRTUALBOX_TRANSITIONS = [
    ("start", "pending", "create"),
    ("pending", "running", None),
    ("running", "stopped", "stop"),
    ("stopped", "running", "start"),
    ("stopped", "finish", "destroy"),
]

DRIVER_TRANSITIONS = {
    "mock": MOCK_TRANSITIONS,
    "gogrid": GOGRID_TRANSITIONS,
    "rhevm": RHEVM_TRANSITIONS,
    "virtualbox": VIRTUALBOX_TRANSITIONS,
}


def machine_for(driver: str) -> StateMachine:
    """Build (and validate) the lifecycle machine of a named driver."""
    if driver not in DRIVER_TRANSITIONS:
        raise ValueError(f"Unknown driver: {driver}")
    return StateMachine(DRIVER_TRANSITIONS[driver])
