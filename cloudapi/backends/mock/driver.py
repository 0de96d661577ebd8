"""In-memory mock driver for testing.

Holds images, realms, hardware profiles, keys and instances as plain dicts and
drives instance state through the mock lifecycle machine, so every action is
validated exactly the way a real backend would validate it.
"""

from __future__ import annotations

import uuid

from cloudapi.backends.machines import machine_for
from cloudapi.core.state_machine import StateMachine


class MockDriver:
    name = "mock"

    def __init__(self):
        self._machine = machine_for("mock")
        self._images: dict[str, dict] = {}
        self._realms: dict[str, dict] = {}
        self._hardware_profiles: dict[str, dict] = {}
        self._keys: dict[str, dict] = {}
        self._instances: dict[str, dict] = {}

    def instance_state_machine(self) -> StateMachine:
        return self._machine

    # --- Catalog data ---

    def put_image(self, image: dict) -> None:
        self._images[image["id"]] = image

    def images(self, **filters) -> list[dict]:
        return _filter(self._images.values(), filters)

    def image(self, image_id: str) -> dict | None:
        return self._images.get(image_id)

    def put_realm(self, realm: dict) -> None:
        self._realms[realm["id"]] = realm

    def realms(self, **filters) -> list[dict]:
        return _filter(self._realms.values(), filters)

    def realm(self, realm_id: str) -> dict | None:
        return self._realms.get(realm_id)

    def put_hardware_profile(self, profile: dict) -> None:
        self._hardware_profiles[profile["id"]] = profile

    def hardware_profiles(self, **filters) -> list[dict]:
        return _filter(self._hardware_profiles.values(), filters)

    def hardware_profile(self, profile_id: str) -> dict | None:
        return self._hardware_profiles.get(profile_id)

    # --- Keys ---

    def create_key(self, name: str) -> dict:
        if not name:
            raise ValueError("name is required")
        key = {"id": name, "name": name, "fingerprint": uuid.uuid4().hex[:16]}
        self._keys[name] = key
        return key

    def keys(self, **filters) -> list[dict]:
        return _filter(self._keys.values(), filters)

    def key(self, key_id: str) -> dict | None:
        return self._keys.get(key_id)

    # --- Instances ---

    def instances(self, **filters) -> list[dict]:
        return _filter(self._instances.values(), filters)

    def instance(self, instance_id: str) -> dict | None:
        return self._instances.get(instance_id)

    def create_instance(self, image_id: str, **params) -> dict:
        if image_id not in self._images:
            raise ValueError(f"Unknown image: {image_id}")

        instance_id = f"inst-{uuid.uuid4().hex[:8]}"
        state = self._settle(self._machine.next_state(self._machine.start, "create"))
        instance = {
            "id": instance_id,
            "name": params.get("name") or instance_id,
            "owner_id": "mockuser",
            "image_id": image_id,
            "realm_id": params.get("realm_id", "us"),
            "hardware_profile_id": params.get("hwp_id", "m1-small"),
            "state": state,
            "public_addresses": [f"{instance_id}.public.example.com"],
            "private_addresses": [f"{instance_id}.private.example.com"],
        }
        self._instances[instance_id] = instance
        return instance

    def available_actions(self, instance: dict) -> list[str]:
        """Explicit actions legal from the instance's state, in declaration order."""
        actions = []
        for transition in self._machine.transitions_from(instance["state"]):
            if transition.action is not None and transition.action not in actions:
                actions.append(transition.action)
        return actions

    def perform_action(self, instance_id: str, action: str) -> dict:
        """Apply an action; raises ValidationFailure if illegal, KeyError if unknown id."""
        instance = self._instances.get(instance_id)
        if instance is None:
            raise KeyError(f"Instance {instance_id} not found")

        destination = self._settle(self._machine.next_state(instance["state"], action))
        if destination in self._machine.terminals:
            del self._instances[instance_id]
        instance["state"] = destination
        return instance

    def _settle(self, state: str) -> str:
        """Follow automatic transitions until a state needs a client action."""
        seen = {state}
        while True:
            automatic = [t for t in self._machine.transitions_from(state) if t.automatic]
            if len(automatic) != 1 or automatic[0].destination in seen:
                return state
            state = automatic[0].destination
            seen.add(state)


def _filter(records, filters: dict) -> list[dict]:
    results = list(records)
    for field, value in filters.items():
        if value is not None:
            results = [r for r in results if str(r.get(field)) == str(value)]
    return results
