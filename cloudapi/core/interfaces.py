"""Abstract interfaces for the cloud API client.

Core logic depends only on these protocols, never on a concrete HTTP library
or a concrete cloud backend. To talk to the server through a different HTTP
stack, implement Transport; to plug in another provider on the server side,
implement Driver.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from cloudapi.core.resource import Resource
    from cloudapi.core.state_machine import StateMachine


class Transport(Protocol):
    """Perform one blocking HTTP round trip."""

    def request(
        self,
        method: str,
        url: str,
        *,
        auth: tuple[str, str] | None = None,
        params: dict | None = None,
        data: dict | None = None,
    ) -> tuple[int, str]:
        """Send a request and return (status_code, body_text).

        Network-level failures raise requests.RequestException.
        """
        ...


class ResourceFetcher(Protocol):
    """What materialized resources need from their owning client."""

    @property
    def relations(self) -> frozenset[str]:
        """Relation names advertised by the entry point."""
        ...

    def fetch(self, relation: str, resource_id: str) -> Resource | None:
        """GET a single resource of the given relation by id."""
        ...

    def request(
        self,
        method: str,
        url: str,
        *,
        params: dict | None = None,
        data: dict | None = None,
    ) -> str:
        """Send an authenticated request, raising on non-2xx. Returns the body."""
        ...


class Driver(Protocol):
    """A backend adapter as seen by the unified API server."""

    name: str

    def instance_state_machine(self) -> StateMachine:
        """The declared lifecycle machine for this backend's instances."""
        ...

    def instances(self, **filters) -> list[dict]:
        """List instance records, optionally filtered by attribute values."""
        ...

    def instance(self, instance_id: str) -> dict | None:
        """Get a single instance record by ID."""
        ...

    def perform_action(self, instance_id: str, action: str) -> dict:
        """Apply a lifecycle action and return the updated record."""
        ...
