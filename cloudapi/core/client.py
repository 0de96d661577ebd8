"""Client facade: discovery, accessors and the extra operations of the API.

    client = Client("http://localhost:3001/api", "mockuser", "mockpassword")
    for instance in client.list("instances", state="RUNNING"):
        if "stop" in instance.actions:
            instance.actions.invoke("stop")
"""

from __future__ import annotations

import logging

import requests

from cloudapi.core.accessors import ResourceAccessor, build_accessors, singularize
from cloudapi.core.catalog import EntryPoint, EntryPointCatalog
from cloudapi.core.documentation import Documentation, parse_documentation
from cloudapi.core.errors import BackendFailure, raise_for_status
from cloudapi.core.interfaces import Transport
from cloudapi.core.resource import Resource, materialize
from cloudapi.core.state_machine import State, StateMachine
from cloudapi.shared.documents import parse_document

logger = logging.getLogger(__name__)

INSTANCE_STATES = "instance_states"


class Client:
    """Hypermedia client for the unified cloud API.

    Construction performs discovery; if the root document cannot be fetched
    the constructor raises and no client is created.
    """

    def __init__(
        self,
        api_url: str,
        username: str | None = None,
        password: str | None = None,
        *,
        transport: Transport | None = None,
    ):
        if transport is None:
            from cloudapi.backends.http.transport import RequestsTransport

            transport = RequestsTransport()

        self.api_url = api_url.rstrip("/")
        self._auth = (username, password or "") if username is not None else None
        self._transport = transport
        self._accessors: dict[str, ResourceAccessor] = {}
        self._accessors_for: EntryPoint | None = None
        self.catalog = EntryPointCatalog(self.api_url, lambda url: self.request("GET", url))
        self.discover()

    @classmethod
    def from_env(cls, transport: Transport | None = None) -> Client:
        """Build a client from CLOUDAPI_URL / CLOUDAPI_USER / CLOUDAPI_PASSWORD."""
        from cloudapi.shared.config import API_PASSWORD, API_URL, API_USER, REQUEST_TIMEOUT

        if transport is None:
            from cloudapi.backends.http.transport import RequestsTransport

            transport = RequestsTransport(timeout=REQUEST_TIMEOUT())
        return cls(API_URL(), API_USER() or None, API_PASSWORD(), transport=transport)

    # --- Transport ---

    def request(
        self,
        method: str,
        url: str,
        *,
        params: dict | None = None,
        data: dict | None = None,
    ) -> str:
        """Send an authenticated request; raise on failure, return the body."""
        if not url.startswith(("http://", "https://")):
            url = f"{self.api_url}{url}"
        method = method.upper()
        logger.debug("[%s] %s params=%s", method, url, params)

        try:
            status, body = self._transport.request(
                method, url, auth=self._auth, params=params, data=data
            )
        except requests.RequestException as exc:
            logger.exception("%s %s failed", method, url)
            raise BackendFailure(f"Request to {url} failed: {exc}", url=url) from exc

        raise_for_status(status, body, url)
        return body

    # --- Discovery ---

    def discover(self) -> EntryPoint:
        entry_point = self.catalog.discover()
        if entry_point is not self._accessors_for:
            self._accessors = build_accessors(entry_point, self)
            self._accessors_for = entry_point
        return entry_point

    @property
    def entry_point(self) -> EntryPoint:
        return self.discover()

    @property
    def driver_name(self) -> str:
        return self.entry_point.driver

    @property
    def api_version(self) -> str | None:
        return self.entry_point.version

    @property
    def entry_points(self) -> dict[str, str]:
        return dict(self.entry_point.links)

    @property
    def features(self) -> dict[str, frozenset[str]]:
        return dict(self.entry_point.features)

    @property
    def relations(self) -> frozenset[str]:
        return self.entry_point.relations

    def has_feature(self, relation: str, name: str) -> bool:
        return self.catalog.has_feature(relation, name)

    # --- Accessors ---

    @property
    def accessors(self) -> dict[str, ResourceAccessor]:
        return dict(self._accessors)

    def accessor(self, name: str) -> ResourceAccessor:
        """Look up an accessor by relation ("images") or singular ("image") name."""
        if name in self._accessors:
            return self._accessors[name]
        for accessor in self._accessors.values():
            if accessor.singular == name:
                return accessor
        raise KeyError(f"Relation '{name}' is not advertised by {self.api_url}")

    def list(self, relation: str, /, **filters) -> list[Resource]:
        return self.accessor(relation).list(**filters)

    def get(self, name: str, resource_id: str) -> Resource | None:
        return self.accessor(name).get(resource_id)

    def get_by_url(self, name: str, url: str) -> Resource | None:
        return self.accessor(name).get_by_url(url)

    def fetch(self, relation: str, resource_id: str) -> Resource | None:
        return self.accessor(relation).get(resource_id)

    def _url_for(self, relation: str) -> str:
        url = self.entry_point.url_for(relation)
        if url is None:
            raise KeyError(f"Relation '{relation}' is not advertised by {self.api_url}")
        return url

    # --- Creation ---

    def _create(self, relation: str, params: dict) -> Resource | None:
        url = self._url_for(relation)
        body = self.request("POST", url, data=params)
        root = parse_document(body, url)
        if root.tag != singularize(relation):
            logger.warning("Unexpected <%s> in response to create on %s", root.tag, url)
            return None
        return materialize(relation, root, self)

    def create_instance(
        self,
        image_id: str,
        *,
        name: str | None = None,
        realm: str | None = None,
        user_data: str | None = None,
        key_name: str | None = None,
        security_group: str | None = None,
        hardware_profile: str | dict | None = None,
    ) -> Resource | None:
        """Launch an instance from an image.

        hardware_profile is either a profile id or a dict with an "id" entry
        plus property overrides, e.g. {"id": "m1-small", "memory": 2048}.
        """
        params = {"image_id": image_id}
        optional = {
            "realm_id": realm,
            "name": name,
            "user_data": user_data,
            "keyname": key_name,
            "security_group": security_group,
        }
        params.update({k: v for k, v in optional.items() if v is not None})

        if isinstance(hardware_profile, str):
            params["hwp_id"] = hardware_profile
        elif isinstance(hardware_profile, dict):
            for key, value in hardware_profile.items():
                params[f"hwp_{key}"] = value

        return self._create("instances", params)

    def create_key(self, name: str) -> Resource | None:
        return self._create("keys", {"name": name})

    def create_storage_volume(self, **opts) -> Resource | None:
        params = dict(opts)
        realm = params.pop("realm", None)
        if realm is not None and "realm_id" not in params:
            params["realm_id"] = realm
        return self._create("storage_volumes", params)

    # --- Lifecycle ---

    def instance_states(self) -> StateMachine:
        """Fetch the backend's instance lifecycle machine."""
        url = self._url_for(INSTANCE_STATES)
        return StateMachine.from_document(parse_document(self.request("GET", url), url))

    def instance_state(self, name: str) -> State | None:
        return self.instance_states().state(name)

    # --- Documentation ---

    def documentation(self, collection: str, operation: str | None = None) -> Documentation | None:
        url = f"{self.api_url}/docs/{collection}"
        return parse_documentation(parse_document(self.request("GET", url), url), collection, operation)

    def __repr__(self) -> str:
        return f"Client({self.api_url!r})"


def valid_credentials(
    username: str,
    password: str,
    api_url: str,
    transport: Transport | None = None,
) -> bool:
    """Check credentials against the backend without building a client."""
    if transport is None:
        from cloudapi.backends.http.transport import RequestsTransport

        transport = RequestsTransport()
    try:
        status, _ = transport.request(
            "GET", api_url, auth=(username, password), params={"force_auth": "1"}
        )
    except requests.RequestException as exc:
        logger.exception("Credential check against %s failed", api_url)
        raise BackendFailure(f"Request to {api_url} failed: {exc}", url=api_url) from exc
    return status == 200


def driver_name(api_url: str, transport: Transport | None = None) -> str:
    """Name of the backend driver behind an API URL (no credentials needed)."""
    return Client(api_url, transport=transport).driver_name
