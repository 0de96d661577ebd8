"""Invocable action handles bound from a resource's <actions> links."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cloudapi.core.errors import NotFound
from cloudapi.core.interfaces import ResourceFetcher

if TYPE_CHECKING:
    from cloudapi.core.resource import Resource

logger = logging.getLogger(__name__)

DEFAULT_METHOD = "GET"
ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH", "HEAD"})
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


@dataclass(frozen=True)
class ActionTableEntry:
    name: str
    method: str
    url: str


class BoundAction:
    """Callable handle for one action of one resource.

    Calling it sends the request, then re-reads the resource and copies the
    server-reported state into it. State is never guessed from the action.
    """

    def __init__(self, entry: ActionTableEntry, resource: Resource, fetcher: ResourceFetcher):
        self.entry = entry
        self._resource = resource
        self._fetcher = fetcher

    @property
    def name(self) -> str:
        return self.entry.name

    def __call__(self, **params) -> None:
        entry = self.entry
        if entry.method in BODY_METHODS:
            self._fetcher.request(entry.method, entry.url, data=params or None)
        else:
            self._fetcher.request(entry.method, entry.url, params=params or None)

        resource = self._resource
        try:
            fresh = self._fetcher.fetch(resource.relation, resource.id)
        except NotFound:
            logger.info("%s %s no longer exists after '%s'", resource.kind, resource.id, entry.name)
            resource.refresh_state(None)
            return

        if fresh is None:
            logger.warning("Could not re-read %s %s after '%s'", resource.kind, resource.id, entry.name)
            return
        resource.refresh_state(fresh.attributes.get("state"))

    def __repr__(self) -> str:
        return f"BoundAction({self.entry.name!r}, {self.entry.method} {self.entry.url})"


class ActionTable:
    """Ordered, name-unique table of a resource's actions."""

    def __init__(self, actions: list[BoundAction] | None = None):
        self._actions: dict[str, BoundAction] = {}
        for action in actions or []:
            self._actions[action.name] = action

    def available(self) -> list[str]:
        """Action names as captured when the resource was fetched."""
        return list(self._actions)

    def urls(self) -> dict[str, str]:
        return {name: action.entry.url for name, action in self._actions.items()}

    def invoke(self, name: str, /, **params) -> None:
        self[name](**params)

    def __getitem__(self, name: str) -> BoundAction:
        try:
            return self._actions[name]
        except KeyError:
            raise KeyError(f"No action '{name}'; available: {self.available()}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    def __iter__(self):
        return iter(self._actions.values())

    def __len__(self) -> int:
        return len(self._actions)


def parse_action_links(element: ET.Element) -> list[ActionTableEntry]:
    """Read <link rel method href> children into entries, in document order."""
    entries: list[ActionTableEntry] = []
    seen: set[str] = set()
    for link in element.findall("link"):
        name = link.get("rel")
        url = link.get("href")
        method = (link.get("method") or DEFAULT_METHOD).upper()
        if not name or not url:
            logger.warning("Skipping action link without rel/href: %s", link.attrib)
            continue
        if method not in ALLOWED_METHODS:
            logger.warning("Skipping action '%s' with unsupported method %s", name, method)
            continue
        if name in seen:
            logger.warning("Skipping duplicate action '%s'", name)
            continue
        seen.add(name)
        entries.append(ActionTableEntry(name, method, url))
    return entries


def bind_actions(resource: Resource, element: ET.Element, fetcher: ResourceFetcher) -> ActionTable:
    """Turn an <actions> element into an ActionTable bound to `resource`."""
    return ActionTable(
        [BoundAction(entry, resource, fetcher) for entry in parse_action_links(element)]
    )
