"""Generic resource objects materialized from server XML elements.

Resources carry no compile-time schema: whatever child elements the server
sends become attributes, resolved by this table (first match wins):

- child tag + "s" is an advertised relation  -> LazyReference
- <actions>                                   -> ActionTable
- <property>                                  -> TypedProperty
- <public_addresses>/<private_addresses>      -> list of address strings
- anything else                               -> scalar (float if numeric)
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from cloudapi.core.actions import ActionTable, bind_actions
from cloudapi.core.interfaces import ResourceFetcher
from cloudapi.core.properties import TypedProperty, convert, resolve_property

logger = logging.getLogger(__name__)

ADDRESS_TAGS = frozenset({"public_addresses", "private_addresses"})


@dataclass(frozen=True)
class LazyReference:
    """Pointer to another resource, fetched only when resolved."""

    relation: str
    id: str
    fetcher: ResourceFetcher = field(compare=False, repr=False)

    def resolve(self):
        return self.fetcher.fetch(self.relation, self.id)


class Resource:
    """A snapshot of one server resource."""

    def __init__(self, relation: str, kind: str, resource_id: str, uri: str):
        self.relation = relation
        self.kind = kind
        self.id = resource_id
        self.uri = uri
        self.attributes: dict = {}
        self.actions = ActionTable()

    def get(self, name: str):
        """Return an attribute value, or None (with a warning) if the server never sent it."""
        if name in self.attributes:
            return self.attributes[name]
        logger.warning(
            "SchemaDegradation: attribute '%s' is not available for %s %s",
            name,
            self.kind,
            self.id,
        )
        return None

    def follow(self, name: str):
        """Like get(), but resolves a LazyReference into the referenced resource."""
        value = self.get(name)
        if isinstance(value, LazyReference):
            return value.resolve()
        return value

    @property
    def state(self):
        return self.attributes.get("state")

    def refresh_state(self, state) -> None:
        if state is None:
            self.attributes.pop("state", None)
        else:
            self.attributes["state"] = state

    def available_actions(self) -> list[str]:
        return self.actions.available()

    def action_urls(self) -> dict[str, str]:
        return self.actions.urls()

    def to_dict(self) -> dict:
        """Plain-data view, e.g. for JSON output. References are not followed."""
        out = {"id": self.id, "href": self.uri}
        for name, value in self.attributes.items():
            if isinstance(value, LazyReference):
                out[name] = {"relation": value.relation, "id": value.id}
            elif isinstance(value, TypedProperty):
                out[name] = {
                    "kind": value.kind,
                    "value": value.value,
                    "unit": value.unit,
                    **({"range": value.range} if value.range is not None else {}),
                    **({"options": list(value.options)} if value.options else {}),
                }
            else:
                out[name] = value
        if len(self.actions):
            out["actions"] = self.action_urls()
        return out

    def __contains__(self, name: object) -> bool:
        return name in self.attributes

    def __repr__(self) -> str:
        return f"<Resource {self.kind} id={self.id!r}>"


def materialize(relation: str, element: ET.Element, fetcher: ResourceFetcher) -> Resource:
    """Convert one resource element into a Resource."""
    resource = Resource(relation, element.tag, element.get("id", ""), element.get("href", ""))
    known = fetcher.relations

    for child in element:
        tag = child.tag
        if f"{tag}s" in known and child.get("id") is not None:
            resource.attributes[tag] = LazyReference(f"{tag}s", child.get("id"), fetcher)
        elif tag == "actions":
            resource.actions = bind_actions(resource, child, fetcher)
        elif tag == "property":
            prop = resolve_property(child)
            resource.attributes[prop.name] = prop
        elif tag in ADDRESS_TAGS:
            resource.attributes[tag] = [
                address.text or "" for address in child.findall("address")
            ]
        else:
            resource.attributes[tag] = convert(child.text or "")

    logger.debug("Materialized %s %s with attributes %s", resource.kind, resource.id, list(resource.attributes))
    return resource
