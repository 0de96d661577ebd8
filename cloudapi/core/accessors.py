"""Synthesize list/get/get-by-url accessors for every advertised relation."""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

from cloudapi.core.catalog import EntryPoint
from cloudapi.core.interfaces import ResourceFetcher
from cloudapi.core.resource import Resource, materialize
from cloudapi.shared.documents import parse_document

logger = logging.getLogger(__name__)

# Relations that are listed in the entry point but do not serve resources.
NON_RESOURCE_RELATIONS = frozenset({"instance_states"})


def singularize(name: str) -> str:
    """Strip one trailing 's' ("storage_volumes" -> "storage_volume")."""
    return name[:-1] if name.endswith("s") else name


class ResourceAccessor:
    """Collection and single-resource operations for one relation."""

    def __init__(self, relation: str, url: str, fetcher: ResourceFetcher):
        self.relation = relation
        self.singular = singularize(relation)
        self.url = url.rstrip("/")
        self._fetcher = fetcher
        self._id_re = re.compile(rf"/{re.escape(relation)}/([^/?#]+)/?$")

    def list(self, **filters) -> list[Resource]:
        """GET the collection; filters become query parameters."""
        params = {k: v for k, v in filters.items() if v is not None}
        body = self._fetcher.request("GET", self.url, params=params or None)
        root = parse_document(body, self.url)
        if root.tag != self.relation:
            logger.warning("Expected <%s> collection from %s, got <%s>", self.relation, self.url, root.tag)
            return []
        return [materialize(self.relation, item, self._fetcher) for item in root.findall(self.singular)]

    def get(self, resource_id: str) -> Resource | None:
        """GET a single resource; raises NotFound on 404."""
        url = f"{self.url}/{resource_id}"
        body = self._fetcher.request("GET", url)
        root = parse_document(body, url)
        if root.tag != self.singular:
            logger.warning("Expected <%s> element from %s, got <%s>", self.singular, url, root.tag)
            return None
        return materialize(self.relation, root, self._fetcher)

    def get_by_url(self, url: str) -> Resource | None:
        match = self._id_re.search(urlsplit(url).path)
        if match is None:
            raise ValueError(f"URL {url!r} does not address a {self.singular}")
        return self.get(match.group(1))

    def __repr__(self) -> str:
        return f"ResourceAccessor({self.relation!r}, {self.url!r})"


def build_accessors(entry_point: EntryPoint, fetcher: ResourceFetcher) -> dict[str, ResourceAccessor]:
    """One accessor per resource relation, keyed by relation name."""
    accessors = {}
    for relation, url in entry_point.links.items():
        if relation in NON_RESOURCE_RELATIONS:
            continue
        accessors[relation] = ResourceAccessor(relation, url, fetcher)
        logger.debug("Added accessors %s / %s", relation, accessors[relation].singular)
    return accessors
