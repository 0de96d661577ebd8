"""Entry-point discovery: learn the API's relations from its root document."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping

from cloudapi.core.errors import BackendFailure
from cloudapi.shared.documents import parse_document

logger = logging.getLogger(__name__)

UNKNOWN_DRIVER = "unknown"


@dataclass(frozen=True)
class EntryPoint:
    """Relations advertised by the server, with their URLs and features."""

    driver: str
    version: str | None
    links: Mapping[str, str] = field(default_factory=dict)
    features: Mapping[str, frozenset[str]] = field(default_factory=dict)

    @property
    def relations(self) -> frozenset[str]:
        return frozenset(self.links)

    def url_for(self, relation: str) -> str | None:
        return self.links.get(relation)

    def has_feature(self, relation: str, name: str) -> bool:
        return name in self.features.get(relation, frozenset())


def parse_entry_point(body: str, url: str | None = None) -> EntryPoint:
    """Parse the root <api> document."""
    root = parse_document(body, url)
    if root.tag != "api":
        raise BackendFailure(
            f"Expected <api> root element, got <{root.tag}>",
            cause="invalid_document",
            url=url,
        )

    driver = root.get("driver")
    if not driver:
        logger.warning("Entry point at %s does not declare a driver", url)
        driver = UNKNOWN_DRIVER

    links: dict[str, str] = {}
    features: dict[str, frozenset[str]] = {}
    for link in root.findall("link"):
        rel, href = link.get("rel"), link.get("href")
        if not rel or not href:
            logger.warning("Skipping entry point link without rel/href: %s", link.attrib)
            continue
        links[rel] = href
        names = [f.get("name") for f in link.iter("feature") if f.get("name")]
        if names:
            features[rel] = frozenset(names)
        logger.debug("Entry point '%s' -> %s (features: %s)", rel, href, sorted(names))

    return EntryPoint(
        driver=driver,
        version=root.get("version"),
        links=MappingProxyType(links),
        features=MappingProxyType(features),
    )


class EntryPointCatalog:
    """Discovers the root document once and serves lookups from the cache.

    `fetch` performs an authenticated GET of a URL and returns the body,
    raising AuthFailure / BackendFailure on failure.
    """

    def __init__(self, base_url: str, fetch: Callable[[str], str]):
        self.base_url = base_url
        self._fetch = fetch
        self._entry_point: EntryPoint | None = None
        self._lock = threading.Lock()

    @property
    def discovered(self) -> bool:
        return self._entry_point is not None

    @property
    def entry_point(self) -> EntryPoint | None:
        return self._entry_point

    def discover(self) -> EntryPoint:
        """Fetch and parse the root document.

        Once a non-empty set of entry points has been discovered it is cached
        and later calls perform no I/O. An empty document is not cached.
        """
        if self._entry_point is not None:
            return self._entry_point

        with self._lock:
            if self._entry_point is not None:
                return self._entry_point

            body = self._fetch(self.base_url)
            entry_point = parse_entry_point(body, self.base_url)
            logger.info(
                "Discovered %d entry points at %s (driver=%s, version=%s)",
                len(entry_point.links),
                self.base_url,
                entry_point.driver,
                entry_point.version,
            )
            if entry_point.links:
                self._entry_point = entry_point
            else:
                logger.warning("No entry points advertised at %s", self.base_url)
            return entry_point

    def has_feature(self, relation: str, name: str) -> bool:
        if self._entry_point is None:
            return False
        return self._entry_point.has_feature(relation, name)
