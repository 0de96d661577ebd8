"""XML document parsing shared by the catalog, accessors and client."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from cloudapi.core.errors import BackendFailure


def parse_document(body: str, url: str | None = None) -> ET.Element:
    """Parse a response body, raising BackendFailure if it is not XML."""
    try:
        return ET.fromstring(body)
    except ET.ParseError as exc:
        raise BackendFailure(
            f"Malformed XML document: {exc}",
            cause="invalid_document",
            url=url,
        ) from exc
