"""Typed hardware-profile properties parsed from <property> elements."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

NUMERIC_RE = re.compile(r"^[0-9.]+$")


def convert(text: str) -> float | str:
    """Coerce purely numeric text to float, keep anything else as-is."""
    stripped = text.strip()
    if NUMERIC_RE.match(stripped):
        try:
            return float(stripped)
        except ValueError:
            # e.g. "1.2.3" matches the pattern but is not a number
            return text
    return text


@dataclass(frozen=True)
class TypedProperty:
    """A named property with an optional value and a kind-specific facet.

    range: {"from": ..., "to": ...} for kind "range", else None.
    options: ordered allowed values for kind "enum", else empty.
    """

    name: str
    kind: str
    value: float | str | None = None
    unit: str | None = None
    range: dict[str, str | None] | None = None
    options: tuple[str, ...] = field(default_factory=tuple)

    def present(self) -> bool:
        return self.value is not None


def resolve_property(element: ET.Element) -> TypedProperty:
    """Build a TypedProperty from a <property> element."""
    kind = element.get("kind", "fixed")
    raw_value = element.get("value")

    prop_range = None
    options: tuple[str, ...] = ()
    if kind == "range":
        range_el = element.find("range")
        if range_el is not None:
            prop_range = {"from": range_el.get("first"), "to": range_el.get("last")}
        else:
            prop_range = {"from": None, "to": None}
    elif kind == "enum":
        options = tuple(
            entry.get("value") for entry in element.iter("entry") if entry.get("value") is not None
        )

    return TypedProperty(
        name=element.get("name", ""),
        kind=kind,
        value=convert(raw_value) if raw_value is not None else None,
        unit=element.get("unit"),
        range=prop_range,
        options=options,
    )
