"""Collection and operation documentation served under /docs."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field


@dataclass(frozen=True)
class OperationParameter:
    name: str
    type: str
    required: bool
    description: str | None = None

    def to_comment(self) -> str:
        return f"   # @param [{self.type}, {self.name}] {self.description or ''}".rstrip()


@dataclass(frozen=True)
class Documentation:
    """Docs for a whole collection (operation is None) or a single operation."""

    collection: str
    description: str
    operation: str | None = None
    operations: tuple[str, ...] = ()
    params: tuple[OperationParameter, ...] = field(default_factory=tuple)


def _text(element: ET.Element | None) -> str:
    return (element.text or "").strip() if element is not None else ""


def parse_documentation(root: ET.Element, collection: str, operation: str | None = None) -> Documentation | None:
    """Read a <docs> document; returns None when the operation is undocumented."""
    collection_el = root.find("collection")
    if collection_el is None:
        return None

    if operation is None:
        return Documentation(
            collection=collection,
            description=_text(collection_el.find("description")),
            operations=tuple(
                op.get("name") for op in collection_el.findall("operations/operation") if op.get("name")
            ),
        )

    for op in collection_el.findall("operations/operation"):
        if op.get("name") != operation:
            continue
        description = _text(op.find("description"))
        if not description:
            return None
        params = tuple(
            OperationParameter(
                name=param.get("name", ""),
                type=_text(param.find("class")),
                required=param.get("type") == "required",
                description=_text(param.find("description")) or None,
            )
            for param in op.findall("parameter")
        )
        return Documentation(
            collection=collection,
            description=description,
            operation=operation,
            params=params,
        )
    return None
