"""Sidebar and nav documents.

Both are plain JSON files consumed by the site theme. Nodes keep whatever
keys the theme put on them and emit them back in their original order, so a
load/save cycle only ever changes what an operation touched.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from .config import DOCS_PREFIX
from .errors import NotFound

_NODE_KEYS = ("text", "link", "items")


@dataclass
class SidebarNode:
    text: str
    link: str | None = None
    items: list["SidebarNode"] | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    key_order: list[str] = field(default_factory=list)

    @property
    def kind(self) -> str:
        return "category" if self.items is not None else "document"

    @classmethod
    def category(cls, text: str, link: str | None = None) -> "SidebarNode":
        return cls(text=text, link=link, items=[])

    @classmethod
    def document(cls, text: str, link: str) -> "SidebarNode":
        return cls(text=text, link=link)

    def to_dict(self) -> dict[str, Any]:
        values: dict[str, Any] = dict(self.extra)
        values["text"] = self.text
        # A key present on load is kept even when its value is null.
        if self.link is not None or "link" in self.key_order:
            values["link"] = self.link
        if self.items is not None:
            values["items"] = [child.to_dict() for child in self.items]
        elif "items" in self.key_order:
            values["items"] = None

        order = [k for k in self.key_order if k in values]
        # Keys added since load go last, as JSON.stringify would place them.
        order.extend(k for k in _NODE_KEYS if k in values and k not in order)
        order.extend(k for k in values if k not in order)
        return {k: values[k] for k in order}


def _node_from_dict(data: Any) -> SidebarNode:
    if not isinstance(data, dict):
        raise ValueError("Sidebar items must be JSON objects.")
    text = data.get("text")
    if not isinstance(text, str):
        raise ValueError("Sidebar item is missing a `text` string.")
    link = data.get("link")
    if link is not None and not isinstance(link, str):
        raise ValueError(f"Sidebar item {text!r} has an invalid link.")
    items_raw = data.get("items")
    if items_raw is not None and not isinstance(items_raw, list):
        raise ValueError(f"Sidebar item {text!r} has invalid items.")
    return SidebarNode(
        text=text,
        link=link,
        items=[_node_from_dict(item) for item in items_raw] if items_raw is not None else None,
        extra={k: v for k, v in data.items() if k not in _NODE_KEYS},
        key_order=list(data.keys()),
    )


def find_node(nodes: Iterable[SidebarNode], segments: list[str]) -> SidebarNode:
    """Walk `segments` through nested `items`, matching on `text`."""
    if not segments:
        raise NotFound("empty node path")
    current = list(nodes)
    for depth, segment in enumerate(segments):
        found = next((node for node in current if node.text == segment), None)
        if found is None:
            raise NotFound(f"node not found: {'/'.join(segments[: depth + 1])}")
        if depth == len(segments) - 1:
            return found
        if found.items is None:
            raise NotFound(f"node has no children: {'/'.join(segments[: depth + 1])}")
        current = found.items
    raise NotFound("/".join(segments))  # pragma: no cover - loop always returns


def insert_child(parent: SidebarNode, node: SidebarNode) -> None:
    if parent.items is None:
        parent.items = []
    parent.items.append(node)


def remove_child(parent: SidebarNode, text: str) -> None:
    for idx, child in enumerate(parent.items or []):
        if child.text == text:
            del parent.items[idx]
            return


def has_child(parent: SidebarNode, text: str) -> bool:
    return any(child.text == text for child in (parent.items or []))


def section_key(name: str) -> str:
    return f"{DOCS_PREFIX}{name}/"


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")


class SidebarIndex:
    """Section key -> ordered top-level nodes."""

    def __init__(self, sections: dict[str, list[SidebarNode]] | None = None) -> None:
        self.sections: dict[str, list[SidebarNode]] = sections if sections is not None else {}

    @classmethod
    def deserialize(cls, data: Any) -> "SidebarIndex":
        if not isinstance(data, dict):
            raise ValueError("Sidebar data must contain a JSON object at the top level.")
        sections: dict[str, list[SidebarNode]] = {}
        for key, nodes in data.items():
            if not isinstance(nodes, list):
                raise ValueError(f"Sidebar section {key!r} must be a JSON list.")
            sections[key] = [_node_from_dict(item) for item in nodes]
        return cls(sections)

    def serialize(self) -> dict[str, Any]:
        return {key: [node.to_dict() for node in nodes] for key, nodes in self.sections.items()}

    @classmethod
    def load(cls, path: Path) -> "SidebarIndex":
        return cls.deserialize(_read_json(path))

    def save(self, path: Path) -> None:
        _write_json(path, self.serialize())

    def top_level(self) -> list[SidebarNode]:
        return [node for nodes in self.sections.values() for node in nodes]

    def find(self, segments: list[str]) -> SidebarNode:
        return find_node(self.top_level(), segments)


@dataclass
class NavEntry:
    text: str | None
    link: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    key_order: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        values: dict[str, Any] = dict(self.extra)
        for key, value in (("text", self.text), ("link", self.link)):
            if value is not None or key in self.key_order:
                values[key] = value
        order = [k for k in self.key_order if k in values]
        order.extend(k for k in values if k not in order)
        return {k: values[k] for k in order}


class NavIndex:
    """Ordered top-level nav entries; the last one is reserved."""

    def __init__(self, entries: list[NavEntry] | None = None) -> None:
        self.entries: list[NavEntry] = entries if entries is not None else []

    @classmethod
    def deserialize(cls, data: Any) -> "NavIndex":
        if not isinstance(data, list):
            raise ValueError("Nav data must contain a JSON list at the top level.")
        entries: list[NavEntry] = []
        for idx, item in enumerate(data):
            if not isinstance(item, dict):
                raise ValueError(f"Nav item {idx + 1} must be an object.")
            entries.append(
                NavEntry(
                    text=item.get("text"),
                    link=item.get("link"),
                    extra={k: v for k, v in item.items() if k not in ("text", "link")},
                    key_order=list(item.keys()),
                )
            )
        return cls(entries)

    def serialize(self) -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in self.entries]

    @classmethod
    def load(cls, path: Path) -> "NavIndex":
        return cls.deserialize(_read_json(path))

    def save(self, path: Path) -> None:
        _write_json(path, self.serialize())

    def contains(self, text: str, link: str) -> bool:
        return any(entry.text == text or entry.link == link for entry in self.entries)

    def insert(self, entry: NavEntry) -> None:
        self.entries.insert(max(len(self.entries) - 1, 0), entry)

    def remove_link(self, link: str) -> None:
        self.entries = [entry for entry in self.entries if entry.link != link]
