"""Guards for every path and name that reaches the filesystem."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .config import DOC_EXT, DOCS_PREFIX
from .errors import InvalidExtension, InvalidName, InvalidPath, PathTraversal


def validate(path: str, *, require_extension: bool = True) -> None:
    """Reject site paths that leave the content root or are not documents.

    `path` is a site path such as ``/docs/guide/intro.md``.
    """
    if not isinstance(path, str) or not path.startswith(DOCS_PREFIX):
        raise InvalidPath(f"only files under {DOCS_PREFIX} can be accessed")
    if require_extension and not path.endswith(DOC_EXT):
        raise InvalidExtension("only markdown files are supported")
    if ".." in path or "//" in path:
        raise PathTraversal("illegal path traversal detected")


def resolve(root: Path, path: str) -> Path:
    """Map a validated site path to an absolute path below `root`."""
    target = (root / path.lstrip("/")).resolve()
    base = root.resolve()
    if base not in target.parents and target != base:
        raise PathTraversal("path escapes the site root")
    return target


def strip_extension(path: str) -> str:
    return path[: -len(DOC_EXT)] if path.endswith(DOC_EXT) else path


def segments_for(path: str) -> list[str]:
    """Sidebar segments of a document path: ``/docs/a/b.md`` -> ``["a", "b"]``."""
    return strip_extension(path)[len(DOCS_PREFIX):].split("/")


def validate_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidName("name is required")
    if "/" in name or "\\" in name:
        raise InvalidName(f"name must not contain path separators: {name!r}")
    if name.strip() in (".", ".."):
        raise PathTraversal("illegal path traversal detected")
    return name


def validate_segments(segments: Iterable[str]) -> list[str]:
    cleaned = list(segments)
    if not cleaned:
        raise InvalidPath("at least one path segment is required")
    for segment in cleaned:
        validate_name(segment)
    return cleaned
