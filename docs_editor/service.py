"""Content mutations that keep the sidebar/nav JSON and the docs tree in step."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
import threading
from dataclasses import dataclass
from functools import wraps
from pathlib import Path
from typing import Any, Callable
from uuid import uuid4

from . import paths
from .backups import BackupStore, now_stamp
from .config import ALLOWED_IMAGE_EXTS, ASSETS_DIRNAME, DOC_EXT, DOCS_PREFIX, RECENT_LIMIT, Settings
from .errors import DocsEditorError, DuplicateName, InvalidFileType, IOFailure, NotFound, ParentNotFound
from .homepage import RecentFile, recently_modified, update_home_page
from .restart import restart_signal_for
from .sidebar import NavEntry, NavIndex, SidebarIndex, SidebarNode, has_child, insert_child, remove_child, section_key

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    success: bool
    message: str
    file_path: str | None = None
    timestamp: str | None = None
    url: str | None = None
    code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.file_path is not None:
            payload["filePath"] = self.file_path
        if self.timestamp is not None:
            payload["timestamp"] = self.timestamp
        if self.url is not None:
            payload["url"] = self.url
        if self.code is not None:
            payload["code"] = self.code
        return payload


def _operation(label: str) -> Callable:
    """Turn expected failures into a failed OperationResult.

    Validation, lookup and disk errors are reported to the caller; anything
    else propagates so the transport can answer with a server error.
    """

    def decorator(func: Callable[..., OperationResult]) -> Callable[..., OperationResult]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> OperationResult:
            try:
                return func(*args, **kwargs)
            except DocsEditorError as exc:
                logger.warning("%s failed: %s", label, exc)
                return OperationResult(False, f"{label} failed: {exc}", code=exc.code)
            except OSError as exc:
                logger.error("%s failed on disk: %s", label, exc)
                failure = IOFailure(str(exc))
                return OperationResult(False, f"{label} failed: {failure}", code=failure.code)

        return wrapper

    return decorator


class ContentMutator:
    """Single writer for the sidebar and nav documents.

    Every structural change is a read-modify-write of the JSON files and runs
    under `_lock`. Nothing is rolled back if a later step of an operation
    fails on disk.
    """

    def __init__(self, settings: Settings, restart=None, backups: BackupStore | None = None) -> None:
        self.settings = settings
        self.restart = restart if restart is not None else restart_signal_for(settings)
        self.backups = backups or BackupStore()
        self._lock = threading.RLock()

    @property
    def root(self) -> Path:
        return self.settings.root

    def _load_sidebar(self) -> SidebarIndex:
        return SidebarIndex.load(self.settings.sidebar_path)

    def _load_nav(self) -> NavIndex:
        return NavIndex.load(self.settings.nav_path)

    def _node_dir(self, segments: list[str]) -> Path:
        return paths.resolve(self.root, DOCS_PREFIX + "/".join(segments))

    @_operation("Save")
    def save_document(self, path: str, content: str) -> OperationResult:
        paths.validate(path)
        absolute = paths.resolve(self.root, path)
        timestamp = now_stamp()
        logger.info("Saving document %s", absolute)

        if absolute.is_file():
            original = absolute.read_text(encoding="utf-8")
            absolute.write_text(content, encoding="utf-8")
            self.backups.schedule(absolute, original, timestamp)
        else:
            # A new file changes the navigable tree: its node must exist first.
            with self._lock:
                sidebar = self._load_sidebar()
                try:
                    node = sidebar.find(paths.segments_for(path))
                except NotFound as exc:
                    raise NotFound(f"no sidebar node for {path}") from exc
                node.link = paths.strip_extension(path)
                sidebar.save(self.settings.sidebar_path)
                absolute.parent.mkdir(parents=True, exist_ok=True)
                absolute.write_text(content, encoding="utf-8")
            self.restart.notify()

        return OperationResult(True, "File saved", file_path=str(absolute), timestamp=timestamp)

    @_operation("Add category")
    def add_category(self, name: str) -> OperationResult:
        paths.validate_name(name)
        key = section_key(name)
        logger.info("Adding category %s", key)
        with self._lock:
            nav = self._load_nav()
            sidebar = self._load_sidebar()
            if nav.contains(name, key) or key in sidebar.sections:
                raise DuplicateName(f"category already exists: {name}")

            nav.insert(NavEntry(text=name, link=key))
            sidebar.sections[key] = [SidebarNode.category(name, link=f"{key}index")]
            nav.save(self.settings.nav_path)
            sidebar.save(self.settings.sidebar_path)

            docs_dir = self._node_dir([name])
            docs_dir.mkdir(parents=True, exist_ok=True)
            (docs_dir / f"index{DOC_EXT}").write_text(f"# {name}", encoding="utf-8")
        self.restart.notify()
        return OperationResult(True, "Category added")

    def _find_parent(self, sidebar: SidebarIndex, parents: list[str]) -> SidebarNode:
        try:
            return sidebar.find(parents)
        except NotFound as exc:
            raise ParentNotFound(f"parent node not found: {'/'.join(parents)}") from exc

    @_operation("Add node")
    def add_node(self, name: str, parents: list[str]) -> OperationResult:
        paths.validate_name(name)
        parents = paths.validate_segments(parents)
        logger.info("Adding node %s%s/%s", DOCS_PREFIX, "/".join(parents), name)
        with self._lock:
            sidebar = self._load_sidebar()
            parent = self._find_parent(sidebar, parents)
            if has_child(parent, name):
                raise DuplicateName(f"node already exists: {name}")
            insert_child(parent, SidebarNode.category(name))
            sidebar.save(self.settings.sidebar_path)
        self.restart.notify()
        return OperationResult(True, "Node added")

    @_operation("Add document")
    def add_document(self, name: str, parents: list[str]) -> OperationResult:
        paths.validate_name(name)
        parents = paths.validate_segments(parents)
        link = f"{DOCS_PREFIX}{'/'.join(parents)}/{name}"
        logger.info("Adding document %s%s", link, DOC_EXT)
        with self._lock:
            sidebar = self._load_sidebar()
            parent = self._find_parent(sidebar, parents)
            if has_child(parent, name):
                raise DuplicateName(f"node already exists: {name}")
            insert_child(parent, SidebarNode.document(name, link))
            sidebar.save(self.settings.sidebar_path)

            node_dir = self._node_dir(parents)
            node_dir.mkdir(parents=True, exist_ok=True)
            (node_dir / f"{name}{DOC_EXT}").write_text(f"# {name}", encoding="utf-8")
        self.restart.notify()
        return OperationResult(True, "Document added", file_path=str(node_dir / f"{name}{DOC_EXT}"))

    @_operation("Delete")
    def delete_node(self, segments: list[str]) -> OperationResult:
        segments = paths.validate_segments(segments)
        with self._lock:
            sidebar = self._load_sidebar()
            target = sidebar.find(segments)

            node_dir = self._node_dir(segments)
            logger.info("Deleting node %s", node_dir)
            if node_dir.is_dir():
                shutil.rmtree(node_dir)
            if target.link:
                doc = node_dir.with_name(f"{node_dir.name}{DOC_EXT}")
                logger.info("Deleting node document %s", doc)
                doc.unlink(missing_ok=True)

            if len(segments) == 1:
                key = section_key(segments[0])
                nav = self._load_nav()
                nav.remove_link(key)
                nav.save(self.settings.nav_path)
                sidebar.sections.pop(key, None)
            else:
                remove_child(sidebar.find(segments[:-1]), segments[-1])
            sidebar.save(self.settings.sidebar_path)
        self.restart.notify()
        return OperationResult(True, "Deleted")

    @_operation("Image upload")
    def upload_image(self, filename: str, data: bytes, md_path: str) -> OperationResult:
        paths.validate(md_path)
        ext = Path(filename or "").suffix.lower()
        if ext not in ALLOWED_IMAGE_EXTS:
            raise InvalidFileType(f"only image files are supported ({'/'.join(e[1:] for e in ALLOWED_IMAGE_EXTS)})")
        assets_dir = paths.resolve(self.root, md_path).parent / ASSETS_DIRNAME
        assets_dir.mkdir(parents=True, exist_ok=True)
        name = f"{uuid4()}{ext}"
        (assets_dir / name).write_bytes(data)
        logger.info("Stored image %s", assets_dir / name)
        return OperationResult(True, "Image uploaded", url=f"./{ASSETS_DIRNAME}/{name}")

    @_operation("Open")
    def open_document(self, path: str) -> OperationResult:
        paths.validate(path)
        absolute = paths.resolve(self.root, path)
        if not absolute.is_file():
            raise NotFound(f"file not found: {path}")
        _open_with_default_viewer(absolute)
        return OperationResult(True, "File opened", file_path=str(absolute))

    def recently_modified(self, limit: int = RECENT_LIMIT) -> list[RecentFile]:
        return recently_modified(self.root, self.settings.docs_root, limit)

    def refresh_home_page(self) -> None:
        """Rewrite the landing page's recent list; failures are only logged."""
        home = self.settings.home_path
        if not home.is_file():
            logger.debug("No landing page at %s", home)
            return
        try:
            update_home_page(home, self.recently_modified())
        except Exception:
            logger.exception("Failed to update landing page %s", home)

    def flush_backups(self, timeout: float | None = None) -> None:
        self.backups.flush(timeout)


def _open_with_default_viewer(path: Path) -> None:
    if sys.platform.startswith("darwin"):
        subprocess.Popen(["open", str(path)])
        return
    if os.name == "nt":
        os.startfile(str(path))  # type: ignore[attr-defined]
        return
    subprocess.Popen(["xdg-open", str(path)])
