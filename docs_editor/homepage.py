"""Recently modified documents and the landing page that lists them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from io import StringIO
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from .config import BACKUP_DIRNAME, DOC_EXT, RECENT_LIMIT

logger = logging.getLogger(__name__)

yaml = YAML()
yaml.preserve_quotes = True
yaml.indent(mapping=2, sequence=2, offset=2)
# Avoid line wrapping that can split `Key: value` into two lines.
yaml.width = 4096

FRONT_MATTER_DELIM = "---"


@dataclass
class RecentFile:
    path: str
    title: str
    mtime: float
    mtime_label: str

    def to_dict(self) -> dict[str, object]:
        return {"path": self.path, "title": self.title, "mtime": self.mtime, "mtimeStr": self.mtime_label}


def format_relative_time(moment: datetime, now: datetime | None = None) -> str:
    now = now or datetime.now()
    seconds = (now - moment).total_seconds()
    minutes = round(seconds / 60)
    hours = round(seconds / 3600)
    days = round(seconds / 86400)

    if minutes < 5:
        return "just now"
    if minutes < 60:
        return f"{minutes} minutes ago"
    if hours < 8:
        return f"{hours} hours ago"
    if hours < 24:
        return "today"
    if days < 2:
        return "yesterday"
    if days < 3:
        return "2 days ago"
    if days < 7:
        return f"{days} days ago"
    return moment.strftime("%Y-%m-%d %H:%M:%S")


def _iter_documents(directory: Path):
    for child in sorted(directory.iterdir(), key=lambda p: p.name):
        if child.is_dir():
            if child.name == BACKUP_DIRNAME:
                continue
            yield from _iter_documents(child)
        elif child.name.endswith(DOC_EXT):
            yield child


def recently_modified(root: Path, docs_root: Path, limit: int = RECENT_LIMIT, now: datetime | None = None) -> list[RecentFile]:
    """Newest documents under `docs_root`, skipping backup folders."""
    if not docs_root.is_dir():
        return []
    files: list[RecentFile] = []
    for doc in _iter_documents(docs_root):
        mtime = doc.stat().st_mtime
        site_rel = doc.relative_to(root).as_posix()[: -len(DOC_EXT)]
        title_rel = doc.relative_to(docs_root).as_posix()[: -len(DOC_EXT)]
        files.append(
            RecentFile(
                path=f"/{site_rel}",
                title=title_rel.replace("/", " > "),
                mtime=mtime,
                mtime_label=format_relative_time(datetime.fromtimestamp(mtime), now),
            )
        )
    files.sort(key=lambda f: f.mtime, reverse=True)
    return files[:limit]


def split_front_matter(content: str) -> tuple[str, str]:
    """Return (front matter, body). Leading newlines of the body are dropped."""
    if not content.startswith(FRONT_MATTER_DELIM):
        raise ValueError("Landing page has no front matter block.")
    end = content.find(FRONT_MATTER_DELIM, len(FRONT_MATTER_DELIM))
    if end == -1:
        raise ValueError("Landing page front matter is not closed.")
    front = content[len(FRONT_MATTER_DELIM):end].strip()
    body = content[end + len(FRONT_MATTER_DELIM):].lstrip("\r\n")
    return front, body


def update_home_page(home_path: Path, recent: list[RecentFile]) -> None:
    """Replace the `features` list in the landing page front matter."""
    with home_path.open("r", encoding="utf-8", newline="") as handle:
        content = handle.read()
    front, body = split_front_matter(content)
    data = yaml.load(front) or CommentedMap()
    if not isinstance(data, CommentedMap):
        raise TypeError("Landing page front matter must be a mapping.")

    data["features"] = [
        CommentedMap({"title": f.title, "details": f"Last modified: {f.mtime_label}", "link": f.path})
        for f in recent
    ]
    buf = StringIO()
    yaml.dump(data, buf)
    with home_path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(f"{FRONT_MATTER_DELIM}\n{buf.getvalue()}{FRONT_MATTER_DELIM}\n{body}")
    logger.info("Updated landing page with %d recent documents", len(recent))
