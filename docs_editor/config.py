from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path

DOCS_PREFIX = "/docs/"
DOC_EXT = ".md"
BACKUP_DIRNAME = "backups"
ASSETS_DIRNAME = "assets"
BACKUP_KEEP = 10
RECENT_LIMIT = 15
ALLOWED_IMAGE_EXTS = (".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp")
MAX_UPLOAD_BYTES = 10 * 1024 * 1024

DEFAULT_SIDEBAR = ".vitepress/theme/data/sidebar-data.json"
DEFAULT_NAV = ".vitepress/theme/data/nav-data.json"
DEFAULT_HOME = "index.md"
DEFAULT_KILL_CMD = 'pkill -f "vitepress dev"'
DEFAULT_START_CMD = "pnpm docs:dev"

_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    root: Path
    sidebar_path: Path
    nav_path: Path
    home_path: Path
    restart_enabled: bool = True
    restart_delay: float = 0.3
    kill_command: list[str] = field(default_factory=lambda: shlex.split(DEFAULT_KILL_CMD))
    start_command: list[str] = field(default_factory=lambda: shlex.split(DEFAULT_START_CMD))
    host: str = "127.0.0.1"
    port: int = 3001

    @property
    def docs_root(self) -> Path:
        return self.root / DOCS_PREFIX.strip("/")

    @classmethod
    def for_root(cls, root: Path, **overrides) -> "Settings":
        """Build settings with the default file layout under `root`."""
        root = Path(root)
        values = {
            "root": root,
            "sidebar_path": root / DEFAULT_SIDEBAR,
            "nav_path": root / DEFAULT_NAV,
            "home_path": root / DEFAULT_HOME,
        }
        values.update(overrides)
        return cls(**values)


def _env_path(name: str, base: Path, default: str) -> Path:
    env = os.environ.get(name)
    p = Path(env) if env else Path(default)
    return p if p.is_absolute() else (base / p)


def _env_flag(name: str, default: bool = True) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return str(raw).strip().lower() not in _FALSY


def load_settings() -> Settings:
    """Resolve settings from the environment, relative to the site root."""
    env_root = os.environ.get("DOCS_EDITOR_ROOT")
    root = Path(env_root) if env_root else Path.cwd()
    if not root.is_absolute():
        root = Path.cwd() / root

    try:
        delay = float(os.environ.get("DOCS_EDITOR_RESTART_DELAY", "0.3"))
    except ValueError:
        raise ValueError("DOCS_EDITOR_RESTART_DELAY must be a number of seconds.") from None
    try:
        port = int(os.environ.get("DOCS_EDITOR_PORT", "3001"))
    except ValueError:
        raise ValueError("DOCS_EDITOR_PORT must be an integer.") from None

    return Settings(
        root=root,
        sidebar_path=_env_path("DOCS_EDITOR_SIDEBAR", root, DEFAULT_SIDEBAR),
        nav_path=_env_path("DOCS_EDITOR_NAV", root, DEFAULT_NAV),
        home_path=_env_path("DOCS_EDITOR_HOME", root, DEFAULT_HOME),
        restart_enabled=_env_flag("DOCS_EDITOR_RESTART"),
        restart_delay=delay,
        kill_command=shlex.split(os.environ.get("DOCS_EDITOR_KILL_CMD", DEFAULT_KILL_CMD)),
        start_command=shlex.split(os.environ.get("DOCS_EDITOR_START_CMD", DEFAULT_START_CMD)),
        host=os.environ.get("DOCS_EDITOR_HOST", "127.0.0.1"),
        port=port,
    )
