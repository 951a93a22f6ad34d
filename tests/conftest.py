"""Test setup for docs_editor."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from docs_editor.config import Settings
from docs_editor.service import ContentMutator

SIDEBAR = {
    "/docs/guide/": [
        {
            "text": "guide",
            "link": "/docs/guide/index",
            "collapsed": False,
            "items": [
                {"text": "intro"},
                {"text": "setup", "link": "/docs/guide/setup"},
            ],
        }
    ],
    "/docs/notes/": [
        {"text": "notes", "link": "/docs/notes/index", "items": []},
    ],
}

NAV = [
    {"text": "guide", "link": "/docs/guide/"},
    {"text": "notes", "link": "/docs/notes/"},
    {"text": "About", "link": "/about"},
]

HOME = """---
layout: home
hero:
  name: My Notes
features: []
---

# Welcome

Body text stays as written.
"""


class RecordingRestart:
    """Counts reload requests instead of touching processes."""

    def __init__(self) -> None:
        self.count = 0

    def notify(self) -> None:
        self.count += 1


@pytest.fixture
def site(tmp_path: Path) -> Settings:
    settings = Settings.for_root(tmp_path, restart_enabled=False)
    settings.sidebar_path.parent.mkdir(parents=True)
    settings.sidebar_path.write_text(json.dumps(SIDEBAR, indent=2), encoding="utf-8")
    settings.nav_path.write_text(json.dumps(NAV, indent=2), encoding="utf-8")
    settings.home_path.write_text(HOME, encoding="utf-8")

    guide = tmp_path / "docs" / "guide"
    guide.mkdir(parents=True)
    (guide / "index.md").write_text("# guide", encoding="utf-8")
    (guide / "setup.md").write_text("# setup", encoding="utf-8")
    (tmp_path / "docs" / "notes").mkdir()
    (tmp_path / "docs" / "notes" / "index.md").write_text("# notes", encoding="utf-8")
    return settings


@pytest.fixture
def restart() -> RecordingRestart:
    return RecordingRestart()


@pytest.fixture
def mutator(site: Settings, restart: RecordingRestart) -> ContentMutator:
    return ContentMutator(site, restart=restart)


def read_json(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))
