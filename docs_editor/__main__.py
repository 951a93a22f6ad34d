from __future__ import annotations

import atexit
import logging
import os

from .app import create_app
from .config import load_settings
from .logger import setup_logging
from .service import ContentMutator

logger = logging.getLogger("docs_editor")


def main() -> None:
    setup_logging(logging.DEBUG if os.environ.get("DOCS_EDITOR_DEBUG") else logging.INFO)
    settings = load_settings()
    mutator = ContentMutator(settings)
    app = create_app(settings, mutator)
    atexit.register(mutator.flush_backups, 5.0)

    mutator.refresh_home_page()
    logger.info("File service running on http://%s:%d (site root %s)", settings.host, settings.port, settings.root)
    app.run(host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
