from __future__ import annotations

import logging
import re
import threading
from datetime import datetime
from pathlib import Path

from .config import BACKUP_DIRNAME, BACKUP_KEEP, DOC_EXT

logger = logging.getLogger(__name__)


def now_stamp(moment: datetime | None = None) -> str:
    """Fixed-width ``YYYYMMDD-HHMMSS.mmm`` stamp; sorts lexically by time."""
    moment = moment or datetime.now()
    return f"{moment.strftime('%Y%m%d-%H%M%S')}.{moment.microsecond // 1000:03d}"


class BackupStore:
    """Keeps the last `keep` versions of each document in a sibling `backups/` dir."""

    def __init__(self, keep: int = BACKUP_KEEP) -> None:
        self.keep = keep
        self._threads: list[threading.Thread] = []
        self._lock = threading.Lock()

    @staticmethod
    def backup_dir_for(document: Path) -> Path:
        return document.parent / BACKUP_DIRNAME

    @staticmethod
    def _pattern(stem: str) -> re.Pattern[str]:
        # Optional -N suffix marks a second backup taken within the same millisecond.
        return re.compile(rf"^{re.escape(stem)}_(\d{{8}}-\d{{6}}\.\d{{3}})(?:-(\d+))?{re.escape(DOC_EXT)}$")

    def list_backups(self, document: Path) -> list[Path]:
        """Backups of `document`, newest first."""
        backup_dir = self.backup_dir_for(document)
        if not backup_dir.is_dir():
            return []
        pattern = self._pattern(document.stem)
        found: list[tuple[str, int, Path]] = []
        for p in backup_dir.iterdir():
            match = pattern.match(p.name)
            if match:
                found.append((match.group(1), int(match.group(2) or 0), p))
        found.sort(key=lambda item: (item[0], item[1]), reverse=True)
        return [p for _, _, p in found]

    def backup(self, document: Path, content: str, timestamp: str) -> Path:
        backup_dir = self.backup_dir_for(document)
        backup_dir.mkdir(parents=True, exist_ok=True)
        backup_path = backup_dir / f"{document.stem}_{timestamp}{DOC_EXT}"
        seq = 0
        while True:
            try:
                with backup_path.open("x", encoding="utf-8") as handle:
                    handle.write(content)
                break
            except FileExistsError:
                seq += 1
                backup_path = backup_dir / f"{document.stem}_{timestamp}-{seq}{DOC_EXT}"
        logger.info("Backed up %s to %s", document, backup_path)
        self.prune(document)
        return backup_path

    def prune(self, document: Path) -> list[Path]:
        removed: list[Path] = []
        for old in self.list_backups(document)[self.keep:]:
            try:
                old.unlink()
                removed.append(old)
            except OSError as exc:
                logger.error("Failed to delete old backup %s: %s", old, exc)
        return removed

    def _run(self, document: Path, content: str, timestamp: str) -> None:
        try:
            self.backup(document, content, timestamp)
        except Exception:
            logger.exception("Backup of %s failed", document)

    def schedule(self, document: Path, content: str, timestamp: str) -> threading.Thread:
        """Back up on a background thread; the caller never sees failures."""
        thread = threading.Thread(
            target=self._run, args=(document, content, timestamp), name=f"backup-{document.stem}", daemon=True
        )
        with self._lock:
            self._threads = [t for t in self._threads if t.is_alive()]
            self._threads.append(thread)
        thread.start()
        return thread

    def flush(self, timeout: float | None = None) -> None:
        """Wait for scheduled backups to finish."""
        with self._lock:
            pending = list(self._threads)
            self._threads = []
        for thread in pending:
            thread.join(timeout)
