"""Local editing companion for a documentation site."""

from __future__ import annotations

from .config import Settings, load_settings
from .service import ContentMutator, OperationResult

__all__ = ["ContentMutator", "OperationResult", "Settings", "load_settings"]

__version__ = "0.3.0"
