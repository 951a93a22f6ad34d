"""Tests for path and name validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from docs_editor import paths
from docs_editor.errors import InvalidExtension, InvalidName, InvalidPath, PathTraversal


class TestValidate:
    """Tests for validate."""

    def test_accepts_document_under_docs(self) -> None:
        paths.validate("/docs/guide/intro.md")

    def test_rejects_path_outside_docs(self) -> None:
        with pytest.raises(InvalidPath):
            paths.validate("/src/secret.md")

    def test_rejects_relative_docs_path(self) -> None:
        with pytest.raises(InvalidPath):
            paths.validate("docs/guide/intro.md")

    def test_rejects_non_markdown(self) -> None:
        with pytest.raises(InvalidExtension):
            paths.validate("/docs/guide/intro.txt")

    def test_extension_not_required_when_disabled(self) -> None:
        paths.validate("/docs/guide/assets", require_extension=False)

    @pytest.mark.parametrize("path", ["/docs/../etc/passwd.md", "/docs/guide//intro.md"])
    def test_rejects_traversal(self, path: str) -> None:
        with pytest.raises(PathTraversal):
            paths.validate(path)

    def test_is_repeatable(self) -> None:
        """Validating the same bad path fails the same way twice."""
        for _ in range(2):
            with pytest.raises(InvalidExtension):
                paths.validate("/docs/a.txt")


class TestResolve:
    """Tests for resolve."""

    def test_maps_site_path_below_root(self, tmp_path: Path) -> None:
        assert paths.resolve(tmp_path, "/docs/a/b.md") == (tmp_path / "docs" / "a" / "b.md").resolve()

    def test_rejects_escape(self, tmp_path: Path) -> None:
        with pytest.raises(PathTraversal):
            paths.resolve(tmp_path / "site", "/../outside.md")


class TestSegments:
    """Tests for segment helpers."""

    def test_segments_for_document(self) -> None:
        assert paths.segments_for("/docs/guide/deep/intro.md") == ["guide", "deep", "intro"]

    def test_validate_segments_rejects_empty_list(self) -> None:
        with pytest.raises(InvalidPath):
            paths.validate_segments([])

    @pytest.mark.parametrize("name", ["", "  ", "a/b", "a\\b"])
    def test_validate_name_rejects_bad_names(self, name: str) -> None:
        with pytest.raises(InvalidName):
            paths.validate_name(name)

    def test_validate_name_rejects_dot_dot(self) -> None:
        with pytest.raises(PathTraversal):
            paths.validate_name("..")
