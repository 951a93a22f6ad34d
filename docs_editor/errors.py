"""Exceptions raised by docs_editor operations."""


class DocsEditorError(Exception):
    """Base exception for docs_editor operations."""

    code = "ERROR"


class ValidationError(DocsEditorError):
    """An inbound path or name was rejected."""

    code = "INVALID"


class InvalidPath(ValidationError):
    """Path is not rooted under the content prefix."""

    code = "INVALID_PATH"


class InvalidExtension(ValidationError):
    """Path does not carry the document extension."""

    code = "INVALID_EXTENSION"


class PathTraversal(ValidationError):
    """Path tries to climb out of the content root."""

    code = "PATH_TRAVERSAL"


class InvalidName(ValidationError):
    """Node or category name cannot be used on disk."""

    code = "INVALID_NAME"


class InvalidFileType(ValidationError):
    """Uploaded file is not an accepted image type."""

    code = "INVALID_FILE_TYPE"


class NotFound(DocsEditorError):
    """No sidebar node matches the requested path."""

    code = "NOT_FOUND"


class ParentNotFound(NotFound):
    """The parent of a node to be added does not exist."""

    code = "PARENT_NOT_FOUND"


class DuplicateName(DocsEditorError):
    """A sibling with the same name already exists."""

    code = "DUPLICATE_NAME"


class IOFailure(DocsEditorError):
    """Disk read or write failed part way through an operation."""

    code = "IO_FAILURE"
