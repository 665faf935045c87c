from pathlib import Path


class DocumentError(Exception):
    """Base exception for all document generation errors."""


class TemplateMissingError(DocumentError):
    """Raised when a blank PDF template is not present on disk."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Missing template: {path}")
        self.path = path


class TemplateLayoutError(DocumentError):
    """Raised when a form layout does not fit its blank template."""


class StampError(DocumentError):
    """Raised when text cannot be stamped onto a PDF."""


class CompositionError(DocumentError):
    """Raised when PDF documents cannot be merged, split or copied."""
