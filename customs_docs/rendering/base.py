from abc import ABC, abstractmethod
from pathlib import Path


class BaseHtmlRenderer(ABC):
    """Contract for all HTML to PDF rendering adapters."""

    @abstractmethod
    def render_pdf(self, html: str, output_path: Path, *, page_format: str = "Letter") -> Path:
        """Print an HTML document to a PDF file.

        Args:
            html: Complete HTML document.
            output_path: Where to write the PDF.
            page_format: Paper format name, e.g. "Letter" or "A4".

        Returns:
            output_path once the file has been written.

        Raises:
            RenderError: if rendering fails for any reason.
        """
