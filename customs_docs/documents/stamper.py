from collections.abc import Callable, Sequence
from pathlib import Path

import pymupdf

from customs_docs.documents.exceptions import StampError, TemplateMissingError
from customs_docs.documents.models import TextField
from customs_docs.logging.logger import Log

FONT_NAME = "helv"
DEFAULT_X = 40.0
DEFAULT_TOP_MARGIN = 40.0
DEFAULT_FONT_SIZE = 8.0
DEFAULT_LINE_HEIGHT = 10.0

TextMeasure = Callable[[str, float], float]


def text_width(text: str, font_size: float) -> float:
    """Width in points of text set in the stamping font."""
    return pymupdf.get_text_length(text, fontname=FONT_NAME, fontsize=font_size)


def wrap_text(
    text: str,
    max_width: float,
    font_size: float,
    measure: TextMeasure = text_width,
) -> list[str]:
    """Greedily pack words into lines no wider than max_width.

    A single word wider than max_width still gets a line of its own.
    """
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if measure(candidate, font_size) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        current = word
    if current:
        lines.append(current)
    return lines


class PdfStamper:
    """Overlays text fields onto the pages of an existing PDF using PyMuPDF."""

    def stamp(self, blank_path: Path, fields: Sequence[TextField], output_path: Path) -> Path:
        """Draw fields onto a copy of blank_path and save it to output_path.

        The source is read fully before writing, so output_path may point at
        blank_path when the caller wants to overwrite it.

        Raises:
            TemplateMissingError: if blank_path does not exist.
            StampError: if the PDF cannot be opened, drawn on or saved.
        """
        if not blank_path.exists():
            raise TemplateMissingError(blank_path)
        source = blank_path.read_bytes()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with pymupdf.open(stream=source, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.page_count == 0:
                    raise StampError(f"{blank_path} has no pages to stamp")
                for field in fields:
                    self._draw(doc, field)
                doc.save(str(output_path), garbage=3, deflate=True)
        except StampError:
            raise
        except Exception as exc:
            raise StampError(f"Failed to stamp {blank_path}: {exc}") from exc
        Log.info(f"Stamped {len(fields)} field(s) from {blank_path.name} into {output_path}")
        return output_path

    def _draw(self, doc: pymupdf.Document, field: TextField) -> None:
        page_index = min(max(0, field.page), doc.page_count - 1)
        page = doc[page_index]
        height = page.rect.height
        size = field.font_size if field.font_size is not None else DEFAULT_FONT_SIZE
        x = field.x if field.x is not None else DEFAULT_X
        if field.y is None:
            top = DEFAULT_TOP_MARGIN
        elif field.from_top:
            top = field.y
        else:
            top = height - field.y

        if field.max_width is not None and field.max_width > 0:
            line_height = (
                field.line_height if field.line_height is not None else DEFAULT_LINE_HEIGHT
            )
            lines = wrap_text(field.text, field.max_width, size)
        else:
            line_height = 0.0
            lines = [field.text]

        for index, line in enumerate(lines):
            if not line:
                continue
            page.insert_text(
                (x, top + index * line_height),
                line,
                fontname=FONT_NAME,
                fontsize=size,
                color=(0, 0, 0),
            )
