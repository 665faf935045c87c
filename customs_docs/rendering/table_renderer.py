"""Renders invoice line items as a paginated HTML table printed to PDF."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from jinja2 import Environment, FileSystemLoader, TemplateError

from customs_docs.documents.models import LineItem
from customs_docs.logging.logger import Log
from customs_docs.rendering.base import BaseHtmlRenderer
from customs_docs.rendering.exceptions import RenderError

T = TypeVar("T")

_TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "invoice_items.html.j2"
DEFAULT_ROWS_PER_PAGE = 28


@dataclass(frozen=True)
class ItemRow:
    """Display values for one table row."""

    number: int
    description: str
    quantity: int
    weight: str
    dimensions: str


def paginate(items: Sequence[T], rows_per_page: int) -> list[list[T]]:
    """Split items into consecutive chunks of at most rows_per_page, keeping order."""
    if rows_per_page < 1:
        raise ValueError(f"rows_per_page must be positive, got {rows_per_page}")
    return [list(items[i : i + rows_per_page]) for i in range(0, len(items), rows_per_page)]


def _measure(value: float | None) -> str:
    if value is None:
        return ""
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def to_row(number: int, item: LineItem) -> ItemRow:
    if item.weight_lbs is not None:
        weight = f"{_measure(item.weight_lbs)} lb"
    elif item.weight_kg is not None:
        weight = f"{_measure(item.weight_kg)} kg"
    else:
        weight = ""
    sides = (item.length, item.width, item.height)
    dimensions = " x ".join(_measure(s) for s in sides) if any(s is not None for s in sides) else ""
    return ItemRow(
        number=number,
        description=item.label,
        quantity=item.quantity,
        weight=weight,
        dimensions=dimensions,
    )


class TableRenderer:
    """Turns line items into page-sized HTML tables and prints them to PDF."""

    def __init__(
        self,
        renderer: BaseHtmlRenderer,
        environment: Environment | None = None,
    ) -> None:
        self._renderer = renderer
        self._environment = environment or Environment(
            loader=FileSystemLoader(_TEMPLATE_DIR),
            autoescape=True,
        )

    def build_html(
        self,
        items: Sequence[LineItem],
        rows_per_page: int = DEFAULT_ROWS_PER_PAGE,
    ) -> str:
        """Build the table document, one section per page of rows.

        Raises:
            RenderError: if the template cannot be loaded or rendered.
        """
        rows = [to_row(index, item) for index, item in enumerate(items, start=1)]
        pages = paginate(rows, rows_per_page)
        try:
            template = self._environment.get_template(TEMPLATE_NAME)
            return template.render(pages=pages)
        except TemplateError as exc:
            raise RenderError(f"Failed to build items table HTML: {exc}") from exc

    def render(
        self,
        items: Sequence[LineItem],
        output_path: Path,
        *,
        rows_per_page: int = DEFAULT_ROWS_PER_PAGE,
        page_format: str = "Letter",
    ) -> Path | None:
        """Render the item table PDF.

        An empty item list yields zero table pages. Nothing is printed in that
        case and None is returned, so the caller splices nothing in.

        Returns:
            The written path, or None for an empty item list.

        Raises:
            RenderError: if the underlying renderer fails.
        """
        if not items:
            Log.info(f"No items to render; skipping {output_path.name}")
            return None
        html = self.build_html(items, rows_per_page)
        Log.info(
            f"Rendering {len(items)} item(s) at {rows_per_page} rows per page to {output_path.name}"
        )
        return self._renderer.render_pdf(html, output_path, page_format=page_format)
