"""Declarative field layouts for each blank customs form.

Coordinates are PDF points. Unless ``from_top`` is set, ``y`` is measured from
the bottom edge of the page.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

import pymupdf

from customs_docs.documents.exceptions import TemplateLayoutError
from customs_docs.documents.models import FormKind
from customs_docs.logging.logger import Log

USER_CREATED_FORM = "013"


@dataclass(frozen=True)
class FieldPosition:
    x: float
    y: float
    page: int = 0
    font_size: float | None = None
    from_top: bool = False


@dataclass(frozen=True)
class FormLayout:
    """Static description of one blank form and where its values go."""

    kind: FormKind
    blank_file: str
    fields: Mapping[str, FieldPosition]
    item_rows: tuple[FieldPosition, ...] = ()
    item_word_limit: int | None = None
    items_table: bool = False
    table_insert_after: int = 0
    document_type: str = USER_CREATED_FORM

    @property
    def item_capacity(self) -> int | None:
        """Number of line items one instance holds, or None when unbounded."""
        return len(self.item_rows) or None

    @property
    def stem(self) -> str:
        return Path(self.blank_file).stem

    def position(self, name: str) -> FieldPosition:
        try:
            return self.fields[name]
        except KeyError:
            raise TemplateLayoutError(
                f"Layout for {self.kind.value} has no field '{name}'"
            ) from None

    def max_page_index(self) -> int:
        pages = [p.page for p in self.fields.values()] + [p.page for p in self.item_rows]
        return max(pages, default=0)


def _fields(**positions: FieldPosition) -> Mapping[str, FieldPosition]:
    return MappingProxyType(dict(positions))


_TSCA_FONT = 10.0

FORM_LAYOUTS: Mapping[FormKind, FormLayout] = MappingProxyType({
    FormKind.COMMERCIAL_INVOICE: FormLayout(
        kind=FormKind.COMMERCIAL_INVOICE,
        blank_file="INVOICES_BLANK.pdf",
        fields=_fields(
            shipment_number=FieldPosition(359, 712),
            date=FieldPosition(333, 655),
            invoice_number=FieldPosition(358, 645),
            recipient_name=FieldPosition(84, 512),
            address_line1=FieldPosition(23, 500),
            city=FieldPosition(23, 488),
            country_code=FieldPosition(23, 476),
            subtotal=FieldPosition(448, 690, page=1),
            discount=FieldPosition(448, 676, page=1),
            subtotal_summary=FieldPosition(448, 662, page=1),
            freight=FieldPosition(448, 649, page=1),
            insurance=FieldPosition(448, 635, page=1),
            others=FieldPosition(448, 622, page=1),
            total=FieldPosition(448, 608, page=1),
            item_count=FieldPosition(448, 589, page=1),
            weight=FieldPosition(448, 577, page=1),
        ),
        items_table=True,
        table_insert_after=0,
    ),
    FormKind.SECTION_232: FormLayout(
        kind=FormKind.SECTION_232,
        blank_file="232_FORM_BLANK.pdf",
        fields=_fields(date=FieldPosition(77, 690)),
    ),
    FormKind.TSCA: FormLayout(
        kind=FormKind.TSCA,
        blank_file="TSCA_BLANK.pdf",
        fields=_fields(
            shipment_number=FieldPosition(240, 127, font_size=_TSCA_FONT, from_top=True),
            date=FieldPosition(327, 720, font_size=_TSCA_FONT, from_top=True),
        ),
        item_rows=tuple(
            FieldPosition(50, y, font_size=_TSCA_FONT, from_top=True)
            for y in (539, 554, 569, 584)
        ),
        item_word_limit=4,
    ),
})

FORM_ORDER: tuple[FormKind, ...] = (
    FormKind.COMMERCIAL_INVOICE,
    FormKind.SECTION_232,
    FormKind.TSCA,
)


def validate_layouts(blanks_dir: Path) -> dict[FormKind, int]:
    """Check every layout against the page count of its blank template.

    Blanks that are not on disk are skipped with a warning; a missing blank only
    fails the requests that need it.

    Returns:
        Page count per form kind whose blank was found.

    Raises:
        TemplateLayoutError: if a layout references a page the blank lacks,
                             or the blank cannot be opened.
    """
    page_counts: dict[FormKind, int] = {}
    for kind in FORM_ORDER:
        layout = FORM_LAYOUTS[kind]
        path = blanks_dir / layout.blank_file
        if not path.exists():
            Log.warning(f"Blank template for {kind.value} not found at {path}")
            continue
        try:
            with pymupdf.open(path) as doc:  # type: ignore[no-untyped-call]
                page_count = doc.page_count
        except Exception as exc:
            raise TemplateLayoutError(f"Cannot open blank template {path}: {exc}") from exc
        if layout.max_page_index() >= page_count:
            raise TemplateLayoutError(
                f"Layout for {kind.value} uses page {layout.max_page_index() + 1} "
                f"but {path} has {page_count} page(s)"
            )
        page_counts[kind] = page_count
    Log.info(f"Validated {len(page_counts)} form layout(s) in {blanks_dir}")
    return page_counts
