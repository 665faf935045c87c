import hashlib
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from customs_docs.carrier.base import BaseCarrierClient
from customs_docs.config.settings import Settings
from customs_docs.documents.composer import PdfComposer
from customs_docs.documents.exceptions import CompositionError, TemplateMissingError
from customs_docs.documents.layouts import FORM_LAYOUTS, FORM_ORDER, FormLayout, validate_layouts
from customs_docs.documents.mapper import map_fields
from customs_docs.documents.models import (
    DocumentArtifact,
    FormKind,
    FormResult,
    ShipmentRecord,
)
from customs_docs.documents.stamper import PdfStamper
from customs_docs.documents.submitter import DocumentSubmitter
from customs_docs.logging.logger import Log
from customs_docs.rendering.factory import RendererFactory
from customs_docs.rendering.table_renderer import DEFAULT_ROWS_PER_PAGE, TableRenderer, paginate

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def safe_filename_part(value: str) -> str:
    """Reduce value to filename-safe characters.

    A value that had to be altered gets a short digest of the original appended,
    so distinct identifiers never share an output name.
    """
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", value).strip("._")
    if not cleaned:
        return "UNKNOWN"
    if cleaned != value:
        digest = hashlib.sha1(value.encode("utf-8")).hexdigest()[:8]
        return f"{cleaned}_{digest}"
    return cleaned


@dataclass(frozen=True)
class PipelineOptions:
    blanks_dir: Path
    output_dir: Path
    rows_per_page: int = DEFAULT_ROWS_PER_PAGE
    page_format: str = "Letter"


class DocumentPipeline:
    """Generates every customs form for a shipment and submits each one.

    Per form: map fields -> stamp (or copy + stamp per item group) -> for the
    invoice, render the item table and splice it in after the first page ->
    upload and associate.
    """

    def __init__(
        self,
        options: PipelineOptions,
        *,
        stamper: PdfStamper,
        composer: PdfComposer,
        table_renderer: TableRenderer,
        submitter: DocumentSubmitter,
        layouts: Mapping[FormKind, FormLayout] = FORM_LAYOUTS,
        form_order: tuple[FormKind, ...] = FORM_ORDER,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._options = options
        self._stamper = stamper
        self._composer = composer
        self._table_renderer = table_renderer
        self._submitter = submitter
        self._layouts = layouts
        self._form_order = form_order
        self._today = today

    def run(self, shipment: ShipmentRecord) -> list[FormResult]:
        """Produce and submit all forms.

        Generation and upload failures are isolated per document and reported
        in the returned results.

        Raises:
            TemplateMissingError: if any blank template is absent; nothing is
                                  generated in that case.
        """
        self.ensure_blanks()
        self._options.output_dir.mkdir(parents=True, exist_ok=True)
        Log.info(
            f"Generating {len(self._form_order)} form kind(s) for shipment "
            f"{shipment.shipment_number} with {len(shipment.items)} item(s)"
        )
        results: list[FormResult] = []
        for kind in self._form_order:
            results.extend(self._run_form(self._layouts[kind], shipment))
        return results

    def ensure_blanks(self) -> None:
        for kind in self._form_order:
            path = self._blank_path(self._layouts[kind])
            if not path.exists():
                raise TemplateMissingError(path)

    def output_path(self, layout: FormLayout, shipment_number: str, sequence: int | None) -> Path:
        suffix = f"_{sequence}" if sequence is not None else ""
        name = f"{layout.stem}_{safe_filename_part(shipment_number)}{suffix}.pdf"
        return self._options.output_dir / name

    def item_groups(
        self,
        layout: FormLayout,
        shipment: ShipmentRecord,
    ) -> list[tuple[int | None, ShipmentRecord]]:
        """Split a shipment into per-instance records for capacity-limited forms.

        Sequence numbers are 1-based and only assigned when there is more than
        one group. Forms without a capacity get the whole shipment once.
        """
        capacity = layout.item_capacity
        if capacity is None:
            return [(None, shipment)]
        chunks = paginate(shipment.items, capacity)
        numbered = len(chunks) > 1
        return [
            (index if numbered else None, shipment.with_items(tuple(chunk)))
            for index, chunk in enumerate(chunks, start=1)
        ]

    def _run_form(self, layout: FormLayout, shipment: ShipmentRecord) -> list[FormResult]:
        groups = self.item_groups(layout, shipment)
        if not groups:
            Log.info(f"No items for {layout.kind.value}; no document generated")
        results: list[FormResult] = []
        for sequence, record in groups:
            artifact = DocumentArtifact(
                path=self.output_path(layout, shipment.shipment_number, sequence),
                form_kind=layout.kind,
                template=layout.blank_file,
                shipment_number=shipment.shipment_number,
                sequence=sequence,
            )
            try:
                self._generate(layout, record, artifact)
            except TemplateMissingError:
                raise
            except Exception as exc:
                Log.exception(f"Failed to generate {artifact.file_name}: {exc}")
                results.append(FormResult(artifact=artifact, error=str(exc)))
                continue
            try:
                results.append(self._submitter.submit(artifact, shipment, layout.document_type))
            except Exception as exc:
                Log.exception(f"Unexpected failure submitting {artifact.file_name}: {exc}")
                results.append(FormResult(artifact=artifact))
        return results

    def _generate(self, layout: FormLayout, record: ShipmentRecord, artifact: DocumentArtifact) -> None:
        blank = self._blank_path(layout)
        fields = map_fields(record, layout.kind, today=self._today())
        if layout.item_capacity is not None:
            self._composer.copy(blank, artifact.path)
            self._stamper.stamp(artifact.path, fields, artifact.path)
        else:
            self._stamper.stamp(blank, fields, artifact.path)
        if layout.items_table:
            self._compose_items_table(layout, record, artifact.path)

    def _compose_items_table(self, layout: FormLayout, record: ShipmentRecord, stamped: Path) -> None:
        items_path = self._options.output_dir / (
            f"INVOICE_ITEMS_{safe_filename_part(record.shipment_number)}.pdf"
        )
        rendered = self._table_renderer.render(
            record.items,
            items_path,
            rows_per_page=self._options.rows_per_page,
            page_format=self._options.page_format,
        )
        if rendered is None:
            return
        merged = stamped.with_name(f"{stamped.stem}_MERGED.pdf")
        self._composer.insert_after(stamped, items_path, layout.table_insert_after, merged)
        try:
            merged.replace(stamped)
        except OSError as exc:
            raise CompositionError(f"Failed to move {merged} over {stamped}: {exc}") from exc

    def _blank_path(self, layout: FormLayout) -> Path:
        return self._options.blanks_dir / layout.blank_file


def build_pipeline(settings: Settings, carrier: BaseCarrierClient) -> DocumentPipeline:
    """Build a DocumentPipeline wired with the configured adapters."""
    validate_layouts(settings.blanks_dir)
    options = PipelineOptions(
        blanks_dir=settings.blanks_dir,
        output_dir=settings.output_dir,
        rows_per_page=settings.invoice_rows_per_page,
        page_format=settings.invoice_page_format,
    )
    return DocumentPipeline(
        options,
        stamper=PdfStamper(),
        composer=PdfComposer(),
        table_renderer=TableRenderer(RendererFactory.create(settings)),
        submitter=DocumentSubmitter(carrier),
    )
