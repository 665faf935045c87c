import re
from collections.abc import Callable
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from customs_docs.rendering.base import BaseHtmlRenderer


def make_pdf(path: Path, labels: list[str]) -> Path:
    """Write a Letter-size PDF with one page per label, the label drawn near the top."""
    c = canvas.Canvas(str(path), pagesize=letter)
    for label in labels:
        c.drawString(72, 750, label)
        c.showPage()
    c.save()
    return path


class FakeHtmlRenderer(BaseHtmlRenderer):
    """Writes one labelled page per rendered items section instead of launching a browser."""

    def render_pdf(self, html: str, output_path: Path, *, page_format: str = "Letter") -> Path:
        sections = len(re.findall(r'class="items-page"', html))
        labels = [f"Items page {i}" for i in range(1, sections + 1)]
        output_path.parent.mkdir(parents=True, exist_ok=True)
        return make_pdf(output_path, labels)


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[[str, list[str]], Path]:
    """Build labelled PDFs inside the test's temporary directory."""

    def _make(name: str, labels: list[str]) -> Path:
        return make_pdf(tmp_path / name, labels)

    return _make


@pytest.fixture()
def blanks_dir(tmp_path: Path) -> Path:
    """Directory with a blank template for every form kind."""
    directory = tmp_path / "blanks"
    directory.mkdir()
    make_pdf(directory / "INVOICES_BLANK.pdf", ["Invoice page 1", "Invoice page 2"])
    make_pdf(directory / "232_FORM_BLANK.pdf", ["Section 232 form"])
    make_pdf(directory / "TSCA_BLANK.pdf", ["TSCA certification"])
    return directory


@pytest.fixture()
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "generated"


@pytest.fixture()
def fake_renderer() -> FakeHtmlRenderer:
    return FakeHtmlRenderer()


def _items(count: int) -> list[dict[str, object]]:
    return [
        {"description": f"Product {i} industrial resin compound", "quantity": i, "weightKg": 1.5}
        for i in range(1, count + 1)
    ]


@pytest.fixture()
def items_payload() -> Callable[[int], list[dict[str, object]]]:
    return _items


@pytest.fixture()
def shipment_payload() -> dict[str, object]:
    """A realistic generate-docs request body with three items."""
    return {
        "customerContext": "order-1001",
        "trackingNumber": "1Z999AA10123456784",
        "shipperName": "Acme Chemicals",
        "shipFrom": {
            "name": "Acme Warehouse",
            "addressLine1": "1 Dock Rd",
            "city": "Toronto",
            "state": "ON",
            "postalCode": "M5V 2T6",
            "countryCode": "CA",
            "phone": "(416) 555-0100",
        },
        "address": {
            "name": "Jane Buyer",
            "addressLine1": "200 Main St",
            "city": "Phoenix",
            "state": "AZ",
            "postalCode": "85043",
            "countryCode": "US",
            "phone": "16025550199",
        },
        "items": _items(3),
        "order": {
            "invoice_subtotal": 100,
            "discount_rebate": 10,
            "freight": 5,
            "insurance": 2,
            "others": 1,
            "weight": "4.5 kg",
        },
    }
