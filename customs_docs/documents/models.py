from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any


class FormKind(str, Enum):
    """Customs documents this service knows how to produce."""

    COMMERCIAL_INVOICE = "COMMERCIAL_INVOICE"
    SECTION_232 = "SECTION_232"
    TSCA = "TSCA"


@dataclass(frozen=True)
class Address:
    """Postal address with contact details. Missing values are empty strings."""

    name: str = ""
    attention_name: str = ""
    address_line1: str = ""
    address_line2: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country_code: str = ""
    phone: str = ""


@dataclass(frozen=True)
class LineItem:
    """A single shipped product line."""

    description: str = ""
    name: str = ""
    quantity: int = 1
    weight_lbs: float | None = None
    weight_kg: float | None = None
    length: float | None = None
    width: float | None = None
    height: float | None = None
    packaging_code: str = ""
    packaging_description: str = ""

    @property
    def label(self) -> str:
        return self.description or self.name


@dataclass(frozen=True)
class OrderTotals:
    """Monetary order figures as provided by the caller."""

    subtotal: float = 0.0
    discount: float = 0.0
    freight: float = 0.0
    insurance: float = 0.0
    others: float = 0.0
    total: float | None = None
    weight: str = ""


@dataclass(frozen=True)
class ShipmentRecord:
    """Immutable snapshot of a shipment request passed through the pipeline."""

    shipment_number: str = ""
    tracking_number: str = ""
    customer_context: str = ""
    shipper_name: str = ""
    shipper_phone: str = ""
    ship_to_phone: str = ""
    description: str = ""
    service_description: str = ""
    ship_from: Address = field(default_factory=Address)
    ship_to: Address = field(default_factory=Address)
    items: tuple[LineItem, ...] = ()
    order: OrderTotals = field(default_factory=OrderTotals)

    def with_items(self, items: tuple[LineItem, ...]) -> "ShipmentRecord":
        return replace(self, items=items)


@dataclass(frozen=True)
class TextField:
    """One absolutely-positioned piece of text to stamp onto a PDF page.

    ``y`` is measured from the bottom of the page unless ``from_top`` is set.
    ``None`` coordinates fall back to the stamper defaults.
    """

    text: str
    x: float | None = None
    y: float | None = None
    page: int = 0
    font_size: float | None = None
    max_width: float | None = None
    line_height: float | None = None
    from_top: bool = False


@dataclass(frozen=True)
class DocumentArtifact:
    """A generated PDF and the metadata needed to submit it."""

    path: Path
    form_kind: FormKind
    template: str
    shipment_number: str
    sequence: int | None = None

    @property
    def file_name(self) -> str:
        return self.path.name


@dataclass
class FormResult:
    """Outcome of generating and submitting one document."""

    artifact: DocumentArtifact
    upload_response: dict[str, Any] | None = None
    push_response: dict[str, Any] | None = None
    error: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "template": self.artifact.template,
            "formKind": self.artifact.form_kind.value,
            "outputPath": str(self.artifact.path),
        }
        if self.artifact.sequence is not None:
            payload["sequence"] = self.artifact.sequence
        if self.upload_response is not None:
            payload["uploadResponse"] = self.upload_response
        if self.push_response is not None:
            payload["pushResponse"] = self.push_response
        if self.error is not None:
            payload["error"] = self.error
        return payload
