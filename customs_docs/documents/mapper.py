"""Maps a shipment record onto the text fields of a given customs form."""

import random
import time
from dataclasses import dataclass
from datetime import date
from typing import assert_never

from customs_docs.documents.layouts import FORM_LAYOUTS, FieldPosition, FormLayout
from customs_docs.documents.models import FormKind, OrderTotals, ShipmentRecord, TextField


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: float
    discount: float
    freight: float
    insurance: float
    others: float
    total: float


def compute_totals(order: OrderTotals) -> InvoiceTotals:
    """Resolve invoice totals, deriving the grand total when none was given."""
    total = order.total
    if total is None:
        total = order.subtotal - order.discount + order.freight + order.insurance + order.others
    return InvoiceTotals(
        subtotal=order.subtotal,
        discount=order.discount,
        freight=order.freight,
        insurance=order.insurance,
        others=order.others,
        total=total,
    )


def format_amount(value: float) -> str:
    """Render 98.0 as '98' and keep fractional amounts as they are."""
    rounded = round(value, 2)
    if float(rounded).is_integer():
        return str(int(rounded))
    return str(rounded)


def generate_invoice_number() -> str:
    return f"INV-{int(time.time() * 1000)}-{random.randrange(1000)}"


def map_fields(
    shipment: ShipmentRecord,
    kind: FormKind,
    *,
    today: date | None = None,
    invoice_number: str | None = None,
) -> list[TextField]:
    """Build the ordered text fields for one instance of a form.

    Forms with a fixed item capacity only place the first N items; callers that
    need every item covered split the items into groups and map each group.
    """
    layout = FORM_LAYOUTS[kind]
    current_date = (today or date.today()).strftime("%m/%d/%Y")
    match kind:
        case FormKind.COMMERCIAL_INVOICE:
            return _map_invoice(
                shipment, layout, current_date, invoice_number or generate_invoice_number()
            )
        case FormKind.SECTION_232:
            return _map_section_232(layout, current_date)
        case FormKind.TSCA:
            return _map_tsca(shipment, layout, current_date)
        case _:
            assert_never(kind)


def _map_invoice(
    shipment: ShipmentRecord,
    layout: FormLayout,
    current_date: str,
    invoice_number: str,
) -> list[TextField]:
    recipient = shipment.ship_to
    totals = compute_totals(shipment.order)
    values = {
        "recipient_name": recipient.name,
        "address_line1": recipient.address_line1,
        "city": recipient.city,
        "country_code": recipient.country_code,
        "date": current_date,
        "invoice_number": invoice_number,
        "subtotal": format_amount(totals.subtotal),
        "discount": format_amount(totals.discount),
        "subtotal_summary": format_amount(totals.subtotal),
        "freight": format_amount(totals.freight),
        "insurance": format_amount(totals.insurance),
        "others": format_amount(totals.others),
        "total": format_amount(totals.total),
        "shipment_number": shipment.shipment_number,
        "weight": shipment.order.weight,
        "item_count": str(len(shipment.items)) if shipment.items else "",
    }
    return [_place(layout.position(name), text) for name, text in values.items()]


def _map_section_232(layout: FormLayout, current_date: str) -> list[TextField]:
    return [_place(layout.position("date"), current_date)]


def _map_tsca(shipment: ShipmentRecord, layout: FormLayout, current_date: str) -> list[TextField]:
    fields = [
        _place(layout.position("shipment_number"), shipment.shipment_number),
        _place(layout.position("date"), current_date),
    ]
    for row, item in zip(layout.item_rows, shipment.items):
        words = item.label.split()
        if layout.item_word_limit is not None:
            words = words[: layout.item_word_limit]
        fields.append(_place(row, " ".join(words)))
    return fields


def _place(position: FieldPosition, text: str) -> TextField:
    return TextField(
        text=text,
        x=position.x,
        y=position.y,
        page=position.page,
        font_size=position.font_size,
        from_top=position.from_top,
    )
