"""Builds a ShipmentRecord from the inbound JSON shipment payload.

Unlike a strict validator, malformed or missing values degrade to empty strings
or neutral numbers so that document generation can still proceed.
"""

from collections.abc import Mapping
from typing import Any

from customs_docs.documents.models import Address, LineItem, OrderTotals, ShipmentRecord


def parse_shipment(payload: Mapping[str, Any] | None, shipment_number: str = "") -> ShipmentRecord:
    """Build a ShipmentRecord from a camelCase shipment payload.

    Args:
        payload: Request body. Unknown keys are ignored.
        shipment_number: Identifier to stamp onto the record; overrides any
                         ``shipmentNumber`` present in the payload.
    """
    data: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}
    raw_items = data.get("items")
    items = tuple(
        _build_item(raw) for raw in (raw_items if isinstance(raw_items, list) else [])
        if isinstance(raw, Mapping)
    )
    return ShipmentRecord(
        shipment_number=shipment_number or _text(data.get("shipmentNumber")),
        tracking_number=_text(data.get("trackingNumber")),
        customer_context=_text(data.get("customerContext")),
        shipper_name=_text(data.get("shipperName")),
        shipper_phone=_text(data.get("shipperPhone")),
        ship_to_phone=_text(data.get("shipToPhone")),
        description=_text(data.get("description")),
        service_description=_text(data.get("serviceDescription")),
        ship_from=_build_address(data.get("shipFrom")),
        ship_to=_build_address(data.get("address")),
        items=items,
        order=_build_order(data.get("order")),
    )


def _build_address(raw: Any) -> Address:
    if not isinstance(raw, Mapping):
        return Address()
    return Address(
        name=_text(raw.get("name")),
        attention_name=_text(raw.get("attentionName")),
        address_line1=_text(raw.get("addressLine1")),
        address_line2=_text(raw.get("addressLine2")),
        city=_text(raw.get("city")),
        state=_text(raw.get("state")),
        postal_code=_text(raw.get("postalCode")),
        country_code=_text(raw.get("countryCode")),
        phone=_text(raw.get("phone")),
    )


def _build_item(raw: Mapping[str, Any]) -> LineItem:
    quantity = _number(raw.get("quantity"))
    return LineItem(
        description=_text(raw.get("description")),
        name=_text(raw.get("name")),
        quantity=int(quantity) if quantity else 1,
        weight_lbs=_number(raw.get("weightLbs")),
        weight_kg=_number(raw.get("weightKg")),
        length=_number(raw.get("length")),
        width=_number(raw.get("width")),
        height=_number(raw.get("height")),
        packaging_code=_text(raw.get("packagingCode")),
        packaging_description=_text(raw.get("packagingDescription")),
    )


def _build_order(raw: Any) -> OrderTotals:
    if not isinstance(raw, Mapping):
        return OrderTotals()
    return OrderTotals(
        subtotal=_first_amount(raw, "invoice_subtotal", "subtotal") or 0.0,
        discount=_first_amount(raw, "discount_rebate", "discount") or 0.0,
        freight=_first_amount(raw, "freight") or 0.0,
        insurance=_first_amount(raw, "insurance") or 0.0,
        others=_first_amount(raw, "others") or 0.0,
        total=_first_amount(raw, "total_invoice_amount", "total"),
        weight=_text(raw.get("weight")),
    )


def _first_amount(raw: Mapping[str, Any], *keys: str) -> float | None:
    """Return the first non-zero numeric value among keys, or None."""
    for key in keys:
        value = _number(raw.get(key))
        if value:
            return value
    return None


def _number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
