"""Builds UPS Shipping API request bodies from a ShipmentRecord."""

import re
from typing import Any

from customs_docs.config.settings import Settings
from customs_docs.documents.models import Address, LineItem, ShipmentRecord

LBS_PER_KG = 2.20462262
KG_PER_LB = 0.45359237
IMPERIAL_COUNTRIES = frozenset({"US", "PR"})
DEFAULT_PHONE = "0000000000"


def account_country(shipment: ShipmentRecord, settings: Settings) -> str:
    return (settings.ups_account_country or shipment.ship_from.country_code or "US").upper()


def is_imperial(country_code: str) -> bool:
    return country_code.upper() in IMPERIAL_COUNTRIES


def item_summary(items: tuple[LineItem, ...]) -> str:
    return "; ".join(f"{item.label or 'Item'} x{item.quantity}" for item in items)


def package_weight(item: LineItem, imperial: bool) -> float:
    """Item weight in the account's unit, converting when only the other unit is known."""
    if imperial:
        if item.weight_lbs is not None:
            return item.weight_lbs
        if item.weight_kg is not None:
            return item.weight_kg * LBS_PER_KG
        return 1.0
    if item.weight_kg is not None:
        return item.weight_kg
    if item.weight_lbs is not None:
        return item.weight_lbs * KG_PER_LB
    return 1.0


def _number_text(value: float) -> str:
    rounded = round(value, 2)
    return str(int(rounded)) if float(rounded).is_integer() else str(rounded)


def _digits(phone: str, limit: int = 15) -> str:
    return re.sub(r"[^0-9]", "", phone)[:limit]


def _address_block(address: Address, country_code: str) -> dict[str, Any]:
    return {
        "AddressLine": [line for line in (address.address_line1, address.address_line2) if line],
        "City": address.city,
        "StateProvinceCode": address.state,
        "PostalCode": address.postal_code,
        "CountryCode": country_code,
    }


def _package(item: LineItem, imperial: bool) -> dict[str, Any]:
    default_side = 4.0 if imperial else 10.0
    sides = [
        side if side is not None else default_side
        for side in (item.length, item.width, item.height)
    ]
    return {
        "Description": item.label or " ",
        "Packaging": {
            "Code": item.packaging_code or "02",
            "Description": item.packaging_description or "Customer Supplied Package",
        },
        "Dimensions": {
            "UnitOfMeasurement": {
                "Code": "IN" if imperial else "CM",
                "Description": "Inches" if imperial else "Centimeters",
            },
            "Length": _number_text(sides[0]),
            "Width": _number_text(sides[1]),
            "Height": _number_text(sides[2]),
        },
        "PackageWeight": {
            "UnitOfMeasurement": {
                "Code": "LBS" if imperial else "KGS",
                "Description": "Pounds" if imperial else "Kilograms",
            },
            "Weight": _number_text(package_weight(item, imperial)),
        },
    }


def build_shipment_request(shipment: ShipmentRecord, settings: Settings) -> dict[str, Any]:
    """Build a ShipmentRequest body; units follow the shipping account's country."""
    country = account_country(shipment, settings)
    imperial = is_imperial(country)
    ship_from = shipment.ship_from
    ship_to = shipment.ship_to
    account_number = settings.ups_account_number
    shipper_name = shipment.shipper_name or "Your Company"

    if ship_to.phone:
        ship_to_phone = f"+{ship_to.phone.lstrip('+')}"
    else:
        ship_to_phone = shipment.ship_to_phone or DEFAULT_PHONE

    return {
        "ShipmentRequest": {
            "Request": {
                "SubVersion": "1801",
                "RequestOption": "nonvalidate",
                "TransactionReference": {"CustomerContext": shipment.customer_context},
            },
            "Shipment": {
                "Shipper": {
                    "Name": shipper_name,
                    "ShipperNumber": account_number,
                    "Address": _address_block(ship_from, country),
                    "AttentionName": (
                        ship_from.attention_name
                        or ship_from.name
                        or shipment.shipper_name
                        or "Shipping Dept"
                    ),
                    "Phone": {
                        "Number": _digits(ship_from.phone or shipment.shipper_phone or DEFAULT_PHONE)
                    },
                },
                "ShipFrom": {
                    "Name": ship_from.name or shipper_name,
                    "Address": _address_block(ship_from, country),
                    "AttentionName": ship_from.attention_name or ship_from.name or "Warehouse",
                    "Phone": {"Number": ship_from.phone or shipment.shipper_phone or DEFAULT_PHONE},
                },
                "ShipTo": {
                    "Name": ship_to.name,
                    "Address": _address_block(ship_to, ship_to.country_code or "US"),
                    "AttentionName": ship_to.attention_name or ship_to.name or "Receiver",
                    "Phone": {"Number": ship_to_phone},
                },
                "Description": (
                    shipment.description or item_summary(shipment.items) or "Merchandise"
                ),
                "Service": {
                    "Code": settings.ups_service_code,
                    "Description": shipment.service_description or "Ground",
                },
                "PaymentInformation": {
                    "ShipmentCharge": {
                        "Type": "01",
                        "BillShipper": {"AccountNumber": account_number},
                    },
                },
                "Package": [_package(item, imperial) for item in shipment.items],
            },
            "LabelSpecification": {
                "LabelImageFormat": {"Code": "GIF", "Description": "GIF"},
                "HTTPUserAgent": "Mozilla/4.5",
            },
        },
    }
