from typing import Any

import pytest

from customs_docs.carrier.payloads import (
    KG_PER_LB,
    LBS_PER_KG,
    build_shipment_request,
    is_imperial,
    item_summary,
    package_weight,
)
from customs_docs.config.settings import Settings
from customs_docs.documents.models import Address, LineItem, ShipmentRecord


def _shipment(country: str = "US", items: tuple[LineItem, ...] = ()) -> ShipmentRecord:
    return ShipmentRecord(
        customer_context="ctx-1",
        shipper_name="Acme",
        ship_from=Address(
            name="Acme Warehouse",
            address_line1="1 Dock Rd",
            city="Springfield",
            state="IL",
            postal_code="62701",
            country_code=country,
            phone="(217) 555-0100",
        ),
        ship_to=Address(
            name="Jane Buyer",
            address_line1="200 Main St",
            city="Phoenix",
            state="AZ",
            postal_code="85043",
            country_code="US",
            phone="16025550199",
        ),
        items=items or (LineItem(description="Pump", quantity=2, weight_kg=2),),
    )


def _shipment_body(payload: dict[str, Any]) -> dict[str, Any]:
    return payload["ShipmentRequest"]["Shipment"]


class TestUnits:
    def test_is_imperial(self) -> None:
        assert is_imperial("us")
        assert is_imperial("PR")
        assert not is_imperial("CA")

    def test_package_weight_converts_kg_to_lbs(self) -> None:
        assert package_weight(LineItem(weight_kg=2), imperial=True) == pytest.approx(2 * LBS_PER_KG)

    def test_package_weight_converts_lbs_to_kg(self) -> None:
        assert package_weight(LineItem(weight_lbs=10), imperial=False) == pytest.approx(10 * KG_PER_LB)

    def test_package_weight_defaults_to_one(self) -> None:
        assert package_weight(LineItem(), imperial=True) == 1.0

    def test_item_summary(self) -> None:
        items = (LineItem(description="Pump", quantity=2), LineItem(name="Valve"))
        assert item_summary(items) == "Pump x2; Valve x1"


class TestBuildShipmentRequest:
    def test_us_account_uses_imperial_units(self) -> None:
        payload = build_shipment_request(_shipment("US"), Settings(ups_account_number="A1B2C3"))
        package = _shipment_body(payload)["Package"][0]
        assert package["PackageWeight"]["UnitOfMeasurement"]["Code"] == "LBS"
        assert package["PackageWeight"]["Weight"] == "4.41"
        assert package["Dimensions"]["UnitOfMeasurement"]["Code"] == "IN"
        assert package["Dimensions"]["Length"] == "4"
        assert package["Packaging"]["Code"] == "02"

    def test_metric_account_uses_metric_units(self) -> None:
        package = _shipment_body(build_shipment_request(_shipment("CA"), Settings()))["Package"][0]
        assert package["PackageWeight"]["UnitOfMeasurement"]["Code"] == "KGS"
        assert package["PackageWeight"]["Weight"] == "2"
        assert package["Dimensions"]["Height"] == "10"

    def test_account_country_setting_overrides_ship_from(self) -> None:
        payload = build_shipment_request(_shipment("CA"), Settings(ups_account_country="us"))
        assert _shipment_body(payload)["Shipper"]["Address"]["CountryCode"] == "US"

    def test_request_envelope(self) -> None:
        settings = Settings(ups_account_number="A1B2C3", ups_service_code="11")
        request = build_shipment_request(_shipment(), settings)["ShipmentRequest"]
        shipment = request["Shipment"]
        assert request["Request"]["SubVersion"] == "1801"
        assert request["Request"]["TransactionReference"]["CustomerContext"] == "ctx-1"
        assert shipment["Shipper"]["ShipperNumber"] == "A1B2C3"
        assert shipment["Shipper"]["Phone"]["Number"] == "2175550100"
        charge = shipment["PaymentInformation"]["ShipmentCharge"]
        assert charge["BillShipper"]["AccountNumber"] == "A1B2C3"
        assert shipment["Service"]["Code"] == "11"
        assert shipment["Description"] == "Pump x2"
        assert request["LabelSpecification"]["LabelImageFormat"]["Code"] == "GIF"

    def test_ship_to_uses_recipient_address(self) -> None:
        ship_to = _shipment_body(build_shipment_request(_shipment(), Settings()))["ShipTo"]
        assert ship_to["Name"] == "Jane Buyer"
        assert ship_to["Address"]["StateProvinceCode"] == "AZ"
        assert ship_to["Address"]["PostalCode"] == "85043"
        assert ship_to["Address"]["AddressLine"] == ["200 Main St"]
        assert ship_to["Phone"]["Number"] == "+16025550199"

    def test_one_package_per_item(self) -> None:
        items = tuple(LineItem(name=f"Part {i}") for i in range(3))
        packages = _shipment_body(build_shipment_request(_shipment(items=items), Settings()))["Package"]
        assert [p["Description"] for p in packages] == ["Part 0", "Part 1", "Part 2"]
