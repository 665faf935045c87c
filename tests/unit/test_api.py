from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from customs_docs.api.app import create_app
from customs_docs.carrier.base import BaseCarrierClient
from customs_docs.carrier.exceptions import CarrierError
from customs_docs.carrier.models import ShipmentCreation
from customs_docs.config.settings import Settings
from customs_docs.documents.exceptions import TemplateMissingError
from customs_docs.documents.models import DocumentArtifact, FormKind, FormResult
from customs_docs.documents.pipeline import DocumentPipeline


@pytest.fixture()
def carrier() -> MagicMock:
    return MagicMock(spec=BaseCarrierClient)


@pytest.fixture()
def pipeline() -> MagicMock:
    return MagicMock(spec=DocumentPipeline)


@pytest.fixture()
def client(carrier: MagicMock, pipeline: MagicMock) -> TestClient:
    return TestClient(create_app(Settings(), carrier=carrier, pipeline=pipeline))


class TestHealth:
    def test_reports_running(self, client: TestClient) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert response.text == "UPS Service is running"


class TestCreateShipmentRoute:
    def test_returns_shipment_number(self, client: TestClient, carrier: MagicMock) -> None:
        carrier.create_shipment.return_value = ShipmentCreation("1Z123", {"ShipmentResponse": {}})
        response = client.post(
            "/create-shipment",
            json={"shipmentData": {"address": {"name": "Jane Buyer"}, "items": [{"name": "Pump"}]}},
        )
        assert response.status_code == 200
        assert response.json() == {"shipmentNumber": "1Z123", "raw": {"ShipmentResponse": {}}}
        shipment = carrier.create_shipment.call_args.args[0]
        assert shipment.ship_to.name == "Jane Buyer"
        assert shipment.items[0].label == "Pump"

    def test_carrier_failure_is_500(self, client: TestClient, carrier: MagicMock) -> None:
        carrier.create_shipment.side_effect = CarrierError("UPS create shipment error 400: bad")
        response = client.post("/create-shipment", json={"shipmentData": {}})
        assert response.status_code == 500
        assert response.json() == {"error": "UPS create shipment error 400: bad"}

    def test_missing_body_uses_empty_shipment(self, client: TestClient, carrier: MagicMock) -> None:
        carrier.create_shipment.return_value = ShipmentCreation("1Z0")
        response = client.post("/create-shipment")
        assert response.status_code == 200
        assert carrier.create_shipment.call_args.args[0].items == ()


class TestGenerateDocsRoute:
    def test_returns_upload_results(
        self, client: TestClient, pipeline: MagicMock, tmp_path: Path
    ) -> None:
        artifact = DocumentArtifact(
            path=tmp_path / "TSCA_BLANK_1ZABC_1.pdf",
            form_kind=FormKind.TSCA,
            template="TSCA_BLANK.pdf",
            shipment_number="1ZABC",
            sequence=1,
        )
        pipeline.run.return_value = [
            FormResult(artifact=artifact, upload_response={"u": 1}, push_response={"p": 2})
        ]
        response = client.post(
            "/generate-and-upload-docs/1ZABC",
            json={"trackingNumber": "1ZT", "items": [{"description": "Resin"}]},
        )
        assert response.status_code == 200
        assert response.json() == {
            "shipmentNumber": "1ZABC",
            "uploadResults": [
                {
                    "template": "TSCA_BLANK.pdf",
                    "formKind": "TSCA",
                    "outputPath": str(artifact.path),
                    "sequence": 1,
                    "uploadResponse": {"u": 1},
                    "pushResponse": {"p": 2},
                }
            ],
        }

    def test_path_number_reaches_pipeline(self, client: TestClient, pipeline: MagicMock) -> None:
        pipeline.run.return_value = []
        client.post("/generate-and-upload-docs/1ZABC", json={"trackingNumber": "1ZT"})
        shipment = pipeline.run.call_args.args[0]
        assert shipment.shipment_number == "1ZABC"
        assert shipment.tracking_number == "1ZT"

    def test_missing_template_is_500(self, client: TestClient, pipeline: MagicMock) -> None:
        missing = Path("CUSTOMS_DOCs_BLANK") / "TSCA_BLANK.pdf"
        pipeline.run.side_effect = TemplateMissingError(missing)
        response = client.post("/generate-and-upload-docs/1ZABC", json={})
        assert response.status_code == 500
        assert response.json() == {"error": f"Missing template: {missing}"}


class TestLifespan:
    def test_closes_carrier_on_shutdown(self, carrier: MagicMock, pipeline: MagicMock) -> None:
        app = create_app(Settings(), carrier=carrier, pipeline=pipeline)
        with TestClient(app):
            carrier.close.assert_not_called()
        carrier.close.assert_called_once()
