"""Offline carrier client for local development and demos.

Selected explicitly with ``CARRIER_MODE=mock``; it is never used as a silent
fallback when the real carrier fails.
"""

import random
import string
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import Any

from customs_docs.carrier.base import BaseCarrierClient
from customs_docs.carrier.models import ShipmentCreation
from customs_docs.documents.models import ShipmentRecord
from customs_docs.logging.logger import Log


class MockCarrierClient(BaseCarrierClient):
    """Answers every call with a plausible fake response and no network access."""

    def create_shipment(self, shipment: ShipmentRecord) -> ShipmentCreation:
        number = "1Z" + "".join(random.choices(string.digits, k=10))
        Log.info(f"Mock shipment {number} created")
        return ShipmentCreation(
            shipment_number=number,
            raw={"mock": True, "shipmentData": asdict(shipment)},
        )

    def upload_document(
        self,
        path: Path,
        *,
        document_type: str,
        customer_context: str = "",
        file_name: str | None = None,
        file_format: str | None = None,
    ) -> dict[str, Any] | None:
        return {
            "mock": True,
            "fileName": file_name or path.name,
            "documentType": document_type,
            "UploadResponse": {
                "FormsHistoryDocumentID": {"DocumentID": f"MOCK-{uuid.uuid4().hex[:12].upper()}"},
            },
        }

    def push_document(
        self,
        *,
        document_id: str,
        shipment_identifier: str,
        tracking_number: str,
        shipment_datetime: str,
        customer_context: str = "",
    ) -> dict[str, Any] | None:
        return {
            "mock": True,
            "PushToImageRepositoryResponse": {
                "FormsGroupID": f"MOCK-{document_id}",
                "ShipmentIdentifier": shipment_identifier,
                "TrackingNumber": tracking_number,
                "ShipmentDateAndTime": shipment_datetime,
            },
        }
