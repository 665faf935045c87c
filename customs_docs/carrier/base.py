from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from customs_docs.carrier.models import ShipmentCreation
from customs_docs.documents.models import ShipmentRecord


class BaseCarrierClient(ABC):
    """Contract for carrier shipping and paperless-document clients."""

    @abstractmethod
    def create_shipment(self, shipment: ShipmentRecord) -> ShipmentCreation:
        """Create a shipment and return its identifier.

        Raises:
            CarrierError: with status code and body when the carrier rejects it.
        """

    @abstractmethod
    def upload_document(
        self,
        path: Path,
        *,
        document_type: str,
        customer_context: str = "",
        file_name: str | None = None,
        file_format: str | None = None,
    ) -> dict[str, Any] | None:
        """Upload a user-created form. Returns None when running unauthenticated.

        Raises:
            CarrierError: on any failed call.
        """

    @abstractmethod
    def push_document(
        self,
        *,
        document_id: str,
        shipment_identifier: str,
        tracking_number: str,
        shipment_datetime: str,
        customer_context: str = "",
    ) -> dict[str, Any] | None:
        """Associate an uploaded document with a shipment.

        shipment_datetime uses the literal format YYYY-MM-DD-HH.MM.SS.

        Raises:
            CarrierError: on any failed call.
        """

    def close(self) -> None:
        """Release network resources held by the client."""
