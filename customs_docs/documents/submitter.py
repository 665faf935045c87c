from collections.abc import Callable
from datetime import datetime

from customs_docs.carrier.base import BaseCarrierClient
from customs_docs.carrier.exceptions import CarrierError
from customs_docs.carrier.models import extract_document_id
from customs_docs.documents.layouts import USER_CREATED_FORM
from customs_docs.documents.models import DocumentArtifact, FormResult, ShipmentRecord
from customs_docs.logging.logger import Log

SHIPMENT_DATETIME_FORMAT = "%Y-%m-%d-%H.%M.%S"


def format_shipment_datetime(moment: datetime) -> str:
    """Format a timestamp as YYYY-MM-DD-HH.MM.SS for document association."""
    return moment.strftime(SHIPMENT_DATETIME_FORMAT)


class DocumentSubmitter:
    """Uploads a generated document and links it to its shipment."""

    def __init__(
        self,
        carrier: BaseCarrierClient,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._carrier = carrier
        self._clock = clock

    def submit(
        self,
        artifact: DocumentArtifact,
        shipment: ShipmentRecord,
        document_type: str = USER_CREATED_FORM,
    ) -> FormResult:
        """Upload then associate one artifact.

        Carrier failures are logged and leave the upload and push responses
        unset; they never propagate.
        """
        result = FormResult(artifact=artifact)
        try:
            upload = self._carrier.upload_document(
                artifact.path,
                document_type=document_type,
                customer_context=shipment.customer_context,
                file_name=artifact.file_name,
                file_format="pdf",
            )
            if upload is None:
                Log.info(f"{artifact.file_name} generated but not uploaded")
                return result
            document_id = extract_document_id(upload)
            if document_id is None:
                Log.warning(f"Upload of {artifact.file_name} returned no document id")
                result.upload_response = upload
                return result
            push = self._carrier.push_document(
                document_id=document_id,
                shipment_identifier=shipment.shipment_number,
                tracking_number=shipment.tracking_number or shipment.shipment_number,
                shipment_datetime=format_shipment_datetime(self._clock()),
                customer_context=shipment.customer_context,
            )
        except CarrierError as exc:
            Log.error(f"Failed to submit {artifact.file_name}: {exc}")
            return result

        result.upload_response = upload
        result.push_response = push
        Log.info(f"Submitted {artifact.file_name} as document {document_id}")
        return result
