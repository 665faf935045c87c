from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ShipmentCreation:
    """Identifier of a newly created shipment and the carrier's raw response."""

    shipment_number: str
    raw: dict[str, Any] = field(default_factory=dict)


def extract_document_id(upload_response: Mapping[str, Any] | None) -> str | None:
    """Pull UploadResponse.FormsHistoryDocumentID.DocumentID out of an upload reply.

    Any level that is missing or not an object yields None.
    """
    if not isinstance(upload_response, Mapping):
        return None
    upload = upload_response.get("UploadResponse")
    if not isinstance(upload, Mapping):
        return None
    history = upload.get("FormsHistoryDocumentID")
    if not isinstance(history, Mapping):
        return None
    document_id = history.get("DocumentID")
    if isinstance(document_id, list):
        document_id = document_id[0] if document_id else None
    return str(document_id) if document_id else None
