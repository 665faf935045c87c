import base64
from pathlib import Path
from typing import Any

import httpx

from customs_docs.carrier.base import BaseCarrierClient
from customs_docs.carrier.exceptions import CarrierAuthError, CarrierError, CarrierNetworkError
from customs_docs.carrier.models import ShipmentCreation
from customs_docs.carrier.payloads import build_shipment_request
from customs_docs.config.settings import Settings
from customs_docs.documents.models import ShipmentRecord
from customs_docs.logging.logger import Log


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class UpsTokenProvider:
    """Exchanges client credentials for an OAuth bearer token."""

    def __init__(self, settings: Settings, client: httpx.Client) -> None:
        self._settings = settings
        self._client = client

    def get_token(self) -> str | None:
        """Return a bearer token, or None when no credentials are configured.

        Raises:
            CarrierAuthError: if UPS rejects the credentials.
            CarrierNetworkError: if the OAuth endpoint cannot be reached.
        """
        if not self._settings.has_ups_credentials:
            return None
        try:
            response = self._client.post(
                self._settings.ups_oauth_url,
                data={"grant_type": "client_credentials"},
                auth=(self._settings.ups_client_id, self._settings.ups_client_secret),
            )
        except httpx.HTTPError as exc:
            raise CarrierNetworkError(f"UPS OAuth network error: {exc}") from exc
        if response.is_error:
            body = _response_body(response)
            raise CarrierAuthError(
                f"UPS OAuth error {response.status_code}: {body}",
                status_code=response.status_code,
                body=body,
            )
        token = _response_body(response)
        access_token = token.get("access_token") if isinstance(token, dict) else None
        if not access_token:
            raise CarrierAuthError("UPS OAuth response has no access_token", body=token)
        return str(access_token)


class UpsCarrierClient(BaseCarrierClient):
    """UPS Shipping and Paperless Documents API client built on httpx."""

    def __init__(
        self,
        settings: Settings,
        *,
        client: httpx.Client | None = None,
        token_provider: UpsTokenProvider | None = None,
    ) -> None:
        self._settings = settings
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=settings.http_timeout_seconds)
        self._tokens = token_provider or UpsTokenProvider(settings, self._client)
        self._base_url = settings.ups_base_url.rstrip("/")

    def create_shipment(self, shipment: ShipmentRecord) -> ShipmentCreation:
        token = self._tokens.get_token()
        if token is None:
            raise CarrierAuthError("UPS credentials are not configured")
        payload = build_shipment_request(shipment, self._settings)
        data = self._post("/api/shipments/v1/ship", payload, token, action="create shipment")
        results = (data.get("ShipmentResponse") or {}).get("ShipmentResults") or {}
        number = results.get("ShipmentIdentificationNumber")
        if not number:
            raise CarrierError(
                "UPS create shipment response has no ShipmentIdentificationNumber",
                body=data,
            )
        Log.info(f"Created UPS shipment {number}")
        return ShipmentCreation(shipment_number=str(number), raw=data)

    def upload_document(
        self,
        path: Path,
        *,
        document_type: str,
        customer_context: str = "",
        file_name: str | None = None,
        file_format: str | None = None,
    ) -> dict[str, Any] | None:
        token = self._tokens.get_token()
        if token is None:
            Log.warning(f"Skipping upload of {path.name}: UPS credentials are not configured")
            return None
        try:
            content = base64.b64encode(path.read_bytes()).decode("ascii")
        except OSError as exc:
            raise CarrierError(f"Cannot read document for upload: {exc}") from exc
        shipper_number = self._settings.ups_account_number
        payload = {
            "UploadRequest": {
                "Request": {"TransactionReference": {"CustomerContext": customer_context}},
                "UserCreatedForm": [
                    {
                        "UserCreatedFormFileName": file_name or path.name,
                        "UserCreatedFormFileFormat": (
                            file_format or path.suffix.lstrip(".").lower() or "pdf"
                        ),
                        "UserCreatedFormDocumentType": document_type,
                        "UserCreatedFormFile": content,
                    }
                ],
                "ShipperNumber": shipper_number,
            },
        }
        return self._post(
            f"/api/paperlessdocuments/{self._settings.ups_docs_version}/upload",
            payload,
            token,
            action="upload",
            headers={"ShipperNumber": shipper_number},
        )

    def push_document(
        self,
        *,
        document_id: str,
        shipment_identifier: str,
        tracking_number: str,
        shipment_datetime: str,
        customer_context: str = "",
    ) -> dict[str, Any] | None:
        token = self._tokens.get_token()
        if token is None:
            return None
        payload = {
            "PushToImageRepositoryRequest": {
                "Request": {"TransactionReference": {"CustomerContext": customer_context}},
                "FormsHistoryDocumentID": {"DocumentID": document_id},
                "ShipmentIdentifier": shipment_identifier,
                "ShipmentDateAndTime": shipment_datetime,
                "ShipmentType": "1",
                "TrackingNumber": tracking_number,
            },
        }
        return self._post(
            f"/api/paperlessdocuments/{self._settings.ups_docs_version}/image",
            payload,
            token,
            action="push image",
            headers={"ShipperNumber": self._settings.ups_account_number},
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _post(
        self,
        path: str,
        payload: dict[str, Any],
        token: str,
        *,
        action: str,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        request_headers = {"Authorization": f"Bearer {token}", **(headers or {})}
        try:
            response = self._client.post(
                f"{self._base_url}{path}",
                json=payload,
                headers=request_headers,
            )
        except httpx.HTTPError as exc:
            raise CarrierNetworkError(f"UPS {action} network error: {exc}") from exc
        body = _response_body(response)
        if response.is_error:
            raise CarrierError(
                f"UPS {action} error {response.status_code}: {body}",
                status_code=response.status_code,
                body=body,
            )
        if not isinstance(body, dict):
            raise CarrierError(f"UPS {action} returned a non-JSON body", body=body)
        Log.debug(f"UPS {action} response: {body}")
        return body
