from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse

from customs_docs.carrier.base import BaseCarrierClient
from customs_docs.carrier.factory import CarrierClientFactory
from customs_docs.config.settings import Settings
from customs_docs.documents.payload import parse_shipment
from customs_docs.documents.pipeline import DocumentPipeline, build_pipeline
from customs_docs.logging.logger import Log


def _failure(exc: Exception, fallback: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc) or fallback})


def create_app(
    settings: Settings | None = None,
    *,
    carrier: BaseCarrierClient | None = None,
    pipeline: DocumentPipeline | None = None,
) -> FastAPI:
    """Build the HTTP app around a carrier client and a document pipeline."""
    settings = settings or Settings()
    carrier_client = carrier or CarrierClientFactory.create(settings)
    document_pipeline = pipeline or build_pipeline(settings, carrier_client)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        Log.info(f"Customs docs service starting (carrier mode: {settings.carrier_mode})")
        try:
            yield
        finally:
            carrier_client.close()

    app = FastAPI(title="Customs Docs Service", version="1.0.0", lifespan=lifespan)

    @app.get("/", response_class=PlainTextResponse)
    def index() -> str:
        return "UPS Service is running"

    @app.post("/create-shipment", response_model=None)
    def create_shipment(
        body: dict[str, Any] | None = Body(default=None),
    ) -> dict[str, Any] | JSONResponse:
        try:
            shipment = parse_shipment((body or {}).get("shipmentData"))
            creation = carrier_client.create_shipment(shipment)
        except Exception as exc:
            Log.exception(f"Create shipment failed: {exc}")
            return _failure(exc, "Create shipment failed")
        return {"shipmentNumber": creation.shipment_number, "raw": creation.raw}

    @app.post("/generate-and-upload-docs/{shipment_number}", response_model=None)
    def generate_and_upload_docs(
        shipment_number: str,
        body: dict[str, Any] | None = Body(default=None),
    ) -> dict[str, Any] | JSONResponse:
        try:
            shipment = parse_shipment(body, shipment_number)
            results = document_pipeline.run(shipment)
        except Exception as exc:
            Log.exception(f"Document generation for {shipment_number} failed: {exc}")
            return _failure(exc, "Doc generation/upload failed")
        return {
            "shipmentNumber": shipment_number,
            "uploadResults": [result.to_payload() for result in results],
        }

    return app
