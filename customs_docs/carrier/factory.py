from customs_docs.carrier.base import BaseCarrierClient
from customs_docs.carrier.mock_client import MockCarrierClient
from customs_docs.carrier.ups_client import UpsCarrierClient
from customs_docs.config.settings import Settings


class CarrierClientFactory:
    """Creates the carrier client selected by ``carrier_mode``."""

    MODES = ("ups", "mock")

    @classmethod
    def create(cls, settings: Settings) -> BaseCarrierClient:
        mode = settings.carrier_mode.lower()
        if mode == "mock":
            return MockCarrierClient()
        if mode == "ups":
            return UpsCarrierClient(settings)
        raise ValueError(f"Unknown carrier mode '{mode}'. Choose from: {list(cls.MODES)}")
