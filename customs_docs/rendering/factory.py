from customs_docs.config.settings import Settings
from customs_docs.rendering.base import BaseHtmlRenderer
from customs_docs.rendering.playwright_adapter import PlaywrightRenderer


class RendererFactory:
    """Creates the HTML renderer selected in settings."""

    ADAPTERS: dict[str, type[PlaywrightRenderer]] = {
        "playwright": PlaywrightRenderer,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseHtmlRenderer:
        name = settings.html_renderer.lower()
        adapter_cls = cls.ADAPTERS.get(name)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown HTML renderer '{name}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls(timeout_seconds=settings.render_timeout_seconds)
