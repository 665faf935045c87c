from pathlib import Path
from typing import ClassVar

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from customs_docs.logging.logger import Log
from customs_docs.rendering.base import BaseHtmlRenderer
from customs_docs.rendering.exceptions import RenderError


class PlaywrightRenderer(BaseHtmlRenderer):
    """Prints HTML to PDF with headless Chromium driven by Playwright.

    A browser is launched for every call and always closed afterwards.
    """

    LAUNCH_ARGS: ClassVar[tuple[str, ...]] = ("--no-sandbox", "--disable-setuid-sandbox")
    MARGIN: ClassVar[dict[str, str]] = {
        "top": "20px",
        "right": "20px",
        "bottom": "20px",
        "left": "20px",
    }

    def __init__(self, *, timeout_seconds: int = 60) -> None:
        self._timeout_ms = timeout_seconds * 1000

    def render_pdf(self, html: str, output_path: Path, *, page_format: str = "Letter") -> Path:
        try:
            with sync_playwright() as playwright:
                browser = playwright.chromium.launch(
                    headless=True,
                    args=list(self.LAUNCH_ARGS),
                    timeout=self._timeout_ms,
                )
                try:
                    page = browser.new_page()
                    page.set_default_timeout(self._timeout_ms)
                    page.set_content(html, wait_until="networkidle")
                    pdf_bytes = page.pdf(
                        format=page_format,
                        print_background=True,
                        margin=self.MARGIN,
                    )
                finally:
                    browser.close()
        except PlaywrightError as exc:
            raise RenderError(f"Headless browser render failed: {exc}") from exc

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(pdf_bytes)
        Log.info(f"Rendered {len(pdf_bytes)} bytes of PDF to {output_path}")
        return output_path
