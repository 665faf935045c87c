from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    app_env: str = "dev"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    carrier_mode: str = "ups"

    ups_oauth_url: str = "https://wwwcie.ups.com/security/v1/oauth/token"
    ups_base_url: str = "https://wwwcie.ups.com"
    ups_client_id: str = ""
    ups_client_secret: str = ""
    ups_account_number: str = ""
    ups_account_country: str = ""
    ups_docs_version: str = "v1"
    ups_service_code: str = "65"
    http_timeout_seconds: int = 30

    html_renderer: str = "playwright"
    render_timeout_seconds: int = 60
    invoice_rows_per_page: int = 28
    invoice_page_format: str = "Letter"

    blanks_dir: Path = Path("CUSTOMS_DOCs_BLANK")
    output_dir: Path = Path("generated_docs")

    @property
    def has_ups_credentials(self) -> bool:
        return bool(self.ups_client_id and self.ups_client_secret)
