"""Application configuration using pydantic-settings."""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LIMER_",
        extra="ignore",
    )

    # Sanity content store (read-only)
    sanity_project_id: str = Field(
        default="",
        description="Sanity project ID",
    )
    sanity_dataset: str = Field(default="production", description="Sanity dataset name")
    sanity_api_version: str = Field(
        default="2024-01-01",
        description="Sanity API version date (YYYY-MM-DD)",
    )
    sanity_token: SecretStr = Field(
        default=SecretStr(""),
        description="Optional read token for private datasets",
    )
    sanity_use_cdn: bool = Field(
        default=True,
        description="Query the API CDN instead of the live API",
    )

    # Resend transactional email
    resend_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Resend API key for the email-send endpoint",
    )
    email_from: str = Field(
        default="Limer Properties <onboarding@resend.dev>",
        description="Sender used for outgoing inquiry emails (must be a verified domain)",
    )

    # Inquiry dispatch
    company_name: str = Field(
        default="Limer Estate And Facility Management LTD",
        description="Company name used to address WhatsApp messages",
    )
    email_endpoint_url: str = Field(
        default="",
        description="Email-send endpoint for inquiries; empty falls back to mailto links",
    )
    site_base_url: str = Field(
        default="",
        description="Public site URL used for property details links (e.g. https://limer.ng)",
    )

    http_timeout_seconds: float = Field(default=10.0, gt=0)
    log_level: str = Field(default="info", description="Minimum log level for the web app")

    # Web server
    web_port: int = Field(default=8000, description="Web server port")
    web_host: str = Field(default="0.0.0.0", description="Web server host")

    @property
    def sanity_configured(self) -> bool:
        return bool(self.sanity_project_id)

    @property
    def sanity_query_url(self) -> str:
        """Base URL of the GROQ query endpoint for the configured dataset."""
        host = "apicdn" if self.sanity_use_cdn else "api"
        return (
            f"https://{self.sanity_project_id}.{host}.sanity.io"
            f"/v{self.sanity_api_version}/data/query/{self.sanity_dataset}"
        )

    def property_details_url(self, slug: str) -> str | None:
        """Public details page URL for a property, if the site URL is known."""
        if not self.site_base_url:
            return None
        return f"{self.site_base_url.rstrip('/')}/property/{slug}"
