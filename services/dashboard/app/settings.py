from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DashboardSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="forbid")

    database_url: str
    log_level: str = "info"

    # Read shaping
    page_size: int = Field(default=6, ge=1)
    latest_invoices_limit: int = Field(default=5, ge=1)
    query_timeout_ms: int = Field(default=5000, gt=0)

    # Display
    currency: str = Field(default="USD", min_length=3, max_length=3)
    locale: str = "en_US"

    # Presentation-tier paths handed back as post-mutation effects.
    invoices_path: str = "/dashboard/invoices"

    # Deleting invoices stays off until product signs off on it.
    invoice_delete_enabled: bool = False

    otel_enabled: bool = False


SETTINGS = DashboardSettings()
