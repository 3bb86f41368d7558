"""
Configuration Management for Card Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

All alert thresholds, storage record names and export constants live here.
Every value can be overridden through the environment (or a .env file) or
by constructing the settings object directly, e.g. in tests:

    AlertSettings(payment_due_days=3)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AlertSettings(BaseSettings):
    """Thresholds used by the alert rule engine."""

    model_config = SettingsConfigDict(
        env_prefix="CARD_LEDGER_ALERT_",
        extra="ignore"
    )

    payment_due_days: int = Field(
        default=7,
        ge=0,
        description="Raise a payment alert when the due date is within this many days"
    )
    annual_fee_days: int = Field(
        default=30,
        ge=0,
        description="Raise an annual fee alert when the fee date is within this many days"
    )
    category_limit_percentage: float = Field(
        default=80.0,
        gt=0,
        description="Raise a category alert when spend reaches this percentage of the cap"
    )
    credit_limit_percentage: float = Field(
        default=80.0,
        gt=0,
        description="Raise a credit alert when utilization reaches this percentage"
    )
    fee_waiver_threshold: float = Field(
        default=1000.0,
        ge=0,
        description="Raise a fee waiver alert when the remaining spend is at most this amount"
    )


class StorageSettings(BaseSettings):
    """Key-value store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CARD_LEDGER_STORAGE_",
        extra="ignore"
    )

    path: str = Field(
        default="card_ledger.json",
        description="Path of the JSON file backing the key-value store"
    )

    # Record names within the store
    cards_key: str = Field(
        default="creditCards",
        description="Key holding the card list"
    )
    alerts_key: str = Field(
        default="alerts",
        description="Key holding the alert list"
    )
    paid_periods_key: str = Field(
        default="paidPaymentPeriods",
        description="Key holding the paid payment period keys"
    )


class ExportSettings(BaseSettings):
    """Export/import document configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CARD_LEDGER_EXPORT_",
        extra="ignore"
    )

    data_version: str = Field(
        default="1.0.0",
        description="Version written into exported documents"
    )
    filename_format: str = Field(
        default="credit-cards-{date}.json",
        description="Suggested filename for exports; {date} is replaced with YYYY-MM-DD"
    )

    @field_validator('filename_format')
    @classmethod
    def validate_filename_format(cls, v: str) -> str:
        """The filename must carry the {date} placeholder."""
        if "{date}" not in v:
            raise ValueError("filename_format must contain a {date} placeholder")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Display
    currency_label: str = Field(
        default="SGD",
        description="Currency label shown next to amounts (display only)"
    )
    quick_spend_amounts: str = Field(
        default="50,100,200,500,1000,2000",
        description="Comma-separated quick amounts offered by the spend form"
    )

    @property
    def quick_spend_amounts_list(self) -> list[float]:
        """Get quick spend amounts as a list."""
        return [float(x) for x in self.quick_spend_amounts.split(",") if x.strip()]


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def alerts(self) -> AlertSettings:
        return AlertSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def export(self) -> ExportSettings:
        return ExportSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    {setting_name}_error entry for every invalid section.
    """
    results = {}
    settings = get_settings()

    for name in ("alerts", "storage", "export", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
