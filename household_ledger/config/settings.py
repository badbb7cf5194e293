"""
Configuration Management for Household Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: Every analyzer threshold lives here rather than as a
literal in the analyzer. Households tune them through the environment
or a .env file; tests pass explicit instances.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Ledger defaults."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    currency: str = Field(
        default="COP",
        min_length=3,
        max_length=3,
        description="ISO currency code used when none is given"
    )

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


class InsightSettings(BaseSettings):
    """
    Thresholds for the monthly insight analyzer.

    Percentages are in percent (20 means 20%), not fractions.
    """

    model_config = SettingsConfigDict(
        env_prefix="INSIGHTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Month over month
    spending_up_pct: float = Field(
        default=20.0,
        description="Change above which spending is flagged as up"
    )
    spending_down_pct: float = Field(
        default=-10.0,
        description="Change below which spending is praised as down"
    )

    # Categories
    top_category_warning_pct: float = Field(
        default=40.0,
        ge=0,
        le=100,
        description="Share of the month above which the top category warns"
    )
    rising_category_factor: float = Field(
        default=1.5,
        gt=1.0,
        description="Current/previous ratio that marks a rising category"
    )

    # Who paid
    payment_imbalance_pct: float = Field(
        default=70.0,
        gt=50,
        le=100,
        description="Share of payments above which one member is over-contributing"
    )

    # Budget pacing
    pacing_cutoff_day: int = Field(
        default=25,
        ge=1,
        le=31,
        description="Pacing and projections only run before this day of month"
    )
    pace_tolerance_pct: float = Field(
        default=10.0,
        ge=0,
        description="Points above the expected pace before warning"
    )

    # Habits
    weekend_share_pct: float = Field(
        default=50.0,
        ge=0,
        le=100,
        description="Weekend share of spending above which to suggest planning"
    )
    max_monthly_transactions: int = Field(
        default=50,
        ge=1,
        description="Entry count above which to suggest consolidating purchases"
    )


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
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def insights(self) -> InsightSettings:
        return InsightSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
