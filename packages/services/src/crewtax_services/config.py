"""Configuration system for CrewTax services.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for running the tax estimator.

Usage:
    from crewtax_services.config import CrewTaxConfig, configure_logging

    # Load from environment variables and .env file
    config = CrewTaxConfig()
    configure_logging(config)

    # Access deduction settings
    print(config.deductions.home_office_percentage)
"""

import logging
from decimal import Decimal
from typing import Optional

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DeductionConfig(BaseSettings):
    """Deduction settings.

    Environment Variables:
        CREWTAX_DEDUCTIONS_HOME_OFFICE_PERCENTAGE: Share of the home used for
            work (0-100). Unset means no home-office apportionment.
        CREWTAX_DEDUCTIONS_DEFAULT_VEHICLE_BUSINESS_USE: Business-use
            percentage assumed when a vehicle's usage cannot be resolved.
    """

    model_config = SettingsConfigDict(
        env_prefix="CREWTAX_DEDUCTIONS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    home_office_percentage: Optional[Decimal] = Field(
        default=None,
        ge=0,
        le=100,
        description="Percentage of the home used as an office",
    )
    default_vehicle_business_use: Decimal = Field(
        default=Decimal("100"),
        ge=0,
        le=100,
        description="Business-use percentage for vehicles that cannot be resolved",
    )


class ReportingConfig(BaseSettings):
    """Reporting settings.

    Environment Variables:
        CREWTAX_REPORTING_REPORT_TOP_N: Categories kept in the category report
        CREWTAX_REPORTING_CHART_TOP_N: Categories shown on the dashboard chart
    """

    model_config = SettingsConfigDict(
        env_prefix="CREWTAX_REPORTING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    report_top_n: int = Field(
        default=8,
        gt=0,
        description="Number of expense categories in the report",
    )
    chart_top_n: int = Field(
        default=5,
        gt=0,
        description="Number of expense categories in the chart",
    )


class CrewTaxConfig(BaseSettings):
    """Root configuration for CrewTax services.

    Environment Variables:
        CREWTAX_ENV: Environment name (development, staging, production, test)
        CREWTAX_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Example:
        config = CrewTaxConfig(
            deductions=DeductionConfig(home_office_percentage=Decimal("25")),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="CREWTAX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    # Nested configuration
    deductions: DeductionConfig = Field(default_factory=DeductionConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.env == "development"

    @property
    def is_debug(self) -> bool:
        return self.log_level == "DEBUG"


def configure_logging(config: CrewTaxConfig) -> None:
    """Filter structlog output below the configured level."""
    level = logging.getLevelName(config.log_level)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
