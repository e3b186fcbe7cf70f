"""
Config Schema Validation

Pydantic models for validating config.yaml structure.
Provides clear error messages when configuration is invalid.
"""

from typing import Dict, List, Literal

from pydantic import BaseModel, Field, field_validator


class LoggingConfig(BaseModel):
    """Logging configuration"""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_to_file: bool = Field(default=True, description="Enable file logging")
    log_to_console: bool = Field(default=True, description="Enable console logging")


class ApplicationConfig(BaseModel):
    """Application settings"""

    timezone: str = Field(
        default="UTC",
        description="IANA timezone name (e.g., America/New_York)",
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a known IANA timezone"""
        try:
            from zoneinfo import ZoneInfo

            ZoneInfo(v)
        except Exception:
            raise ValueError(
                f"Invalid timezone '{v}'. Use IANA format like 'America/New_York' or 'UTC'"
            )
        return v


class TenancyConfig(BaseModel):
    """Tenant resolution settings"""

    default_tenant: str = Field(
        default="default",
        pattern=r"^[a-z0-9_-]+$",
        description="Tenant used when a request carries no tenant hint",
    )
    reserved_subdomains: List[str] = Field(
        default_factory=lambda: ["www", "localhost", "admin"],
        description="Host labels that never name a tenant",
    )

    @field_validator("reserved_subdomains")
    @classmethod
    def lowercase_labels(cls, v: List[str]) -> List[str]:
        return [label.strip().lower() for label in v if label and label.strip()]


class BrandingConfig(BaseModel):
    """Default branding document, overridden per tenant"""

    brand_name: str = Field(default="Tenant Portal")
    primary_color: str = Field(default="#2563eb")
    accent_color: str = Field(default="#f59e0b")
    logo: str | None = Field(default=None, description="Logo path; defaults to /static/brands/<tenant>/logo.svg")
    favicon: str | None = Field(default=None, description="Favicon path")
    labels: Dict[str, str] = Field(default_factory=dict)
    features: Dict[str, bool] = Field(
        default_factory=lambda: {"premium": True, "pricing": True, "usage": True}
    )


class AppConfig(BaseModel):
    """
    Root configuration model for config.yaml

    Validates the entire configuration structure on load.
    """

    application: ApplicationConfig = Field(default_factory=ApplicationConfig)
    tenancy: TenancyConfig = Field(default_factory=TenancyConfig)
    branding: BrandingConfig = Field(default_factory=BrandingConfig)

    model_config = {"populate_by_name": True}


def validate_config(config_dict: dict) -> AppConfig:
    """
    Validate a config dictionary against the schema.

    Args:
        config_dict: Raw dictionary loaded from config.yaml

    Returns:
        Validated AppConfig instance

    Raises:
        pydantic.ValidationError: If config is invalid
    """
    return AppConfig.model_validate(config_dict or {})


def get_validation_errors(config_dict: dict) -> List[str]:
    """
    Get a list of validation errors for a config dictionary.

    Args:
        config_dict: Raw dictionary loaded from config.yaml

    Returns:
        List of error messages (empty if valid)
    """
    try:
        validate_config(config_dict)
        return []
    except Exception as e:
        from pydantic import ValidationError

        if isinstance(e, ValidationError):
            return [
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
        return [str(e)]
