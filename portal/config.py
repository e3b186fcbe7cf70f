### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Portal Configuration -
# Author: Bailey Dixon
# Date: 09/02/2026
# Python: 3.11
####################

"""
Portal Configuration Management

Uses Pydantic Settings for secrets and limits with environment variable
support (prefix PORTAL_, .env file honoured). Loads non-secret settings
such as tenancy rules and default branding from data/config.yaml.

Config file location (in order of precedence):
1. PORTAL_CONFIG_PATH environment variable
2. data/config.yaml (default)
"""

import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic_settings import BaseSettings

from portal.config_schema import AppConfig, validate_config


def get_project_root() -> Path:
    """Get the project root directory"""
    return Path(__file__).parent.parent


def get_config_path() -> Path:
    """
    Get the path to config.yaml.

    Priority:
    1. PORTAL_CONFIG_PATH environment variable (if set)
    2. data/config.yaml (default location)
    """
    env_path = os.environ.get("PORTAL_CONFIG_PATH")
    if env_path:
        return Path(env_path)
    return get_project_root() / "data" / "config.yaml"


class PortalSettings(BaseSettings):
    """Portal Server Settings"""

    # API Configuration
    api_title: str = "Tenant Portal API"
    api_version: str = "1.0.0"
    debug: bool = False

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 3000

    # Database Configuration
    database_url: str = "sqlite:///./data/portal.db"

    # Security
    secret_key: str = "change-this-in-production"  # Session token signing
    kms_master_key: str | None = None  # Envelope encryption of tenant secrets
    ingest_key: str | None = None  # Shared key for service-to-service ingestion
    session_cookie_name: str = "portal_session"
    tenant_cookie_name: str = "portal_tenant"
    tenant_header: str = "X-Tenant-ID"
    ingest_key_header: str = "X-Customer-Key"
    cors_origins: list[str] = []  # JSON list, e.g. ["https://app.example.com"]

    # Rate Limiting
    login_ip_max_attempts: int = 20
    login_email_max_attempts: int = 5
    login_window_seconds: int = 900
    api_rate_limit: str = "600/minute"
    ingest_rate_limit: str = "300/minute"

    # Bootstrap
    auto_seed: bool = True
    seed_admin_email: str = "admin@example.com"
    seed_admin_password: str = "admin123"

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = True

    class Config:
        env_prefix = "PORTAL_"
        env_file = ".env"
        extra = "ignore"


DEFAULT_CONFIG = """# Tenant Portal Configuration
# Non-secret application settings. Secrets (signing key, KMS master key,
# ingest key) and rate limits come from PORTAL_* environment variables.

# Application Settings
application:
  # Timezone for logs and timestamps (IANA timezone name)
  timezone: "UTC"

  logging:
    level: "INFO"             # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_to_file: true
    log_to_console: true

# Tenant Resolution
tenancy:
  # Tenant used when no session, cookie, header or subdomain names one
  default_tenant: "default"
  # Host labels that are never treated as a tenant subdomain
  reserved_subdomains:
    - www
    - localhost
    - admin

# Default Branding
# Each tenant's own branding document is merged over these values.
branding:
  brand_name: "Tenant Portal"
  primary_color: "#2563eb"
  accent_color: "#f59e0b"
  labels:
    dashboard: "Dashboard"
    leads: "Leads"
  features:
    premium: true
    pricing: true
    usage: true
"""


def load_yaml_config(config_path: str | None = None) -> dict:
    """Load configuration from YAML file, creating default if missing"""
    config_file = get_config_path() if config_path is None else Path(config_path)

    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, "w", encoding="utf-8") as f:
            f.write(DEFAULT_CONFIG)
        print(f"Created default configuration file: {config_file}")

    with open(config_file, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@lru_cache
def get_settings() -> PortalSettings:
    """Get cached portal settings instance"""
    return PortalSettings()


@lru_cache
def get_app_config() -> AppConfig:
    """Get the validated config.yaml contents (cached)"""
    return validate_config(load_yaml_config())
