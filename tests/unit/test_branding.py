"""
Unit tests for config.yaml validation and tenant branding.
"""

import pytest
from pydantic import ValidationError

from portal.config import DEFAULT_CONFIG, load_yaml_config
from portal.config_schema import BrandingConfig, get_validation_errors, validate_config
from portal.models import Tenant
from portal.services.branding import build_branding


def make_tenant(tenant_id="acme", name="Acme Inc", branding=None) -> Tenant:
    return Tenant(id=tenant_id, name=name, subdomain=tenant_id, plan="basic", branding=branding or {})


class TestConfigSchema:
    def test_defaults(self):
        config = validate_config({})
        assert config.tenancy.default_tenant == "default"
        assert "www" in config.tenancy.reserved_subdomains
        assert config.branding.features["premium"] is True

    def test_default_file_is_valid(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(DEFAULT_CONFIG, encoding="utf-8")
        assert get_validation_errors(load_yaml_config(str(path))) == []

    def test_missing_file_is_created(self, tmp_path):
        path = tmp_path / "nested" / "config.yaml"
        loaded = load_yaml_config(str(path))
        assert path.exists()
        assert loaded["tenancy"]["default_tenant"] == "default"

    def test_reserved_labels_lowercased(self):
        config = validate_config({"tenancy": {"reserved_subdomains": ["WWW", " Admin ", ""]}})
        assert config.tenancy.reserved_subdomains == ["www", "admin"]

    def test_invalid_default_tenant(self):
        with pytest.raises(ValidationError):
            validate_config({"tenancy": {"default_tenant": "Not Valid"}})

    def test_invalid_timezone_reported(self):
        errors = get_validation_errors({"application": {"timezone": "Mars/Olympus"}})
        assert len(errors) == 1
        assert errors[0].startswith("application.timezone")


class TestBuildBranding:
    def test_defaults_with_tenant_name(self):
        branding = build_branding(make_tenant(), BrandingConfig())
        assert branding.tenant_id == "acme"
        assert branding.brand_name == "Acme Inc"
        assert branding.primary_color == "#2563eb"
        assert branding.logo == "/static/brands/default/logo.svg"
        assert branding.favicon == "/static/brands/default/favicon.svg"

    def test_tenant_overrides_camel_case(self):
        tenant = make_tenant(branding={"brandName": "Acme Support", "primaryColor": "#000000"})
        branding = build_branding(tenant, BrandingConfig())
        assert branding.brand_name == "Acme Support"
        assert branding.primary_color == "#000000"
        assert branding.accent_color == "#f59e0b"

    def test_labels_and_features_merge(self):
        defaults = BrandingConfig(labels={"dashboard": "Dashboard", "leads": "Leads"})
        tenant = make_tenant(branding={"labels": {"leads": "Prospects"}, "features": {"premium": False}})
        branding = build_branding(tenant, defaults)
        assert branding.labels == {"dashboard": "Dashboard", "leads": "Prospects"}
        assert branding.features["premium"] is False
        assert branding.features["usage"] is True

    def test_unknown_keys_ignored(self):
        branding = build_branding(make_tenant(branding={"script": "<script>"}), BrandingConfig())
        assert "script" not in branding.model_dump()

    def test_explicit_logo(self):
        tenant = make_tenant(branding={"logo": "https://cdn.example.com/acme.png"})
        assert build_branding(tenant, BrandingConfig()).logo == "https://cdn.example.com/acme.png"

    def test_default_brand_assets(self):
        """The default tenant has its own asset folder."""
        branding = build_branding(make_tenant(tenant_id="default", name="Default Tenant"), BrandingConfig())
        assert branding.logo == "/static/brands/default/logo.svg"
