"""
Tenant Branding

Builds the branding document served by GET /api/portal/config: the
tenant's own branding JSON merged over the config.yaml defaults.
Tenant documents may use camelCase or snake_case keys.
"""

from pathlib import Path

from portal.config_schema import BrandingConfig
from portal.models import Tenant
from portal.schemas.responses import BrandingResponse

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
BRANDS_URL = "/static/brands"

_KEY_ALIASES = {
    "brandName": "brand_name",
    "primaryColor": "primary_color",
    "accentColor": "accent_color",
}


def brand_asset_url(tenant_id: str, filename: str) -> str:
    """URL of a tenant brand asset, falling back to the default brand"""
    if (STATIC_DIR / "brands" / tenant_id / filename).is_file():
        return f"{BRANDS_URL}/{tenant_id}/{filename}"
    return f"{BRANDS_URL}/default/{filename}"


def build_branding(tenant: Tenant, defaults: BrandingConfig) -> BrandingResponse:
    """Merge a tenant's branding over the defaults"""
    merged = defaults.model_dump()
    merged["labels"] = dict(merged.get("labels") or {})
    merged["features"] = dict(merged.get("features") or {})
    merged["brand_name"] = tenant.name or defaults.brand_name

    for key, value in (tenant.branding or {}).items():
        key = _KEY_ALIASES.get(key, key)
        if key in ("labels", "features") and isinstance(value, dict):
            merged[key].update(value)
        elif key in merged and value is not None:
            merged[key] = value

    return BrandingResponse(
        tenant_id=tenant.id,
        brand_name=merged["brand_name"],
        primary_color=merged["primary_color"],
        accent_color=merged["accent_color"],
        logo=merged.get("logo") or brand_asset_url(tenant.id, "logo.svg"),
        favicon=merged.get("favicon") or brand_asset_url(tenant.id, "favicon.svg"),
        labels={str(k): str(v) for k, v in merged["labels"].items()},
        features={str(k): bool(v) for k, v in merged["features"].items()},
    )
