### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - First-Run Bootstrap -
# Author: Bailey Dixon
# Date: 09/07/2026
# Python: 3.11
####################

"""
First-Run Bootstrap

Creates the "default" tenant and its first admin. Used by the app on
startup (when PORTAL_AUTO_SEED is on and the database is empty) and by
`tenant-portal seed`. Re-running never changes existing rows.
"""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from portal.models import AdminUser, Tenant, normalize_email
from portal.services.tenant_resolver import normalize_tenant

DEFAULT_TENANT_ID = "default"
DEFAULT_TENANT_NAME = "Default Tenant"


@dataclass
class SeedResult:
    tenant: Tenant
    admin: AdminUser
    tenant_created: bool
    admin_created: bool


def has_tenants(db: Session) -> bool:
    return db.query(Tenant.id).first() is not None


def seed_tenant(
    db: Session,
    admin_email: str,
    admin_password: str,
    tenant_id: str = DEFAULT_TENANT_ID,
    tenant_name: str = DEFAULT_TENANT_NAME,
    plan: str = "basic",
) -> SeedResult:
    """
    Create a tenant and an admin account in it, if missing.

    Args:
        db: Database session
        admin_email: Admin login email
        admin_password: Admin password (only used when the account is created)
        tenant_id: Tenant slug, also used as its subdomain
        tenant_name: Display name
        plan: Plan for a newly created tenant

    Returns:
        SeedResult with the tenant, the admin and what was created

    Raises:
        ValueError: tenant_id has no usable characters after normalization
    """
    slug = normalize_tenant(tenant_id)
    if slug is None:
        raise ValueError(f"Invalid tenant id: {tenant_id!r}")
    tenant_id = slug

    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    tenant_created = tenant is None
    if tenant_created:
        tenant = Tenant(id=tenant_id, name=tenant_name, subdomain=tenant_id, plan=plan, branding={})
        db.add(tenant)
        db.flush()

    email = normalize_email(admin_email)
    admin = (
        db.query(AdminUser)
        .filter(AdminUser.tenant_id == tenant_id, AdminUser.email == email)
        .first()
    )
    admin_created = admin is None
    if admin_created:
        admin = AdminUser.create(tenant_id=tenant_id, email=email, password=admin_password)
        db.add(admin)

    db.commit()
    return SeedResult(tenant=tenant, admin=admin, tenant_created=tenant_created, admin_created=admin_created)
