### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Admin User Model -
# Author: Bailey Dixon
# Date: 09/02/2026
# Python: 3.11
####################

"""
Admin User Model

Stores tenant administrators with a bcrypt password hash. The same email
may hold accounts in several tenants; (tenant_id, email) is unique.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from portal.database import Base
from portal.services.passwords import hash_password, verify_password


def normalize_email(email: str | None) -> str:
    """Trim and lower-case an email address"""
    return (email or "").strip().lower()


class AdminUser(Base):
    """Admin user model - a login scoped to one tenant."""

    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_login_at = Column(DateTime, nullable=True)

    # Relationships
    tenant = relationship("Tenant", back_populates="admin_users")

    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_admin_users_tenant_email"),
    )

    def __repr__(self):
        return f"<AdminUser(id={self.id}, tenant='{self.tenant_id}', email='{self.email}')>"

    @classmethod
    def create(cls, tenant_id: str, email: str, password: str) -> "AdminUser":
        """
        Build an admin user with a freshly hashed password.

        Args:
            tenant_id: Owning tenant
            email: Login email (normalized before storage)
            password: Plaintext password

        Returns:
            AdminUser instance (not yet added to a session)
        """
        return cls(
            tenant_id=tenant_id,
            email=normalize_email(email),
            password_hash=hash_password(password),
        )

    def set_password(self, password: str):
        """Replace the stored password hash"""
        self.password_hash = hash_password(password)

    def verify_password(self, password: str) -> bool:
        """Check a plaintext password against the stored hash"""
        return verify_password(password, self.password_hash)

    def record_login(self):
        """Record a successful login"""
        self.last_login_at = datetime.utcnow()
