### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Portal Services Package -
# Author: Bailey Dixon
# Date: 09/03/2026
# Python: 3.11
####################

"""
Portal Services Package

Contains security primitives and data access:
- passwords: bcrypt hashing for admin logins
- kms: envelope encryption and masking of tenant secrets
- sessions: signed session tokens and cookies
- tenant_resolver: which tenant a request is for
- store: tenant-scoped reads and writes of activity records
"""
