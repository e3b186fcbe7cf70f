### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Portal Package -
# Author: Bailey Dixon
# Date: 09/02/2026
# Python: 3.11
####################

"""
Tenant Portal Package

This package contains the FastAPI application that serves the
tenant-branded admin dashboard and its JSON API.
"""

__version__ = "1.0.0"
