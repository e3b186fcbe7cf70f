### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Page Router -
# Author: Bailey Dixon
# Date: 09/07/2026
# Python: 3.11
####################

"""
HTML Pages

The dashboard and pricing pages are static HTML; branding and data are
fetched by the page scripts from /api/portal/*. Sign-in happens inside
the dashboard page, so the pages themselves need no session.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse, RedirectResponse

from portal.errors import NotFound

router = APIRouter()

VIEWS_DIR = Path(__file__).resolve().parent.parent / "views"


def _page(name: str) -> FileResponse:
    page = VIEWS_DIR / name
    if not page.is_file():
        raise NotFound(f"Page '{name}' is missing")
    return FileResponse(str(page), media_type="text/html")


@router.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    return RedirectResponse(url="/portal", status_code=302)


@router.get("/portal", include_in_schema=False)
async def portal_page() -> FileResponse:
    return _page("portal.html")


@router.get("/pricing", include_in_schema=False)
async def pricing_page() -> FileResponse:
    return _page("pricing.html")
