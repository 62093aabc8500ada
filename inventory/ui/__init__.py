"""Streamlit pages and the sidebar router."""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from services.permissions import allowed
from .bundles import render_bundles
from .dashboard import render_dashboard
from .history import render_history
from .permissions_page import render_permissions
from .products import render_products
from .reports import render_reports
from .stock_forms import render_stock_in, render_stock_out
from .suppliers import render_suppliers

# label -> (permission key, renderer); renderer(catalog, user)
PAGES: Dict[str, tuple] = {
    "Dashboard": ("dashboard", lambda catalog, user: render_dashboard(catalog)),
    "Products": ("products", render_products),
    "Bundles": ("bundles", render_bundles),
    "Stock In": ("stock_in", render_stock_in),
    "Stock Out": ("stock_out", render_stock_out),
    "Suppliers": ("suppliers", render_suppliers),
    "Reports": ("reports", lambda catalog, user: render_reports(catalog)),
    "History": ("history", lambda catalog, user: render_history(catalog)),
    "Permissions": ("settings", lambda catalog, user: render_permissions(catalog)),
}


def pages_for(role: Optional[str], catalog: Dict[str, Any]) -> List[str]:
    """Page labels the role may open, in sidebar order."""
    keys = allowed(role, [perm for perm, _ in PAGES.values()], catalog)
    return [label for label, (perm, _) in PAGES.items() if perm in keys]


def page_router(choice: str, catalog: Dict[str, Any], user: Optional[str] = None) -> None:
    # Unknown labels fall back to the dashboard.
    _, render = PAGES.get(choice, PAGES["Dashboard"])
    render(catalog, user)


__all__ = ["PAGES", "pages_for", "page_router"]
