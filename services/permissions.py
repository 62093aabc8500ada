"""Role based page access for owner and admin users."""

from __future__ import annotations
import json
from typing import Any, Dict, List, Mapping, Optional

ROLES = ("owner", "admin")

PERMISSION_LABELS: Dict[str, str] = {
    "dashboard": "Dashboard",
    "products": "Products",
    "bundles": "Bundles",
    "stock_in": "Stock In",
    "stock_out": "Stock Out",
    "reports": "Reports",
    "history": "Activity History",
    "suppliers": "Suppliers",
    "settings": "Settings",
}

DEFAULT_ADMIN_PERMISSIONS: Dict[str, bool] = {
    "dashboard": True,
    "products": True,
    "bundles": True,
    "stock_in": True,
    "stock_out": True,
    "reports": False,
    "history": False,
    "suppliers": False,
    "settings": False,
}


def admin_permissions(catalog: Optional[Mapping[str, Any]] = None) -> Dict[str, bool]:
    """Defaults overlaid with catalog['settings']['admin_permissions']; unknown keys ignored."""
    perms = dict(DEFAULT_ADMIN_PERMISSIONS)
    settings = (catalog or {}).get("settings") or {}
    stored = settings.get("admin_permissions") if isinstance(settings, dict) else None
    if isinstance(stored, dict):
        for key, value in stored.items():
            if key in perms:
                perms[key] = bool(value)
    return perms


def can_access(role: Optional[str], permission: str, catalog: Optional[Mapping[str, Any]] = None) -> bool:
    """Owners see everything; admins follow their permission flags; anyone else nothing."""
    if permission not in PERMISSION_LABELS:
        return False
    if role not in ROLES:
        return False
    if role == "owner":
        return True
    return admin_permissions(catalog).get(permission, False)


def allowed(role: Optional[str], permissions: List[str], catalog: Optional[Mapping[str, Any]] = None) -> List[str]:
    """Filter `permissions` down to the ones `role` may open, preserving order."""
    return [p for p in permissions if can_access(role, p, catalog)]


def with_admin_permissions(catalog: Dict[str, Any], flags: Mapping[str, bool]) -> Dict[str, Any]:
    """Return a catalog copy with updated admin permission flags."""
    updated = json.loads(json.dumps(catalog))
    settings = updated.get("settings")
    if not isinstance(settings, dict):
        settings = {}
        updated["settings"] = settings
    settings["admin_permissions"] = {
        key: bool(flags.get(key, default)) for key, default in DEFAULT_ADMIN_PERMISSIONS.items()
    }
    return updated
