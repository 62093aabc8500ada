"""Activity log repository - audit trail of stock and catalog changes."""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from services.utils.dates import now_iso
from services.utils.id_generator import new_record_id

logger = logging.getLogger(__name__)

ACTIVITY_TYPES = (
    "stock_in",
    "stock_out",
    "adjustment",
    "price_change",
    "product_create",
    "bundle_create",
)


class ActivityRepository:
    """Appends and lists activity log entries."""

    @staticmethod
    def append(
        catalog: Dict[str, Any],
        activity_type: str,
        description: str,
        user: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Append an entry to catalog['activity_logs'] in place.

        Callers pass their own working copy; the public repository methods
        never hand the caller's original dict here.
        """
        if activity_type not in ACTIVITY_TYPES:
            raise ValueError(f"Unknown activity type: {activity_type}")

        entry = {
            "id": new_record_id("log"),
            "type": activity_type,
            "description": description,
            "user": user or None,
            "timestamp": now_iso(),
        }
        logs = catalog.get("activity_logs")
        if not isinstance(logs, list):
            logs = []
            catalog["activity_logs"] = logs
        logs.append(entry)
        logger.info("activity %s by %s: %s", activity_type, user or "-", description)
        return entry

    @staticmethod
    def list_recent(catalog: Dict[str, Any], limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Entries newest first."""
        logs = [e for e in catalog.get("activity_logs", []) or [] if isinstance(e, dict)]
        logs.sort(key=lambda e: str(e.get("timestamp") or ""), reverse=True)
        return logs[:limit] if limit else logs
