"""
Activity Log Resources

Read-only audit feed of user, transaction, API, security and system events,
searchable and filterable by category, status and risk level.
"""

from typing import Any, Dict, List, Sequence

from ..listing import ListViewController, summarize
from .base import ResourceService


CATEGORIES = ("USER", "TRANSACTION", "API", "SECURITY", "SYSTEM")
STATUSES = ("success", "failed", "pending")
RISK_LEVELS = ("low", "medium", "high")

ACTIVITY_SEARCH_FIELDS = ("user_name", "action", "details", "user_id")
ACTIVITY_FILTER_FIELDS = ("category", "status", "risk_level")


def activity_stats(logs: Sequence[Dict[str, Any]]) -> Dict[str, int]:
    """Headline counts over the full (unfiltered) log set"""
    statuses = summarize(logs, "status", STATUSES)
    risks = summarize(logs, "risk_level", RISK_LEVELS)
    return {
        "total": len(logs),
        "success": statuses["success"],
        "failed": statuses["failed"],
        "high_risk": risks["high"],
    }


class ActivityLogService(ResourceService):
    resource = "activity"
    label = "Activity log"

    async def list_logs(self) -> List[Dict[str, Any]]:
        return await self.client.get_all(self.resource, key="activity_log")

    def list_controller(self, page_size: int = 10) -> ListViewController:
        return ListViewController(
            fetch=self.list_logs,
            search_fields=ACTIVITY_SEARCH_FIELDS,
            filter_fields=ACTIVITY_FILTER_FIELDS,
            page_size=page_size,
            notifier=self.notifier,
            name="activity logs"
        )
