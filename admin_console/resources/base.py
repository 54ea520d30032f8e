"""
Shared plumbing for resource services
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ..api_client import AdminApiClient
from ..errors import ConsoleError
from ..logging_config import log_action
from ..notifications import LogNotifier, Notifier

logger = logging.getLogger("admin_console.resources")


def numeric_id(value: Any) -> Any:
    """Backend ids are integers on the wire when they look like integers"""
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return value


def find_record(items: List[Dict[str, Any]], id_field: str, record_id: Any) -> Optional[Dict[str, Any]]:
    """Pick one record out of a freshly fetched list by id"""
    for item in items:
        if str(item.get(id_field)) == str(record_id):
            return item
    return None


class ResourceService:
    """Base class: an API client, a notifier and the acting admin"""

    resource = ""
    label = ""

    def __init__(self, client: AdminApiClient, notifier: Optional[Notifier] = None):
        self.client = client
        self.notifier = notifier or LogNotifier()

    @property
    def actor(self) -> Optional[str]:
        identity = self.client.session.get_identity()
        return identity.id if identity else None

    async def _delete(self, record_id: Any, *path: Any,
                      on_success: Optional[Callable[[], Awaitable[Any]]] = None) -> bool:
        """DELETE a record; notify either way and refresh on success"""
        try:
            await self.client.delete(self.resource, record_id, *path)
        except ConsoleError as e:
            self.notifier.error(e.message or f"Failed to delete {self.label.lower()}")
            return False

        self.notifier.success(f"{self.label} deleted successfully")
        log_action(
            logger, "info", f"{self.label} {record_id} deleted",
            user_id=self.actor, action="delete", resource=self.resource
        )
        if on_success is not None:
            await on_success()
        return True
