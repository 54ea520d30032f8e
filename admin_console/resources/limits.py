"""
Transaction Limit Resources

Per-retailer, per-service transaction limits. A retailer may hold at most one
limit per service, so creating a second one is refused before it reaches the
backend, and the backend's own uniqueness errors are rewritten into the same
friendly message.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..errors import ConflictError, ServerError
from ..forms import CreateController, EditController, FieldSpec, FormSchema, Record, to_number
from ..listing import ListViewController
from ..schemas import CreateLimitRequest, UpdateLimitRequest
from ..validators import Required, non_negative_amount, positive_amount
from .base import ResourceService, find_record, numeric_id


SERVICE_OPTIONS: Dict[str, str] = {
    "PAYOUT": "Payout",
}

DUPLICATE_MARKERS = ("duplicate", "unique constraint")
SQLSTATE_UNIQUE_VIOLATION = "SQLSTATE 23505"


def service_label(service: str) -> str:
    """Display label of a service code; unknown codes are shown as-is"""
    return SERVICE_OPTIONS.get(service, service)


def duplicate_limit_message(service: Optional[str] = None) -> str:
    if service:
        return (
            f"A limit for {service_label(service)} already exists. "
            "Please edit the existing limit instead."
        )
    return "A limit for this service already exists. Please edit the existing limit instead."


def format_date(value: Optional[str]) -> str:
    """Render an ISO timestamp as e.g. 05 Mar 2024; N/A when missing or unparseable"""
    if not value:
        return "N/A"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return "N/A"
    return parsed.strftime("%d %b %Y")


LIMIT_FORM = FormSchema(
    label="Limit",
    id_field="limit_id",
    fields=[
        FieldSpec(
            "limit_amount",
            default="",
            coerce=to_number,
            validators=[
                non_negative_amount("Limit amount"),
                positive_amount("Limit amount", message="Please enter a valid limit amount"),
            ]
        ),
        FieldSpec("service", default="PAYOUT", validators=[Required(message="Please select a service")]),
    ]
)


def duplicate_service_guard(existing: Callable[[], Sequence[Record]]) -> Callable[[Record], Optional[str]]:
    """Refuse a create when a limit for the same service already exists"""
    def guard(draft: Record) -> Optional[str]:
        service = draft.get("service")
        for limit in existing():
            if limit.get("service") == service:
                return duplicate_limit_message(service)
        return None
    return guard


def conflict_message(message: str, service: Optional[str] = None) -> Optional[str]:
    """Friendly message for a known uniqueness violation, None for anything else"""
    if any(marker in message for marker in DUPLICATE_MARKERS):
        return duplicate_limit_message(service)
    if SQLSTATE_UNIQUE_VIOLATION in message:
        return duplicate_limit_message()
    return None


class LimitService(ResourceService):
    """Transaction limits of one retailer"""

    resource = "limit"
    label = "Limit"

    def __init__(self, client, retailer_id: str, notifier=None):
        super().__init__(client, notifier)
        self.retailer_id = str(retailer_id)

    async def list_limits(self) -> List[Dict[str, Any]]:
        """All limits, narrowed to this retailer"""
        limits = await self.client.get_all(self.resource, key="limit")
        return [limit for limit in limits if str(limit.get("retailer_id")) == self.retailer_id]

    async def get_limit(self, limit_id: Any) -> Optional[Dict[str, Any]]:
        return find_record(await self.list_limits(), "limit_id", limit_id)

    def _create_payload(self, draft: Record) -> Record:
        return CreateLimitRequest(
            retailer_id=self.retailer_id,
            limit_amount=draft["limit_amount"],
            service=draft["service"]
        ).dict()

    async def create_limit(self, payload: Record) -> Any:
        """
        Raises:
            ConflictError: the backend reported a duplicate limit
        """
        try:
            return await self.client.create(self.resource, payload)
        except ServerError as e:
            friendly = conflict_message(e.message or "", payload.get("service"))
            if friendly is None:
                raise
            raise ConflictError(e.status_code, friendly, payload=e.payload) from e

    async def update_limit(self, payload: Record) -> Any:
        payload = dict(payload, limit_id=numeric_id(payload["limit_id"]))
        body = UpdateLimitRequest(**payload).dict(exclude_unset=True)
        return await self.client.update(self.resource, body)

    async def delete_limit(self, limit_id: Any, listing: Optional[ListViewController] = None) -> bool:
        return await self._delete(limit_id, on_success=listing.refresh if listing else None)

    def list_controller(self, page_size: int = 10) -> ListViewController:
        return ListViewController(
            fetch=self.list_limits,
            search_fields=("service",),
            filter_fields=("service",),
            page_size=page_size,
            notifier=self.notifier,
            name="limits"
        )

    def create_controller(self, listing: ListViewController) -> CreateController:
        """Create form; the duplicate check runs against the listing's cached limits"""
        return CreateController(
            LIMIT_FORM,
            create=self.create_limit,
            build_payload=self._create_payload,
            guards=[duplicate_service_guard(lambda: listing.items)],
            notifier=self.notifier,
            on_success=listing.refresh,
            actor=self.actor
        )

    def edit_controller(self, listing: Optional[ListViewController] = None) -> EditController:
        return EditController(
            LIMIT_FORM,
            fetch=self.get_limit,
            update=self.update_limit,
            notifier=self.notifier,
            on_success=listing.refresh if listing else None,
            actor=self.actor
        )
