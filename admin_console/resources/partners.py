"""
Partner Profile Resources

Retailers, distributors and master distributors share one edit dialog shape:
profile fields edited through a diff-only `update/details` call, plus
block/unblock and KYC verify/pending flags that each go through their own
endpoint. Retailers carry a few extra fields (password, PAN, Aadhaar, wallet
balance).
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..forms import EditController, FieldSpec, FormSchema, ToggleSpec, to_bool, to_number
from ..listing import ListViewController
from ..validators import national_id, non_negative_amount, phone, required, tax_id
from .base import ResourceService


@dataclass(frozen=True)
class PartnerRole:
    """Naming of one partner tier on the backend"""
    key: str          # path segment used by the console service
    resource: str     # URL prefix: /{resource}/...
    kind: str         # /{resource}/get/{kind}/{id}
    prefix: str       # field prefix: {prefix}_id, {prefix}_name, ...
    label: str
    parent: Optional[str] = None  # listing path: /{resource}/get/{parent}/{parent_id}

    @property
    def id_field(self) -> str:
        return f"{self.prefix}_id"

    @property
    def name_field(self) -> str:
        return f"{self.prefix}_name"

    @property
    def phone_field(self) -> str:
        return f"{self.prefix}_phone"


RETAILER = PartnerRole("retailer", "retailer", "retailer", "retailer", "Retailer", parent="distributor")
DISTRIBUTOR = PartnerRole("distributor", "distributor", "distributor", "distributor", "Distributor", parent="md")
MASTER_DISTRIBUTOR = PartnerRole("md", "md", "md", "master_distributor", "Master distributor", parent="admin")

ROLES: Dict[str, PartnerRole] = {role.key: role for role in (RETAILER, DISTRIBUTOR, MASTER_DISTRIBUTOR)}

ADDRESS_FIELDS = ("city", "state", "address", "pincode", "business_name", "business_type", "gst_number")


def partner_form(role: PartnerRole) -> FormSchema:
    """Edit form of a partner tier"""
    fields: List[FieldSpec] = [
        FieldSpec(role.name_field, validators=[required("Name")]),
        FieldSpec(role.phone_field, validators=[required("Phone number"), phone()]),
    ]
    if role is RETAILER:
        fields += [
            FieldSpec("retailer_password"),
            FieldSpec("pan_number", validators=[tax_id()]),
            FieldSpec("aadhar_number", validators=[national_id()]),
        ]
    fields += [FieldSpec(name) for name in ADDRESS_FIELDS]
    if role is RETAILER:
        fields.append(FieldSpec(
            "wallet_balance", default=0.0, coerce=to_number,
            validators=[non_negative_amount("Wallet balance")]
        ))
    fields += [
        FieldSpec("is_blocked", default=False, coerce=to_bool, submit=False),
        FieldSpec("kyc_status", default=False, coerce=to_bool, submit=False),
    ]

    return FormSchema(
        label=role.label,
        id_field=role.id_field,
        fields=fields,
        toggles=[
            ToggleSpec("block", "is_blocked", "block_status",
                       f"{role.label} block status updated", "Failed to update block status"),
            ToggleSpec("kyc", "kyc_status", "kyc_status",
                       f"{role.label} KYC status updated", "Failed to update KYC status"),
        ]
    )


class PartnerService(ResourceService):
    """Listing and profile editing for one partner tier"""

    def __init__(self, client, role: PartnerRole, notifier=None):
        super().__init__(client, notifier)
        self.role = role
        self.resource = role.resource
        self.label = role.label
        self.form = partner_form(role)

    def _parent_path(self, parent_id: Optional[str]) -> Tuple[str, str]:
        if self.role.parent == "admin" and parent_id is None:
            parent_id = self.client.session.require_identity().id
        if parent_id is None:
            raise ValueError(f"{self.role.label} listing needs a parent id")
        return self.role.parent, str(parent_id)

    async def list_partners(self, parent_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return await self.client.get_all(self.resource, *self._parent_path(parent_id), key=self.role.prefix)

    async def get_profile(self, partner_id: Any) -> Optional[Dict[str, Any]]:
        return await self.client.get_one(self.resource, self.role.kind, partner_id, key=self.role.prefix)

    async def update_details(self, payload: Dict[str, Any]) -> Any:
        return await self.client.update(self.resource, payload, "details")

    async def set_status(self, toggle: ToggleSpec, partner_id: Any, value: Any) -> Any:
        payload = {self.role.id_field: partner_id, toggle.payload_key: value}
        return await self.client.set_flag(self.resource, toggle.name, payload)

    def list_controller(self, parent_id: Optional[str] = None, page_size: int = 10) -> ListViewController:
        async def fetch():
            return await self.list_partners(parent_id)

        return ListViewController(
            fetch=fetch,
            search_fields=(self.role.name_field, self.role.phone_field, self.role.id_field, "business_name"),
            page_size=page_size,
            notifier=self.notifier,
            name=f"{self.role.key}s"
        )

    def edit_controller(self, listing: Optional[ListViewController] = None) -> EditController:
        return EditController(
            self.form,
            fetch=self.get_profile,
            update=self.update_details,
            toggle=self.set_status,
            notifier=self.notifier,
            on_success=listing.refresh if listing else None,
            actor=self.actor
        )
