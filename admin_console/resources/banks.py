"""
Bank Resources

The platform's bank master list (`/bank/...`) and the admin's own settlement
bank accounts (`/bank/.../admin`).
"""

from typing import Any, Dict, List, Optional

from ..forms import CreateController, EditController, FieldSpec, FormSchema
from ..listing import ListViewController
from ..schemas import (
    CreateAdminBankRequest,
    CreateBankRequest,
    UpdateAdminBankRequest,
    UpdateBankRequest,
)
from ..validators import account_number, required, routing_code
from .base import ResourceService, find_record, numeric_id


BANK_SEARCH_FIELDS = ("bank_name", "ifsc_code")
ADMIN_BANK_SEARCH_FIELDS = ("bank_name", "account_number", "ifsc_code")

BANK_FORM = FormSchema(
    label="Bank",
    id_field="bank_id",
    fields=[
        FieldSpec("bank_name", validators=[required("Bank name")]),
        FieldSpec("ifsc_code", validators=[required("IFSC code"), routing_code()]),
    ]
)

ADMIN_BANK_FORM = FormSchema(
    label="Bank account",
    id_field="admin_bank_id",
    fields=[
        FieldSpec("bank_name", validators=[required("Bank name")]),
        FieldSpec("account_number", validators=[required("Account number"), account_number()]),
        FieldSpec("ifsc_code", validators=[required("IFSC code"), routing_code()]),
    ]
)


class BankService(ResourceService):
    """Bank master list: list, create, edit, delete"""

    resource = "bank"
    label = "Bank"

    async def list_banks(self) -> List[Dict[str, Any]]:
        return await self.client.get_all(self.resource, key="bank")

    async def get_bank(self, bank_id: Any) -> Optional[Dict[str, Any]]:
        return find_record(await self.list_banks(), "bank_id", bank_id)

    async def create_bank(self, payload: Dict[str, Any]) -> Any:
        body = CreateBankRequest(**payload).dict()
        return await self.client.create(self.resource, body)

    async def update_bank(self, payload: Dict[str, Any]) -> Any:
        payload = dict(payload, bank_id=numeric_id(payload["bank_id"]))
        body = UpdateBankRequest(**payload).dict(exclude_unset=True)
        return await self.client.update(self.resource, body)

    async def delete_bank(self, bank_id: Any, listing: Optional[ListViewController] = None) -> bool:
        return await self._delete(bank_id, on_success=listing.refresh if listing else None)

    def list_controller(self, page_size: int = 10) -> ListViewController:
        return ListViewController(
            fetch=self.list_banks,
            search_fields=BANK_SEARCH_FIELDS,
            page_size=page_size,
            notifier=self.notifier,
            name="banks"
        )

    def create_controller(self, listing: Optional[ListViewController] = None) -> CreateController:
        return CreateController(
            BANK_FORM,
            create=self.create_bank,
            notifier=self.notifier,
            on_success=listing.refresh if listing else None,
            actor=self.actor
        )

    def edit_controller(self, listing: Optional[ListViewController] = None) -> EditController:
        return EditController(
            BANK_FORM,
            fetch=self.get_bank,
            update=self.update_bank,
            notifier=self.notifier,
            on_success=listing.refresh if listing else None,
            actor=self.actor
        )


class AdminBankService(ResourceService):
    """Bank accounts owned by the signed-in admin"""

    resource = "bank"
    label = "Bank account"

    def _admin_id(self) -> str:
        return self.client.session.require_identity().id

    async def list_accounts(self) -> List[Dict[str, Any]]:
        return await self.client.get_all(self.resource, "admin", self._admin_id(), key="admin_bank")

    async def get_account(self, admin_bank_id: Any) -> Optional[Dict[str, Any]]:
        return find_record(await self.list_accounts(), "admin_bank_id", admin_bank_id)

    async def create_account(self, payload: Dict[str, Any]) -> Any:
        body = CreateAdminBankRequest(admin_id=self._admin_id(), **payload).dict()
        return await self.client.create(self.resource, body, "admin")

    async def update_account(self, payload: Dict[str, Any]) -> Any:
        payload = dict(payload, admin_bank_id=numeric_id(payload["admin_bank_id"]))
        body = UpdateAdminBankRequest(**payload).dict(exclude_unset=True)
        return await self.client.update(self.resource, body, "admin")

    async def delete_account(self, admin_bank_id: Any, listing: Optional[ListViewController] = None) -> bool:
        return await self._delete(admin_bank_id, "admin", on_success=listing.refresh if listing else None)

    def list_controller(self, page_size: int = 10) -> ListViewController:
        return ListViewController(
            fetch=self.list_accounts,
            search_fields=ADMIN_BANK_SEARCH_FIELDS,
            page_size=page_size,
            notifier=self.notifier,
            name="bank accounts"
        )

    def create_controller(self, listing: Optional[ListViewController] = None) -> CreateController:
        return CreateController(
            ADMIN_BANK_FORM,
            create=self.create_account,
            notifier=self.notifier,
            on_success=listing.refresh if listing else None,
            actor=self.actor
        )

    def edit_controller(self, listing: Optional[ListViewController] = None) -> EditController:
        return EditController(
            ADMIN_BANK_FORM,
            fetch=self.get_account,
            update=self.update_account,
            notifier=self.notifier,
            on_success=listing.refresh if listing else None,
            actor=self.actor
        )
