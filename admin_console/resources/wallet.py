"""
Wallet Top-Up

Credits the signed-in admin's wallet. The admin id comes from the session; a
missing or expired session stops the top-up before any request is made.
"""

import re
from typing import Any, Optional

from ..config import get_config
from ..forms import CreateController, FieldSpec, FormSchema, Record, SubmitResult
from ..schemas import WalletTopUpRequest
from ..validators import max_amount, positive_amount
from .base import ResourceService


def sanitize_amount(value: Any) -> str:
    """Keep only digits and dots, as typed into the amount box"""
    if value is None:
        return ""
    return re.sub(r"[^\d.]", "", str(value))


def topup_form(limit: Optional[str] = None) -> FormSchema:
    limit = limit or get_config().max_topup_amount
    return FormSchema(
        label="Wallet top-up",
        id_field="admin_id",
        fields=[
            FieldSpec(
                "amount",
                coerce=sanitize_amount,
                validators=[
                    positive_amount(message="Please enter a valid amount greater than 0."),
                    max_amount(limit, message="Maximum top-up amount is ₹1,00,00,000."),
                ]
            ),
        ]
    )


class WalletService(ResourceService):
    resource = "admin"
    label = "Wallet"

    def topup_controller(self, limit: Optional[str] = None) -> CreateController:
        identity = self.client.session.require_identity()

        def build_payload(draft: Record) -> Record:
            return WalletTopUpRequest(admin_id=identity.id, amount=float(draft["amount"])).dict()

        async def send(payload: Record) -> Any:
            return await self.client.update(self.resource, payload, "wallet")

        return CreateController(
            topup_form(limit),
            create=send,
            build_payload=build_payload,
            notifier=self.notifier,
            actor=identity.id,
            success_message="Wallet topped up successfully."
        )

    async def top_up(self, amount: Any) -> SubmitResult:
        """Validate and send one top-up

        Raises:
            SessionExpiredError: no usable session; nothing is sent
        """
        controller = self.topup_controller()
        controller.change("amount", amount)
        return await controller.submit()
