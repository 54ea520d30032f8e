"""
Pydantic schemas for the payloads the console sends to the backend and
for the console service's request bodies
"""

from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, Field


RecordId = Union[int, str]


# Bank schemas
class CreateBankRequest(BaseModel):
    bank_name: str
    ifsc_code: str


class UpdateBankRequest(BaseModel):
    bank_id: RecordId
    bank_name: Optional[str] = None
    ifsc_code: Optional[str] = None


class CreateAdminBankRequest(BaseModel):
    admin_id: str
    bank_name: str
    account_number: str
    ifsc_code: str


class UpdateAdminBankRequest(BaseModel):
    admin_bank_id: RecordId
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    ifsc_code: Optional[str] = None


# Transaction limit schemas
class CreateLimitRequest(BaseModel):
    retailer_id: str
    limit_amount: float = Field(..., description="Limit amount in rupees")
    service: str = Field(..., description="Service code (PAYOUT, ...)")


class UpdateLimitRequest(BaseModel):
    limit_id: RecordId
    limit_amount: Optional[float] = None
    service: Optional[str] = None


# Wallet schemas
class WalletTopUpRequest(BaseModel):
    admin_id: str
    amount: float


# Console service request bodies
class PartnerEditBody(BaseModel):
    changes: Dict[str, Any] = Field(..., description="Field name to new value")


class StatusFlagBody(BaseModel):
    value: bool


class CreateLimitBody(BaseModel):
    limit_amount: Union[float, str]
    service: str = "PAYOUT"


class TopUpBody(BaseModel):
    amount: Union[float, str]
