"""
Entity wiring: each service binds the generic list and form controllers to
one backend resource.
"""

from .activity import ActivityLogService, activity_stats
from .banks import AdminBankService, BankService
from .limits import LimitService, service_label
from .partners import ROLES, PartnerRole, PartnerService
from .wallet import WalletService

__all__ = [
    "ActivityLogService",
    "AdminBankService",
    "BankService",
    "LimitService",
    "PartnerRole",
    "PartnerService",
    "ROLES",
    "WalletService",
    "activity_stats",
    "service_label",
]
