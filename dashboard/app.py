"""Admin Console Service - FastAPI Application"""

import logging
from typing import Any, AsyncIterator, Callable, Dict, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from admin_console import __version__
from admin_console.api_client import AdminApiClient
from admin_console.config import get_config
from admin_console.errors import SessionExpiredError
from admin_console.forms import SubmitOutcome, SubmitResult
from admin_console.listing import ListViewController
from admin_console.notifications import InAppNotifier
from admin_console.resources import (
    ROLES,
    ActivityLogService,
    BankService,
    LimitService,
    PartnerService,
    WalletService,
    activity_stats,
    service_label,
)
from admin_console.resources.activity import CATEGORIES, RISK_LEVELS, STATUSES
from admin_console.resources.limits import format_date
from admin_console.schemas import CreateLimitBody, PartnerEditBody, StatusFlagBody, TopUpBody
from admin_console.session import SessionProvider, StaticSessionProvider

logger = logging.getLogger("admin_console.dashboard")

ClientFactory = Callable[[SessionProvider], AdminApiClient]

STATUS_BY_OUTCOME = {
    SubmitOutcome.INVALID: 422,
    SubmitOutcome.REJECTED: 409,
    SubmitOutcome.FAILED: 502,
}


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Token from an `Authorization: Bearer ...` header"""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def default_client_factory(session: SessionProvider) -> AdminApiClient:
    config = get_config()
    return AdminApiClient(config.api_base_url, session, timeout=config.api_timeout)


def result_response(result: SubmitResult, notifier: InAppNotifier) -> JSONResponse:
    """Map a submit result onto an HTTP response"""
    body = result.to_dict()
    body["notices"] = [n.to_dict() for n in notifier.drain()]
    return JSONResponse(status_code=STATUS_BY_OUTCOME.get(result.outcome, 200), content=body)


def create_app(client_factory: Optional[ClientFactory] = None) -> FastAPI:
    """Create and configure the FastAPI application"""

    config = get_config()
    factory = client_factory or default_client_factory
    logger.info(f"Console service proxying {config.api_base_url}")

    app = FastAPI(
        title="Admin Console Service",
        description="List, edit and status endpoints over the platform admin backend",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SessionExpiredError)
    async def session_expired_handler(request: Request, exc: SessionExpiredError):
        return JSONResponse(status_code=401, content={"detail": exc.message})

    async def get_client(authorization: Optional[str] = Header(None)) -> AsyncIterator[AdminApiClient]:
        client = factory(StaticSessionProvider(bearer_token(authorization)))
        try:
            yield client
        finally:
            await client.close()

    def get_notifier() -> InAppNotifier:
        return InAppNotifier()

    def check_page_size(page_size: int) -> None:
        if page_size not in config.page_size_options:
            raise HTTPException(status_code=422, detail=f"Page size must be one of {config.page_size_options}")

    async def load_or_fail(listing: ListViewController) -> None:
        if not await listing.load():
            raise HTTPException(status_code=502, detail=listing.last_error or f"Failed to fetch {listing.name}")

    def page_body(listing: ListViewController, page: int, notifier: InAppNotifier) -> Dict[str, Any]:
        listing.go_to_page(page)
        body = listing.current_page().to_dict()
        body["page_numbers"] = listing.page_numbers(config.page_window)
        body["notices"] = [n.to_dict() for n in notifier.drain()]
        return body

    def partner_service(role: str, client: AdminApiClient, notifier: InAppNotifier) -> PartnerService:
        if role not in ROLES:
            raise HTTPException(status_code=404, detail=f"Unknown partner role: {role}")
        return PartnerService(client, ROLES[role], notifier)

    # API Routes

    @app.get("/health")
    async def health():
        """Liveness check"""
        return {"status": "healthy", "version": __version__}

    @app.get("/api/banks")
    async def list_banks(
        search: str = "",
        page: int = Query(1, ge=1),
        page_size: int = Query(config.default_page_size, ge=1),
        client: AdminApiClient = Depends(get_client),
        notifier: InAppNotifier = Depends(get_notifier)
    ):
        """Search and paginate the bank master list"""
        check_page_size(page_size)
        listing = BankService(client, notifier).list_controller(page_size)
        await load_or_fail(listing)
        listing.set_search(search)
        return page_body(listing, page, notifier)

    @app.get("/api/activity-logs")
    async def list_activity_logs(
        search: str = "",
        category: Optional[str] = None,
        status: Optional[str] = None,
        risk_level: Optional[str] = None,
        page: int = Query(1, ge=1),
        page_size: int = Query(config.default_page_size, ge=1),
        client: AdminApiClient = Depends(get_client),
        notifier: InAppNotifier = Depends(get_notifier)
    ):
        """Filtered activity feed plus headline stats over the whole feed"""
        check_page_size(page_size)
        listing = ActivityLogService(client, notifier).list_controller(page_size)
        await load_or_fail(listing)
        listing.set_search(search)
        listing.set_filter("category", category)
        listing.set_filter("status", status)
        listing.set_filter("risk_level", risk_level)

        body = page_body(listing, page, notifier)
        body["stats"] = activity_stats(listing.items)
        body["filter_options"] = {
            "category": list(CATEGORIES),
            "status": list(STATUSES),
            "risk_level": list(RISK_LEVELS),
        }
        return body

    @app.get("/api/retailers/{retailer_id}/limits")
    async def list_limits(
        retailer_id: str,
        client: AdminApiClient = Depends(get_client),
        notifier: InAppNotifier = Depends(get_notifier)
    ):
        """Transaction limits of one retailer"""
        listing = LimitService(client, retailer_id, notifier).list_controller()
        await load_or_fail(listing)
        limits = [
            dict(
                limit,
                service_label=service_label(limit.get("service", "")),
                created_date=format_date(limit.get("created_at")),
                updated_date=format_date(limit.get("updated_at"))
            )
            for limit in listing.items
        ]
        return {"limits": limits, "total": len(limits)}

    @app.post("/api/retailers/{retailer_id}/limits")
    async def create_limit(
        retailer_id: str,
        body: CreateLimitBody,
        client: AdminApiClient = Depends(get_client),
        notifier: InAppNotifier = Depends(get_notifier)
    ):
        """Create a limit; refused with 409 when the service already has one"""
        service = LimitService(client, retailer_id, notifier)
        listing = service.list_controller()
        await load_or_fail(listing)

        form = service.create_controller(listing)
        form.update(body.dict())
        return result_response(await form.submit(), notifier)

    @app.patch("/api/partners/{role}/{partner_id}")
    async def edit_partner(
        role: str,
        partner_id: str,
        body: PartnerEditBody,
        client: AdminApiClient = Depends(get_client),
        notifier: InAppNotifier = Depends(get_notifier)
    ):
        """Apply changes to a partner profile; only changed fields are sent"""
        service = partner_service(role, client, notifier)
        editor = service.edit_controller()
        if not await editor.open(partner_id):
            notice = notifier.latest()
            raise HTTPException(status_code=502, detail=notice.message if notice else "Failed to load profile")

        try:
            editor.update(body.changes)
        except KeyError as e:
            raise HTTPException(status_code=422, detail=str(e.args[0]))
        return result_response(await editor.submit(), notifier)

    async def set_partner_status(role: str, partner_id: str, toggle: str, value: bool,
                                 client: AdminApiClient, notifier: InAppNotifier) -> Dict[str, Any]:
        service = partner_service(role, client, notifier)
        editor = service.edit_controller()
        if not await editor.open(partner_id):
            notice = notifier.latest()
            raise HTTPException(status_code=502, detail=notice.message if notice else "Failed to load profile")

        if not await editor.toggle(toggle, value):
            raise HTTPException(status_code=502, detail=notifier.latest().message)

        field_name = editor.schema.get_toggle(toggle).field
        return {
            "ok": True,
            field_name: editor.draft[field_name],
            "notices": [n.to_dict() for n in notifier.drain()]
        }

    @app.put("/api/partners/{role}/{partner_id}/block")
    async def set_block_status(
        role: str,
        partner_id: str,
        body: StatusFlagBody,
        client: AdminApiClient = Depends(get_client),
        notifier: InAppNotifier = Depends(get_notifier)
    ):
        """Block or unblock a partner"""
        return await set_partner_status(role, partner_id, "block", body.value, client, notifier)

    @app.put("/api/partners/{role}/{partner_id}/kyc")
    async def set_kyc_status(
        role: str,
        partner_id: str,
        body: StatusFlagBody,
        client: AdminApiClient = Depends(get_client),
        notifier: InAppNotifier = Depends(get_notifier)
    ):
        """Mark a partner's KYC verified or pending"""
        return await set_partner_status(role, partner_id, "kyc", body.value, client, notifier)

    @app.post("/api/wallet/topup")
    async def wallet_topup(
        body: TopUpBody,
        client: AdminApiClient = Depends(get_client),
        notifier: InAppNotifier = Depends(get_notifier)
    ):
        """Top up the signed-in admin's wallet"""
        result = await WalletService(client, notifier).top_up(body.amount)
        return result_response(result, notifier)

    return app
