"""
FastAPI application for the invoice dashboard.

Endpoints:
- GET  /health                              - Health check
- POST /login                               - Sign in (form: email, password)
- POST /dashboard/logout                    - Sign out
- GET  /dashboard                           - Revenue, latest invoices, cards
- GET  /dashboard/invoices                  - Search + paginate invoices
- GET  /dashboard/invoices/create           - Customer options for the form
- POST /dashboard/invoices                  - Create invoice (form)
- GET  /dashboard/invoices/{id}             - Invoice details
- GET  /dashboard/invoices/{id}/edit        - Invoice + customer options
- POST /dashboard/invoices/{id}/edit        - Update invoice (form)
- POST /dashboard/invoices/{id}/delete      - Delete invoice
- GET  /dashboard/customers                 - Customers with invoice totals

Everything under /dashboard requires a session.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel
from starlette.middleware.sessions import SessionMiddleware

from auth.gate import DASHBOARD_PATH, LOGIN_PATH, authorize_request
from auth.provider import CredentialsProvider, current_user
from dashboard import actions, data
from dashboard.actions import ActionResult, InvoiceFormState, Redirect
from dashboard.models import (
    CardData,
    CustomerField,
    CustomersTableRow,
    EditInvoicePage,
    InvoiceForm,
    InvoicesTableRow,
    LatestInvoice,
    PageLink,
    Revenue,
)
from dashboard.revalidation import PathRevalidator
from dashboard.search_params import set_params
from dashboard.store import DashboardStore
from dashboard.utils import generate_pagination, generate_y_axis
from database import DatabaseDashboardStore, init_db, seed_if_empty
from server.config import Settings, get_settings
from server.error_handlers import register_error_handlers

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# ============================================================================
# Response Models
# ============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    invoices_count: int


class RevenueChart(BaseModel):
    """Revenue rows plus y-axis labels for the chart."""

    rows: list[Revenue]
    y_axis_labels: list[str]
    top_label: int


class DashboardResponse(BaseModel):
    """Overview page."""

    revenue: RevenueChart
    latest_invoices: list[LatestInvoice]
    cards: CardData


class InvoicesPageResponse(BaseModel):
    """Invoices table page."""

    query: str
    current_page: int
    total_pages: int
    invoices: list[InvoicesTableRow]
    pagination: list[PageLink]


class CreateInvoicePageResponse(BaseModel):
    """Options for the create invoice form."""

    customers: list[CustomerField]


class LoginFailedResponse(BaseModel):
    """Login form error."""

    message: str


# ============================================================================
# Application State
# ============================================================================


class AppState:
    """Application state container."""

    def __init__(self, settings: Settings, store: DashboardStore):
        self.settings = settings
        self.store = store

        # Paths marked stale after writes
        self.revalidator = PathRevalidator()

        # Credentials check against the users table
        self.credentials = CredentialsProvider(store)


def get_state(request: Request) -> AppState:
    """Dependency returning the running app's state."""
    state: Optional[AppState] = getattr(request.app.state, "dashboard", None)
    if state is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return state


# ============================================================================
# Lifespan
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: Settings = app.state.settings

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info("Starting Invoice Dashboard Server...")

    engine = None
    store: Optional[DashboardStore] = app.state.injected_store
    if store is None:
        engine = init_db(settings.database_url)
        if settings.seed_on_startup:
            seed_if_empty(engine)
        store = DatabaseDashboardStore(engine)

    app.state.dashboard = AppState(settings, store)

    logger.info(f"Server ready on {settings.host}:{settings.port}")
    logger.info(f"Store: {type(store).__name__}")

    yield

    # Cleanup
    logger.info("Shutting down...")
    app.state.dashboard = None
    if engine is not None:
        engine.dispose()


# ============================================================================
# Application Factory
# ============================================================================


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DashboardStore] = None,
) -> FastAPI:
    """
    Create FastAPI application.

    Args:
        settings: Settings to use. Loaded from the environment if omitted.
        store: Store to use. A database store is built from
            ``settings.database_url`` on startup if omitted.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Acme Invoice Dashboard",
        description="Invoices, customers and revenue for the Acme admin dashboard",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.injected_store = store
    app.state.dashboard = None

    # Gate runs inside the session middleware, which must be added last
    app.middleware("http")(gate_middleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.auth_secret,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.session_https_only,
    )

    register_error_handlers(app)

    # Register routes
    app.add_api_route("/health", health_check, methods=["GET"])
    app.add_api_route("/login", login, methods=["POST"])
    app.add_api_route("/dashboard/logout", logout, methods=["POST"])
    app.add_api_route("/dashboard", dashboard_overview, methods=["GET"])
    app.add_api_route("/dashboard/invoices", list_invoices, methods=["GET"])
    app.add_api_route("/dashboard/invoices", create_invoice, methods=["POST"])
    app.add_api_route("/dashboard/invoices/create", create_invoice_page, methods=["GET"])
    app.add_api_route("/dashboard/invoices/{invoice_id}", get_invoice, methods=["GET"])
    app.add_api_route("/dashboard/invoices/{invoice_id}/edit", edit_invoice_page, methods=["GET"])
    app.add_api_route("/dashboard/invoices/{invoice_id}/edit", update_invoice, methods=["POST"])
    app.add_api_route("/dashboard/invoices/{invoice_id}/delete", delete_invoice, methods=["POST"])
    app.add_api_route("/dashboard/customers", list_customers, methods=["GET"])

    return app


async def gate_middleware(request: Request, call_next):
    """Send anonymous users to the login page and signed-in users to the dashboard."""
    is_logged_in = current_user(request.session) is not None
    decision = authorize_request(is_logged_in, request.url.path)

    if not decision.allowed:
        logger.debug(f"Gate redirect {request.url.path} -> {decision.redirect_to}")
        return RedirectResponse(decision.redirect_to, status_code=303)

    return await call_next(request)


# ============================================================================
# Auth Endpoints
# ============================================================================


async def login(
    request: Request,
    state: AppState = Depends(get_state),
) -> Response:
    """Sign in with a form containing email and password."""
    form = await request.form()

    message = await asyncio.to_thread(
        actions.authenticate, state.credentials, dict(form), request.session
    )
    if message:
        return JSONResponse(
            status_code=401,
            content=LoginFailedResponse(message=message).model_dump(),
        )

    return RedirectResponse(DASHBOARD_PATH, status_code=303)


async def logout(
    request: Request,
    state: AppState = Depends(get_state),
) -> RedirectResponse:
    """Sign out."""
    state.credentials.sign_out(request.session)
    return RedirectResponse(LOGIN_PATH, status_code=303)


# ============================================================================
# Read Endpoints
# ============================================================================


async def health_check(state: AppState = Depends(get_state)) -> HealthResponse:
    """Health check endpoint."""
    count = await asyncio.to_thread(state.store.count_invoices)
    return HealthResponse(status="healthy", version=VERSION, invoices_count=count)


async def dashboard_overview(state: AppState = Depends(get_state)) -> DashboardResponse:
    """Revenue chart, latest invoices and summary cards."""
    revenue, latest, cards = await asyncio.gather(
        data.fetch_revenue(state.store),
        data.fetch_latest_invoices(state.store),
        data.fetch_card_data(state.store),
    )
    labels, top_label = generate_y_axis(revenue)

    return DashboardResponse(
        revenue=RevenueChart(rows=revenue, y_axis_labels=labels, top_label=top_label),
        latest_invoices=latest,
        cards=cards,
    )


async def list_invoices(
    request: Request,
    query: str = "",
    page: int = 1,
    state: AppState = Depends(get_state),
) -> InvoicesPageResponse:
    """Invoices matching ``query``, one page at a time."""
    current_page = max(page, 1)
    invoices, total_pages = await asyncio.gather(
        data.fetch_filtered_invoices(state.store, query, current_page),
        data.fetch_invoices_pages(state.store, query),
    )

    return InvoicesPageResponse(
        query=query,
        current_page=current_page,
        total_pages=total_pages,
        invoices=invoices,
        pagination=build_page_links(request, current_page, total_pages),
    )


async def create_invoice_page(state: AppState = Depends(get_state)) -> CreateInvoicePageResponse:
    """Customer options for the create form."""
    return CreateInvoicePageResponse(customers=await data.fetch_customers(state.store))


async def get_invoice(invoice_id: str, state: AppState = Depends(get_state)) -> InvoiceForm:
    """Get a specific invoice."""
    invoice = await data.fetch_invoice_by_id(state.store, invoice_id)
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


async def edit_invoice_page(invoice_id: str, state: AppState = Depends(get_state)) -> EditInvoicePage:
    """Invoice and customer options for the edit form."""
    page = await data.fetch_edit_invoice_page(state.store, invoice_id)
    if page is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return page


async def list_customers(
    query: str = "",
    state: AppState = Depends(get_state),
) -> list[CustomersTableRow]:
    """Customers with invoice totals."""
    return await data.fetch_filtered_customers(state.store, query)


# ============================================================================
# Mutation Endpoints
# ============================================================================


async def create_invoice(
    request: Request,
    state: AppState = Depends(get_state),
) -> Response:
    """Create an invoice from form fields customerId, amount, status."""
    form = await request.form()
    result = await asyncio.to_thread(
        actions.create_invoice, state.store, state.revalidator, dict(form)
    )
    return action_response(result)


async def update_invoice(
    invoice_id: str,
    request: Request,
    state: AppState = Depends(get_state),
) -> Response:
    """Update an invoice from form fields customerId, amount, status."""
    form = await request.form()
    result = await asyncio.to_thread(
        actions.update_invoice, state.store, state.revalidator, invoice_id, dict(form)
    )
    return action_response(result)


async def delete_invoice(
    invoice_id: str,
    state: AppState = Depends(get_state),
) -> RedirectResponse:
    """Delete an invoice and go back to the list."""
    await asyncio.to_thread(
        actions.delete_invoice, state.store, state.revalidator, invoice_id
    )
    return RedirectResponse(actions.INVOICES_PATH, status_code=303)


# ============================================================================
# Helpers
# ============================================================================


def action_response(result: ActionResult) -> Response:
    """Turn an action result into a redirect or a 422 with the form state."""
    if isinstance(result, Redirect):
        return RedirectResponse(result.location, status_code=303)

    if isinstance(result, InvoiceFormState):
        return JSONResponse(status_code=422, content=result.model_dump())

    raise TypeError(f"Unexpected action result: {type(result).__name__}")


def build_page_links(request: Request, current_page: int, total_pages: int) -> list[PageLink]:
    """Pagination bar entries, keeping the current query string."""
    links = []
    for item in generate_pagination(current_page, total_pages):
        if isinstance(item, int):
            query_string = set_params(request.url.query, {"page": item})
            links.append(
                PageLink(
                    label=str(item),
                    page=item,
                    href=f"{request.url.path}?{query_string}",
                    active=item == current_page,
                )
            )
        else:
            links.append(PageLink(label=item))
    return links


# ============================================================================
# App Instance
# ============================================================================


app = create_app()
