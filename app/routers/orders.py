# app/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.core.midtrans_client import MidtransClient, get_midtrans_client
from app.database import get_session
from app.models.order import OrderStatus
from app.repositories.catalog_repo import CatalogRepository
from app.repositories.order_repo import OrderRepository
from app.schemas.order import (
    CheckoutRead,
    OfflineOrderCreate,
    OrderCreate,
    OrderRead,
    OrderUpdate,
)
from app.schemas.payment import ManualPaymentCreate, PaymentRead
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
catalog_repo = CatalogRepository()
service = OrderService(order_repo, catalog_repo)


# -------- Public endpoint --------


@router.post(
    "",
    response_model=CheckoutRead,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    gateway: MidtransClient = Depends(get_midtrans_client),
):
    """
    Public order form.

    Creates a PENDING online order priced from the catalog and returns the
    Snap token / redirect URL for paying the down payment.
    """
    return service.create_online_order(session, payload, gateway)


# -------- Admin endpoints --------


@router.post(
    "/offline",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_offline_order(
    payload: OfflineOrderCreate,
    session: Session = Depends(get_session),
):
    """
    Record a walk-in / WhatsApp booking (no gateway checkout).
    """
    return service.create_offline_order(session, payload)


@router.get(
    "",
    response_model=list[OrderRead],
    dependencies=[Depends(require_admin)],
)
def list_orders(
    session: Session = Depends(get_session),
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
):
    """
    List orders (admin only). Optional ?status= filter for kanban columns.
    """
    return service.list_orders(session, status=status_filter, skip=skip, limit=limit)


@router.get(
    "/{order_id}",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_order(session, order_id)


@router.patch(
    "/{order_id}",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order(
    order_id: uuid.UUID,
    payload: OrderUpdate,
    session: Session = Depends(get_session),
):
    """
    Admin edit (admin only).

    `status` may jump forward or go to CANCELLED; moving backwards or out
    of DONE/CANCELLED is rejected.
    """
    return service.update_order(session, order_id, payload)


@router.post(
    "/{order_id}/advance",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def advance_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Move the order to the next fulfillment stage (admin only).
    """
    return service.advance_order(session, order_id)


@router.post(
    "/{order_id}/cancel",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def cancel_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.cancel_order(session, order_id)


@router.get(
    "/{order_id}/payments",
    response_model=list[PaymentRead],
    dependencies=[Depends(require_admin)],
)
def list_order_payments(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.list_payments(session, order_id)


@router.post(
    "/{order_id}/payments",
    response_model=PaymentRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def record_order_payment(
    order_id: uuid.UUID,
    payload: ManualPaymentCreate,
    session: Session = Depends(get_session),
):
    """
    Record a settled manual payment (cash / bank transfer).
    """
    return service.record_manual_payment(session, order_id, payload)
