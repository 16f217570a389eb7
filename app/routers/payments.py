# app/routers/payments.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.config import get_settings
from app.database import get_session
from app.repositories.order_repo import OrderRepository
from app.schemas.payment import MidtransNotification, NotificationAck
from app.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])

order_repo = OrderRepository()
service = PaymentService(order_repo)


@router.post("/notification", response_model=NotificationAck)
def payment_notification(
    payload: MidtransNotification,
    session: Session = Depends(get_session),
):
    """
    Midtrans HTTP notification endpoint (called by the gateway, no auth).

    - 200 once the notification is verified and recorded (or was already).
    - 403 when the signature does not match; nothing is written.
    """
    return service.handle_notification(
        session,
        payload,
        server_key=get_settings().MIDTRANS_SERVER_KEY,
    )
