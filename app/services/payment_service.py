# app/services/payment_service.py
import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from sqlmodel import Session

from app.core.errors import NotFound, SignatureVerificationFailed, ValidationError
from app.core.midtrans_client import parse_gateway_order_id, verify_signature
from app.core.timeutils import display_tz
from app.models.order import Payment, PaymentStatus, PaymentType
from app.repositories.order_repo import OrderRepository
from app.schemas.payment import MidtransNotification, NotificationAck
from app.services.order_service import PAID_STATUSES

logger = logging.getLogger(__name__)

PROVIDER = "midtrans"


def _parse_gross_amount(raw: str) -> int:
    try:
        return int(Decimal(raw))
    except (InvalidOperation, ValueError):
        raise ValidationError("Invalid gross_amount", field="gross_amount")


def _parse_status(notification: MidtransNotification) -> PaymentStatus:
    """
    Map transaction_status (+ fraud_status for card captures).

    A capture flagged "challenge" by fraud detection is not money yet.
    """
    try:
        status = PaymentStatus(notification.transaction_status or "")
    except ValueError:
        raise ValidationError("Unknown transaction_status", field="transaction_status")

    if status == PaymentStatus.CAPTURE and notification.fraud_status == "challenge":
        return PaymentStatus.PENDING
    return status


def _parse_settlement_time(raw: str | None) -> datetime:
    """
    Midtrans sends "YYYY-MM-DD HH:MM:SS" in merchant local time (WIB).
    """
    if raw:
        try:
            local = datetime.strptime(raw, "%Y-%m-%d %H:%M:%S")
            return local.replace(tzinfo=display_tz()).astimezone(timezone.utc)
        except ValueError:
            logger.warning(f"Unparseable settlement_time {raw!r}; using now")
    return datetime.now(timezone.utc)


class PaymentService:
    """
    Handles Midtrans HTTP notifications.

    Delivery is at-least-once, so processing is idempotent:
      - keyed by (provider, transaction_id) when Midtrans sends one
      - otherwise by (order, status_code, gross_amount)
    A redelivered notification updates the same Payment row; an unchanged
    one is a no-op. Payment status never moves the fulfillment stage.
    """

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    def handle_notification(
        self,
        session: Session,
        notification: MidtransNotification,
        server_key: str,
    ) -> NotificationAck:
        """
        Steps:
          1. Verify signature (reject without writing anything).
          2. Resolve our order from the gateway order_id.
          3. Upsert the Payment row and mirror its status on the order.
          4. Commit.
        """
        if not verify_signature(
            notification.order_id,
            notification.status_code,
            notification.gross_amount,
            server_key,
            notification.signature_key,
        ):
            logger.warning(
                f"Rejected Midtrans notification with invalid signature "
                f"(order_id={notification.order_id!r})"
            )
            raise SignatureVerificationFailed("Invalid notification signature")

        order_id = parse_gateway_order_id(notification.order_id or "")
        if order_id is None:
            raise NotFound("Order not found")

        order = self.order_repo.get_for_update(session, order_id)
        if not order:
            raise NotFound("Order not found")

        status = _parse_status(notification)
        gross_amount = _parse_gross_amount(notification.gross_amount or "")
        status_code = notification.status_code or ""

        if notification.transaction_id:
            payment = self.order_repo.get_payment_by_transaction(
                session, PROVIDER, notification.transaction_id
            )
        else:
            payment = self.order_repo.find_untracked_payment(
                session, order.id, PROVIDER, status_code, gross_amount
            )

        if payment is not None and payment.status == status:
            logger.info(f"Duplicate Midtrans notification for order {order.id} ignored")
            return NotificationAck(status="duplicate", payment_id=payment.id)

        # late "pending" delivered after the settlement
        if (
            payment is not None
            and payment.status in PAID_STATUSES
            and status == PaymentStatus.PENDING
        ):
            logger.info(f"Stale pending notification for order {order.id} ignored")
            return NotificationAck(status="stale", payment_id=payment.id)

        now = datetime.now(timezone.utc)
        if payment is None:
            payment = Payment(
                order_id=order.id,
                provider=PROVIDER,
                type=(
                    PaymentType.FULL_PAYMENT
                    if gross_amount >= order.total_price
                    else PaymentType.DOWN_PAYMENT
                ),
                gross_amount=gross_amount,
                external_transaction_id=notification.transaction_id,
                method=notification.payment_type,
            )

        payment.status = status
        payment.status_code = status_code
        payment.updated_at = now
        if status in PAID_STATUSES and payment.paid_at is None:
            payment.paid_at = _parse_settlement_time(notification.settlement_time)

        payment = self.order_repo.save_payment(session, payment)

        order.payment_status = status
        order.updated_at = now
        self.order_repo.update_order(session, order)

        session.commit()
        logger.info(f"Order {order.id} payment status -> {status.value}")
        return NotificationAck(status="ok", payment_id=payment.id)
