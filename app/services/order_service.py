# app/services/order_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from app.core.config import get_settings
from app.core.errors import NotFound, ValidationError
from app.core.midtrans_client import (
    MAX_ITEM_NAME_LENGTH,
    MidtransClient,
    gateway_order_id,
)
from app.models.catalog import Category, PriceTier
from app.models.order import (
    Order,
    OrderChannel,
    OrderStatus,
    Payment,
    PaymentStatus,
)
from app.repositories.catalog_repo import CatalogRepository
from app.repositories.order_repo import OrderRepository
from app.schemas.order import (
    CheckoutRead,
    OfflineOrderCreate,
    OrderCreate,
    OrderRead,
    OrderUpdate,
)
from app.schemas.payment import ManualPaymentCreate
from app.services.order_lifecycle import advance_stage, set_stage
from app.services.pricing_service import resolve_price

logger = logging.getLogger(__name__)

# Payment statuses that mean money was received
PAID_STATUSES = frozenset({PaymentStatus.CAPTURE, PaymentStatus.SETTLEMENT})


def amount_due_now(order: Order) -> int:
    """
    What the public checkout charges: the down payment, or the full price
    when the order carries no down payment.
    """
    return order.dp_amount if order.dp_amount > 0 else order.total_price


def build_checkout_params(
    order: Order,
    category: Category,
    tier: PriceTier | None,
    amount: int,
) -> dict:
    """
    Snap transaction request for an order. Depends only on its arguments.

    Midtrans requires sum(item price * quantity) == gross_amount.
    """
    package = category.name if tier is None else f"{category.name} - {tier.name}"
    if amount == order.total_price:
        label = f"Full payment {package}"
    else:
        label = f"DP {order.dp_percent}% {package}"

    return {
        "transaction_details": {
            "order_id": gateway_order_id(order.id),
            "gross_amount": amount,
        },
        "customer_details": {
            "first_name": order.customer_name,
            "email": order.email,
            "phone": order.phone,
        },
        "item_details": [
            {
                "id": str(tier.id if tier else category.id),
                "price": amount,
                "quantity": 1,
                "name": label[:MAX_ITEM_NAME_LENGTH],
            }
        ],
    }


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Price new orders from the catalog (total + down payment)
      - Open a Snap checkout for online orders
      - Drive the fulfillment stage machine (admin)
      - Record manual payments (admin)
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        catalog_repo: CatalogRepository,
    ):
        self.order_repo = order_repo
        self.catalog_repo = catalog_repo

    # -------- Helpers --------

    def _load_catalog(
        self,
        session: Session,
        category_id: uuid.UUID,
        price_tier_id: uuid.UUID | None,
    ) -> tuple[Category, PriceTier | None]:
        category = self.catalog_repo.get_category(session, category_id)
        if not category:
            raise ValidationError("Category does not exist", field="category_id")

        tier = None
        if price_tier_id is not None:
            tier = self.catalog_repo.get_tier(session, price_tier_id)
            if not tier:
                raise ValidationError("Price tier does not exist", field="price_tier_id")
        return category, tier

    def _build_order(
        self,
        session: Session,
        payload: OrderCreate,
        dp_percent: int,
        channel: OrderChannel,
    ) -> tuple[Order, Category, PriceTier | None]:
        category, tier = self._load_catalog(session, payload.category_id, payload.price_tier_id)
        breakdown = resolve_price(category, tier, dp_percent)

        order = Order(
            category_id=category.id,
            price_tier_id=tier.id if tier else None,
            customer_name=payload.customer_name,
            email=str(payload.email),
            phone=payload.phone,
            notes=payload.notes,
            total_price=breakdown.total_price,
            dp_percent=breakdown.dp_percent,
            dp_amount=breakdown.dp_amount,
            status=OrderStatus.PENDING,
            channel=channel,
        )
        return order, category, tier

    # -------- Public operations --------

    def create_online_order(
        self,
        session: Session,
        payload: OrderCreate,
        gateway: MidtransClient,
    ) -> CheckoutRead:
        """
        Public checkout.

        Steps:
          1. Price the order from category/tier at the default DP percent.
          2. Insert the Order (flush only, to get its id).
          3. Create the Snap transaction for the amount due now.
          4. Commit. A gateway failure rolls the order back.
        """
        order, category, tier = self._build_order(
            session,
            payload,
            dp_percent=get_settings().DEFAULT_DP_PERCENT,
            channel=OrderChannel.ONLINE,
        )

        amount = amount_due_now(order)
        if amount <= 0:
            raise ValidationError("Selected package has no price; contact the studio")

        order = self.order_repo.create_order(session, order)

        try:
            transaction = gateway.create_transaction(
                build_checkout_params(order, category, tier, amount)
            )
        except Exception:
            session.rollback()
            raise

        session.commit()
        session.refresh(order)
        logger.info(f"Created online order {order.id} (due now: {amount})")

        return CheckoutRead(
            order=OrderRead.model_validate(order),
            snap_token=transaction.token,
            redirect_url=transaction.redirect_url,
            amount_due=amount,
        )

    # -------- Admin operations --------

    def create_offline_order(
        self,
        session: Session,
        payload: OfflineOrderCreate,
    ) -> Order:
        dp_percent = payload.dp_percent
        if dp_percent is None:
            dp_percent = get_settings().DEFAULT_DP_PERCENT

        order, _, _ = self._build_order(
            session,
            payload,
            dp_percent=dp_percent,
            channel=OrderChannel.OFFLINE,
        )
        order = self.order_repo.create_order(session, order)
        session.commit()
        session.refresh(order)
        logger.info(f"Created offline order {order.id}")
        return order

    def list_orders(
        self,
        session: Session,
        status: OrderStatus | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Order]:
        return self.order_repo.list_all(session, status=status, skip=skip, limit=limit)

    def get_order(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise NotFound("Order not found")
        return order

    def _locked_order(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_for_update(session, order_id)
        if not order:
            raise NotFound("Order not found")
        return order

    def _save(self, session: Session, order: Order) -> Order:
        order.updated_at = datetime.now(timezone.utc)
        self.order_repo.update_order(session, order)
        session.commit()
        session.refresh(order)
        return order

    def update_order(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderUpdate,
    ) -> Order:
        """
        Admin edit form.

          - status    : direct stage edit (forward jumps or CANCELLED)
          - drive_link: delivery folder, meaningful from DRIVE_LINK onwards
          - notes / contact details
        """
        order = self._locked_order(session, order_id)
        changes = payload.model_dump(exclude_unset=True)

        new_status = changes.pop("status", None)
        if new_status is not None:
            previous = order.status
            order.status = set_stage(order.status, new_status)
            if order.status != previous:
                logger.info(f"Order {order.id} stage {previous.value} -> {order.status.value}")

        for field in ("customer_name", "email", "phone"):
            value = changes.pop(field, None)
            if value is None:
                continue
            value = str(value).strip()
            if not value:
                raise ValidationError(f"{field} cannot be empty", field=field)
            setattr(order, field, value)

        for field, value in changes.items():
            setattr(order, field, value)

        return self._save(session, order)

    def advance_order(self, session: Session, order_id: uuid.UUID) -> Order:
        """
        Move the order exactly one stage forward.
        """
        order = self._locked_order(session, order_id)
        previous = order.status
        order.status = advance_stage(order.status)
        logger.info(f"Order {order.id} advanced {previous.value} -> {order.status.value}")
        return self._save(session, order)

    def cancel_order(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self._locked_order(session, order_id)
        order.status = set_stage(order.status, OrderStatus.CANCELLED)
        logger.info(f"Order {order.id} cancelled")
        return self._save(session, order)

    # -------- Payments --------

    def list_payments(self, session: Session, order_id: uuid.UUID) -> list[Payment]:
        self.get_order(session, order_id)
        return self.order_repo.list_payments_for_order(session, order_id)

    def record_manual_payment(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: ManualPaymentCreate,
    ) -> Payment:
        """
        Admin-recorded settled payment (cash, manual transfer).
        """
        order = self._locked_order(session, order_id)

        payment = Payment(
            order_id=order.id,
            provider="manual",
            type=payload.type,
            status=PaymentStatus.SETTLEMENT,
            gross_amount=payload.gross_amount,
            method=payload.method,
            paid_at=payload.paid_at or datetime.now(timezone.utc),
        )
        payment = self.order_repo.save_payment(session, payment)

        order.payment_status = PaymentStatus.SETTLEMENT
        order.updated_at = datetime.now(timezone.utc)
        self.order_repo.update_order(session, order)

        session.commit()
        session.refresh(payment)
        return payment
