# app/repositories/order_repo.py
import uuid

from sqlmodel import Session, select

from app.models.order import Order, OrderStatus, Payment


class OrderRepository:
    """
    Data access layer for orders and payments.

    NOTE:
      - No commits here; checkout and payment notifications are multi-step
        transactions. The service is responsible for calling session.commit().
    """

    # ---- Orders ----

    def list_all(
        self,
        session: Session,
        status: OrderStatus | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Order]:
        stmt = select(Order)
        if status is not None:
            stmt = stmt.where(Order.status == status)
        stmt = stmt.order_by(Order.created_at.desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def get_for_update(self, session: Session, order_id: uuid.UUID) -> Order | None:
        """
        Load an order holding a row lock until the transaction ends.
        """
        stmt = select(Order).where(Order.id == order_id).with_for_update()
        return session.exec(stmt).first()

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing, but ensure id is populated.
        """
        session.add(order)
        session.flush()  # Assign PK
        session.refresh(order)
        return order

    def update_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        session.refresh(order)
        return order

    # ---- Payments ----

    def list_payments_for_order(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> list[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.order_id == order_id)
            .order_by(Payment.created_at)
        )
        return session.exec(stmt).all()

    def get_payment_by_transaction(
        self,
        session: Session,
        provider: str,
        transaction_id: str,
    ) -> Payment | None:
        stmt = select(Payment).where(
            Payment.provider == provider,
            Payment.external_transaction_id == transaction_id,
        )
        return session.exec(stmt).first()

    def find_untracked_payment(
        self,
        session: Session,
        order_id: uuid.UUID,
        provider: str,
        status_code: str,
        gross_amount: int,
    ) -> Payment | None:
        """
        Fallback dedup key for notifications without a transaction_id.
        """
        stmt = select(Payment).where(
            Payment.order_id == order_id,
            Payment.provider == provider,
            Payment.external_transaction_id == None,  # noqa: E711
            Payment.status_code == status_code,
            Payment.gross_amount == gross_amount,
        )
        return session.exec(stmt).first()

    def save_payment(self, session: Session, payment: Payment) -> Payment:
        session.add(payment)
        session.flush()
        session.refresh(payment)
        return payment
