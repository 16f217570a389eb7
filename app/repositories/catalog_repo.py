# app/repositories/catalog_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.catalog import Category, PriceTier
from app.models.order import Order
from app.models.project import Project


class CatalogRepository:
    """
    Data access layer for Category & PriceTier.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Categories -----

    def get_category(self, session: Session, category_id: uuid.UUID) -> Category | None:
        return session.get(Category, category_id)

    def get_category_by_slug(self, session: Session, slug: str) -> Category | None:
        stmt = select(Category).where(Category.slug == slug)
        return session.exec(stmt).first()

    def list_categories(
        self,
        session: Session,
        only_active: bool = False,
    ) -> list[Category]:
        stmt = select(Category)
        if only_active:
            stmt = stmt.where(Category.is_active == True)  # noqa: E712
        stmt = stmt.order_by(Category.sort_order, Category.name)
        return session.exec(stmt).all()

    def save_category(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    def delete_category(self, session: Session, category: Category) -> None:
        session.delete(category)
        session.commit()

    def count_category_references(self, session: Session, category_id: uuid.UUID) -> int:
        """
        Number of tiers, orders and projects pointing at the category.
        """
        total = 0
        for model in (PriceTier, Order, Project):
            stmt = (
                select(func.count())
                .select_from(model)
                .where(model.category_id == category_id)
            )
            total += int(session.exec(stmt).one() or 0)
        return total

    # ----- Price tiers -----

    def get_tier(self, session: Session, tier_id: uuid.UUID) -> PriceTier | None:
        return session.get(PriceTier, tier_id)

    def list_tiers_for_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        only_active: bool = False,
    ) -> list[PriceTier]:
        stmt = select(PriceTier).where(PriceTier.category_id == category_id)
        if only_active:
            stmt = stmt.where(PriceTier.is_active == True)  # noqa: E712
        stmt = stmt.order_by(PriceTier.sort_order, PriceTier.price)
        return session.exec(stmt).all()

    def save_tier(self, session: Session, tier: PriceTier) -> PriceTier:
        session.add(tier)
        session.commit()
        session.refresh(tier)
        return tier

    def delete_tier(self, session: Session, tier: PriceTier) -> None:
        session.delete(tier)
        session.commit()

    def count_tier_orders(self, session: Session, tier_id: uuid.UUID) -> int:
        stmt = select(func.count()).select_from(Order).where(Order.price_tier_id == tier_id)
        return int(session.exec(stmt).one() or 0)
