# app/services/catalog_service.py
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from app.core.config import get_settings
from app.core.errors import NotFound, ValidationError
from app.core.slugs import ensure_unique_slug, slugify
from app.models.catalog import Category, PriceTier
from app.repositories.catalog_repo import CatalogRepository
from app.schemas.catalog import (
    CategoryCreate,
    CategoryUpdate,
    PriceQuote,
    PriceTierCreate,
    PriceTierUpdate,
)
from app.services.pricing_service import resolve_price


class CatalogService:
    """
    Business logic for categories & price tiers.

    Responsibilities:
      - slug generation & uniqueness
      - refuse deleting reference data that orders/projects still use
      - price quotes for the public order page
    """

    def __init__(self, repo: CatalogRepository):
        self.repo = repo

    # ----- Categories -----

    def list_categories(self, session: Session, only_active: bool = False) -> list[Category]:
        return self.repo.list_categories(session, only_active=only_active)

    def get_category(self, session: Session, category_id: uuid.UUID) -> Category:
        category = self.repo.get_category(session, category_id)
        if not category:
            raise NotFound("Category not found")
        return category

    def create_category(self, session: Session, payload: CategoryCreate) -> Category:
        base_slug = slugify(payload.slug or payload.name, fallback="category")
        slug = ensure_unique_slug(
            base_slug,
            lambda s: self.repo.get_category_by_slug(session, s),
        )

        category = Category(
            name=payload.name,
            slug=slug,
            description=payload.description,
            base_price=payload.base_price,
            is_active=payload.is_active,
            sort_order=payload.sort_order,
        )
        return self.repo.save_category(session, category)

    def update_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        payload: CategoryUpdate,
    ) -> Category:
        category = self.get_category(session, category_id)

        if payload.name is not None:
            category.name = payload.name

        if payload.slug is not None:
            new_base_slug = slugify(payload.slug, fallback="category")
            if new_base_slug != category.slug:
                category.slug = ensure_unique_slug(
                    new_base_slug,
                    lambda s: self.repo.get_category_by_slug(session, s),
                )

        if payload.description is not None:
            category.description = payload.description

        if payload.base_price is not None:
            category.base_price = payload.base_price

        if payload.is_active is not None:
            category.is_active = payload.is_active

        if payload.sort_order is not None:
            category.sort_order = payload.sort_order

        category.updated_at = datetime.now(timezone.utc)
        return self.repo.save_category(session, category)

    def delete_category(self, session: Session, category_id: uuid.UUID) -> None:
        category = self.get_category(session, category_id)
        if self.repo.count_category_references(session, category.id):
            raise ValidationError(
                "Category is referenced by tiers, orders or projects; deactivate it instead"
            )
        self.repo.delete_category(session, category)

    # ----- Price tiers -----

    def list_tiers(
        self,
        session: Session,
        category_id: uuid.UUID,
        only_active: bool = False,
    ) -> list[PriceTier]:
        self.get_category(session, category_id)
        return self.repo.list_tiers_for_category(session, category_id, only_active=only_active)

    def get_tier(self, session: Session, tier_id: uuid.UUID) -> PriceTier:
        tier = self.repo.get_tier(session, tier_id)
        if not tier:
            raise NotFound("Price tier not found")
        return tier

    def create_tier(self, session: Session, payload: PriceTierCreate) -> PriceTier:
        self.get_category(session, payload.category_id)
        tier = PriceTier(**payload.model_dump())
        return self.repo.save_tier(session, tier)

    def update_tier(
        self,
        session: Session,
        tier_id: uuid.UUID,
        payload: PriceTierUpdate,
    ) -> PriceTier:
        tier = self.get_tier(session, tier_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(tier, field, value)
        tier.updated_at = datetime.now(timezone.utc)
        return self.repo.save_tier(session, tier)

    def delete_tier(self, session: Session, tier_id: uuid.UUID) -> None:
        tier = self.get_tier(session, tier_id)
        if self.repo.count_tier_orders(session, tier.id):
            raise ValidationError("Price tier is used by orders; deactivate it instead")
        self.repo.delete_tier(session, tier)

    # ----- Pricing -----

    def quote(
        self,
        session: Session,
        category_id: uuid.UUID,
        price_tier_id: uuid.UUID | None = None,
    ) -> PriceQuote:
        """
        Price breakdown at the default down-payment percent.
        """
        category = self.get_category(session, category_id)
        tier = self.get_tier(session, price_tier_id) if price_tier_id else None
        breakdown = resolve_price(category, tier, get_settings().DEFAULT_DP_PERCENT)
        return PriceQuote(
            category_id=category.id,
            price_tier_id=tier.id if tier else None,
            total_price=breakdown.total_price,
            dp_percent=breakdown.dp_percent,
            dp_amount=breakdown.dp_amount,
            remaining_amount=breakdown.remaining_amount,
        )
