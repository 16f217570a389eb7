# app/routers/catalog.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import get_current_user, is_admin, require_admin
from app.database import get_session
from app.models.user import User
from app.repositories.catalog_repo import CatalogRepository
from app.schemas.catalog import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    PriceQuote,
    PriceTierCreate,
    PriceTierRead,
    PriceTierUpdate,
)
from app.services.catalog_service import CatalogService

router = APIRouter(tags=["Catalog"])

repo = CatalogRepository()
service = CatalogService(repo)


# -------- Public endpoints --------


@router.get("/categories", response_model=list[CategoryRead])
def list_categories(
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
    active: bool = True,
):
    """
    List package categories.

    - Public visitors always get active categories only.
    - Admins may pass `active=false` to see everything.
    """
    if not is_admin(current_user):
        active = True
    return service.list_categories(session, only_active=active)


@router.get("/categories/{category_id}", response_model=CategoryRead)
def get_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_category(session, category_id)


@router.get(
    "/categories/{category_id}/tiers",
    response_model=list[PriceTierRead],
)
def list_category_tiers(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
    active: bool = True,
):
    """
    Price tiers of a category, cheapest-first by sort order.
    """
    if not is_admin(current_user):
        active = True
    return service.list_tiers(session, category_id, only_active=active)


@router.get("/pricing/quote", response_model=PriceQuote)
def get_price_quote(
    category_id: uuid.UUID,
    price_tier_id: uuid.UUID | None = None,
    session: Session = Depends(get_session),
):
    """
    Total price and down payment for a category/tier selection.
    """
    return service.quote(session, category_id, price_tier_id)


# -------- Admin endpoints --------


@router.post(
    "/categories",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_category(
    payload: CategoryCreate,
    session: Session = Depends(get_session),
):
    return service.create_category(session, payload)


@router.patch(
    "/categories/{category_id}",
    response_model=CategoryRead,
    dependencies=[Depends(require_admin)],
)
def update_category(
    category_id: uuid.UUID,
    payload: CategoryUpdate,
    session: Session = Depends(get_session),
):
    return service.update_category(session, category_id, payload)


@router.delete(
    "/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete an unreferenced category (admin only).

    Categories still used by tiers, orders or projects must be deactivated.
    """
    service.delete_category(session, category_id)
    return None


@router.post(
    "/tiers",
    response_model=PriceTierRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_price_tier(
    payload: PriceTierCreate,
    session: Session = Depends(get_session),
):
    return service.create_tier(session, payload)


@router.get(
    "/tiers/{tier_id}",
    response_model=PriceTierRead,
)
def get_price_tier(
    tier_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_tier(session, tier_id)


@router.patch(
    "/tiers/{tier_id}",
    response_model=PriceTierRead,
    dependencies=[Depends(require_admin)],
)
def update_price_tier(
    tier_id: uuid.UUID,
    payload: PriceTierUpdate,
    session: Session = Depends(get_session),
):
    return service.update_tier(session, tier_id, payload)


@router.delete(
    "/tiers/{tier_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_price_tier(
    tier_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    service.delete_tier(session, tier_id)
    return None
