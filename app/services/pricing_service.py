# app/services/pricing_service.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from app.core.errors import ValidationError
from app.models.catalog import Category, PriceTier


@dataclass(frozen=True)
class PriceBreakdown:
    total_price: int
    dp_percent: int
    dp_amount: int

    @property
    def remaining_amount(self) -> int:
        return self.total_price - self.dp_amount


def compute_dp_amount(total_price: int, dp_percent: int) -> int:
    """
    Down payment = round(total_price * dp_percent / 100), halves rounded up.

    Raises:
        ValidationError: total_price < 0 or dp_percent outside [0, 100].
    """
    if total_price < 0:
        raise ValidationError("Total price cannot be negative", field="total_price")
    if dp_percent < 0 or dp_percent > 100:
        raise ValidationError("Down payment percent must be between 0 and 100", field="dp_percent")

    amount = Decimal(total_price) * Decimal(dp_percent) / Decimal(100)
    return int(amount.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def resolve_price(
    category: Category,
    tier: PriceTier | None,
    dp_percent: int,
) -> PriceBreakdown:
    """
    Derive the order amounts from the selected category/tier.

      - total_price = tier.price if a tier is selected, else category.base_price
      - dp_amount   = compute_dp_amount(total_price, dp_percent)

    The category must be active; a tier must be active and belong to the
    category.
    """
    if not category.is_active:
        raise ValidationError("Category is not available", field="category_id")

    if tier is not None:
        if tier.category_id != category.id:
            raise ValidationError(
                "Price tier does not belong to the selected category",
                field="price_tier_id",
            )
        if not tier.is_active:
            raise ValidationError("Price tier is not available", field="price_tier_id")
        total_price = tier.price
    else:
        total_price = category.base_price

    dp_amount = compute_dp_amount(total_price, dp_percent)
    return PriceBreakdown(
        total_price=total_price,
        dp_percent=dp_percent,
        dp_amount=dp_amount,
    )
