"""
Promotional pricing

A product's effective price is derived on every read from the promotions
attached to it. Of the promotions whose window contains ``now``, the one
giving the largest absolute discount wins; the first one encountered wins a
tie. The result is never negative.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from django.utils import timezone

from apps.core.utils import format_money, quantize_money, to_decimal


@dataclass(frozen=True)
class PricedPromotion:
    promotion: Any
    discount_amount: Decimal
    original_price: Decimal
    final_price: Decimal

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.promotion.id),
            "name": self.promotion.name,
            "discount_type": self.promotion.discount_type,
            "discount_value": format_money(self.promotion.discount_value),
            "discount_amount": format_money(self.discount_amount),
            "original_price": format_money(self.original_price),
            "final_price": format_money(self.final_price),
        }


def is_running(promotion, now) -> bool:
    return bool(promotion.is_active) and promotion.start_date <= now <= promotion.end_date


def discount_for(promotion, price: Decimal) -> Decimal:
    value = to_decimal(promotion.discount_value)
    if promotion.discount_type == 'percentage':
        return price * value / Decimal(100)
    return value


def effective_price(price, promotions: Iterable, now=None) -> Optional[PricedPromotion]:
    """
    Best running promotion for ``price``, or None when none applies.
    """
    now = now or timezone.now()
    price = to_decimal(price)

    best = None
    best_discount = None
    for promotion in promotions:
        if not is_running(promotion, now):
            continue
        discount = discount_for(promotion, price)
        if best is None or discount > best_discount:
            best, best_discount = promotion, discount

    if best is None:
        return None

    final_price = quantize_money(max(Decimal(0), price - best_discount))
    return PricedPromotion(
        promotion=best,
        discount_amount=quantize_money(best_discount),
        original_price=quantize_money(price),
        final_price=final_price,
    )
