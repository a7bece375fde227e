"""
Utility functions for the ChezFlora backend
"""
import json
import random
import string
import time
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from django.utils import timezone
from django.utils.text import slugify

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def to_decimal(value: Any) -> Decimal:
    """
    Coerce ints, floats and strings to Decimal without float artefacts.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value: Any) -> Decimal:
    """
    Round a monetary amount to cents, half-up.
    """
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Any) -> str:
    """
    Render a monetary amount the way API payloads expose totals ("20.00").
    """
    return f"{quantize_money(value):.2f}"


def generate_order_number(now=None) -> str:
    """
    Order number in the form FL-YYMMDD-XXXX (date plus 4 random characters).
    """
    now = now or timezone.now()
    suffix = ''.join(random.choices(string.ascii_uppercase + string.digits, k=4))
    return f"FL-{now:%y%m%d}-{suffix}"


def generate_slug(title: str) -> str:
    """
    URL slug from a title, suffixed with the last 4 digits of the current
    timestamp so re-used titles stay unique.
    """
    base_slug = slugify(title) or 'post'
    return f"{base_slug}-{str(int(time.time() * 1000))[-4:]}"


def generate_sku() -> str:
    """
    Fallback SKU for products created without one: 'P' + 8 timestamp digits.
    """
    return 'P' + str(int(time.time() * 1000))[-8:]


def build_excerpt(content: str, max_length: int = 150) -> str:
    """
    Default blog excerpt: the first ``max_length`` characters plus an ellipsis.
    """
    return content[:max_length] + '...'


def normalize_tags(tags: Any) -> Optional[list]:
    """
    Accept a list, a single tag or a JSON-encoded list; store a list.
    """
    if tags is None or tags == '':
        return None
    if isinstance(tags, (list, tuple)):
        return [str(t) for t in tags]
    if isinstance(tags, str):
        try:
            decoded = json.loads(tags)
        except json.JSONDecodeError:
            return [tags]
        if isinstance(decoded, list):
            return [str(t) for t in decoded]
    return [str(tags)]

