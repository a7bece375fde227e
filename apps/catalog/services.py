"""
Catalog services: categories, products, promotions and stock alerts

Every admin write to products or promotions drops the cached anonymous
``/products`` and ``/promotions`` responses once its transaction commits.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.db.models import Prefetch, Q
from django.utils import timezone

from apps.core.cache import get_response_cache
from apps.core.exceptions import InvalidOperationException, NotFoundException
from apps.core.notifications import notify_on_commit
from apps.core.pagination import paginate
from apps.core.utils import generate_sku
from .models import Category, Product, ProductImage, Promotion

logger = logging.getLogger(__name__)

PRODUCT_SORTS = {
    'price_asc': ['price'],
    'price_desc': ['-price'],
    'newest': ['-created_at'],
    'oldest': ['created_at'],
    'name_asc': ['name'],
    'name_desc': ['-name'],
}
CACHED_PREFIXES = ('/products', '/promotions')


def invalidate_catalog_cache(cache=None) -> None:
    """Drop cached product and promotion responses after the current commit."""
    def _invalidate():
        target = cache or get_response_cache()
        for prefix in CACHED_PREFIXES:
            target.invalidate(prefix)

    transaction.on_commit(_invalidate)


def product_queryset():
    """Products with what the product payload needs, fetched up front."""
    return Product.objects.select_related('category').prefetch_related(
        'images',
        Prefetch('promotions', queryset=Promotion.objects.filter(is_active=True)),
    )


# =============================================================================
# CATEGORIES
# =============================================================================

def list_categories(query_params) -> Tuple[List[Category], Dict]:
    queryset = Category.objects.filter(is_active=True).order_by('sort_order', 'name')
    return paginate(queryset, query_params)


def category_tree() -> List[Dict[str, Any]]:
    """
    Active categories nested under their parents, each node carrying
    ``children``. Roots are categories without a parent.
    """
    categories = list(Category.objects.filter(is_active=True).order_by('sort_order', 'name'))
    by_parent: Dict[Any, List[Category]] = {}
    for category in categories:
        by_parent.setdefault(category.parent_id, []).append(category)

    def build(parent_id):
        return [
            {'category': category, 'children': build(category.id)}
            for category in by_parent.get(parent_id, [])
        ]

    return build(None)


def get_category(category_id) -> Category:
    category = Category.objects.filter(pk=category_id).first()
    if category is None:
        raise NotFoundException('Category not found', entity='category')
    return category


def list_category_products(category_id, query_params) -> Tuple[List[Product], Dict]:
    category = get_category(category_id)
    queryset = product_queryset().filter(category=category, is_active=True).order_by('-created_at')
    return paginate(queryset, query_params)


def _resolve_parent(parent_id) -> Optional[Category]:
    if not parent_id:
        return None
    parent = Category.objects.filter(pk=parent_id).first()
    if parent is None:
        raise NotFoundException('Parent category not found', entity='category')
    return parent


def create_category(data: Dict[str, Any]) -> Category:
    parent = _resolve_parent(data.get('parent_id'))
    category = Category.objects.create(
        name=data['name'],
        description=data.get('description'),
        image_url=data.get('image_url'),
        parent=parent,
        sort_order=data.get('sort_order') or 0,
        is_active=data.get('is_active', True),
    )
    logger.info(f"Created category {category.id} ({category.name})")
    return category


def update_category(category_id, data: Dict[str, Any]) -> Category:
    category = get_category(category_id)

    if 'parent_id' in data:
        parent_id = data['parent_id']
        if parent_id and str(parent_id) == str(category.id):
            raise InvalidOperationException('A category cannot be its own parent', field='parent_id')
        category.parent = _resolve_parent(parent_id)

    for field in ('name', 'image_url'):
        if data.get(field):
            setattr(category, field, data[field])
    for field in ('description', 'sort_order', 'is_active'):
        if field in data and data[field] is not None:
            setattr(category, field, data[field])

    category.save()
    return category


def delete_category(category_id) -> None:
    category = get_category(category_id)
    if Category.objects.filter(parent=category).exists():
        raise InvalidOperationException('Cannot delete category with subcategories')
    if Product.objects.filter(category=category).exists():
        raise InvalidOperationException('Cannot delete category with products')
    category.delete()
    logger.info(f"Deleted category {category_id}")


# =============================================================================
# PRODUCTS
# =============================================================================

def list_products(query_params) -> Tuple[List[Product], Dict]:
    queryset = product_queryset().filter(is_active=True)

    category = query_params.get('category')
    if category:
        queryset = queryset.filter(category_id=category)

    min_price = query_params.get('min_price')
    if min_price not in (None, ''):
        queryset = queryset.filter(price__gte=min_price)

    max_price = query_params.get('max_price')
    if max_price not in (None, ''):
        queryset = queryset.filter(price__lte=max_price)

    search = query_params.get('search')
    if search:
        queryset = queryset.filter(Q(name__icontains=search) | Q(description__icontains=search))

    ordering = PRODUCT_SORTS.get(query_params.get('sort'), ['-created_at'])
    return paginate(queryset.order_by(*ordering), query_params)


def search_products(query_params) -> Tuple[List[Product], Dict]:
    query = query_params.get('query')
    if not query:
        raise InvalidOperationException('Search query is required', field='query')

    queryset = product_queryset().filter(
        Q(name__icontains=query) | Q(description__icontains=query),
        is_active=True,
    ).order_by('name')
    return paginate(queryset, query_params)


def get_product(product_id) -> Product:
    product = product_queryset().filter(pk=product_id).first()
    if product is None:
        raise NotFoundException('Product not found', entity='product')
    return product


def _check_sku_free(sku: str, exclude_id=None) -> None:
    clash = Product.objects.filter(sku=sku)
    if exclude_id is not None:
        clash = clash.exclude(pk=exclude_id)
    if clash.exists():
        raise InvalidOperationException('SKU already in use', field='sku')


def replace_images(owner_field: str, owner, image_model, image_urls: Iterable[str]) -> None:
    image_model.objects.filter(**{owner_field: owner}).delete()
    image_model.objects.bulk_create([
        image_model(**{owner_field: owner}, image_url=url, is_primary=index == 0, sort_order=index)
        for index, url in enumerate(image_urls)
    ])


@transaction.atomic
def create_product(data: Dict[str, Any]) -> Product:
    category = None
    if data.get('category_id'):
        category = get_category(data['category_id'])

    sku = data.get('sku')
    if sku:
        _check_sku_free(sku)
    else:
        sku = generate_sku()

    product = Product.objects.create(
        name=data['name'],
        description=data.get('description'),
        price=data['price'],
        stock=data.get('stock', 0),
        category=category,
        sku=sku,
        is_active=data.get('is_active', True),
    )
    if data.get('image_urls'):
        replace_images('product', product, ProductImage, data['image_urls'])

    invalidate_catalog_cache()
    logger.info(f"Created product {product.id} (sku={product.sku})")
    return get_product(product.id)


@transaction.atomic
def update_product(product_id, data: Dict[str, Any]) -> Product:
    product = Product.objects.select_for_update().filter(pk=product_id).first()
    if product is None:
        raise NotFoundException('Product not found', entity='product')

    if 'category_id' in data:
        product.category = get_category(data['category_id']) if data['category_id'] else None

    sku = data.get('sku')
    if sku and sku != product.sku:
        _check_sku_free(sku, exclude_id=product.pk)
        product.sku = sku

    if data.get('name'):
        product.name = data['name']
    for field in ('description', 'price', 'stock', 'is_active'):
        if field in data and data[field] is not None:
            setattr(product, field, data[field])
    product.save()

    if data.get('image_urls') is not None:
        replace_images('product', product, ProductImage, data['image_urls'])

    invalidate_catalog_cache()
    logger.info(f"Updated product {product.id}")
    return get_product(product.id)


@transaction.atomic
def delete_product(product_id) -> None:
    from apps.shop.models import OrderItem

    product = Product.objects.filter(pk=product_id).first()
    if product is None:
        raise NotFoundException('Product not found', entity='product')
    if OrderItem.objects.filter(product=product).exists():
        raise InvalidOperationException(
            'Cannot delete a product that appears in orders; deactivate it instead'
        )
    product.delete()
    invalidate_catalog_cache()
    logger.info(f"Deleted product {product_id}")


# =============================================================================
# PROMOTIONS
# =============================================================================

def _promotion_queryset():
    return Promotion.objects.prefetch_related('products')


def list_running_promotions(now=None) -> List[Promotion]:
    now = now or timezone.now()
    return list(
        _promotion_queryset().filter(is_active=True, start_date__lte=now, end_date__gte=now)
    )


def list_all_promotions(query_params) -> Tuple[List[Promotion], Dict]:
    queryset = _promotion_queryset().order_by('-created_at')
    is_active = query_params.get('is_active')
    if is_active is not None and is_active != '':
        queryset = queryset.filter(is_active=is_active == 'true')
    return paginate(queryset, query_params)


def get_promotion(promotion_id) -> Promotion:
    promotion = _promotion_queryset().filter(pk=promotion_id).first()
    if promotion is None:
        raise NotFoundException('Promotion not found', entity='promotion')
    return promotion


def list_promotion_products(promotion_id, query_params) -> Tuple[List[Product], Dict]:
    promotion = get_promotion(promotion_id)
    queryset = product_queryset().filter(promotions=promotion).order_by('name')
    return paginate(queryset, query_params)


def validate_promotion_values(discount_type, discount_value, start_date, end_date) -> None:
    if start_date and end_date and end_date <= start_date:
        raise InvalidOperationException('End date must be after start date', field='end_date')
    if discount_value is not None and discount_value < 0:
        raise InvalidOperationException('Discount value must be positive', field='discount_value')
    if discount_type == Promotion.TYPE_PERCENTAGE and discount_value is not None and discount_value > 100:
        raise InvalidOperationException(
            'Percentage discount cannot exceed 100%', field='discount_value'
        )


def _existing_products(product_ids) -> List[Product]:
    products = list(Product.objects.filter(pk__in=product_ids))
    if len(products) != len(set(str(pk) for pk in product_ids)):
        raise NotFoundException('One or more products not found', entity='product')
    return products


@transaction.atomic
def create_promotion(data: Dict[str, Any]) -> Promotion:
    validate_promotion_values(
        data['discount_type'], data['discount_value'], data['start_date'], data['end_date']
    )
    promotion = Promotion.objects.create(
        name=data['name'],
        description=data.get('description'),
        discount_type=data['discount_type'],
        discount_value=data['discount_value'],
        start_date=data['start_date'],
        end_date=data['end_date'],
        is_active=data.get('is_active', True),
    )
    if data.get('product_ids'):
        promotion.products.set(_existing_products(data['product_ids']))

    invalidate_catalog_cache()
    logger.info(f"Created promotion {promotion.id} ({promotion.name})")
    return get_promotion(promotion.id)


@transaction.atomic
def update_promotion(promotion_id, data: Dict[str, Any]) -> Promotion:
    promotion = Promotion.objects.select_for_update().filter(pk=promotion_id).first()
    if promotion is None:
        raise NotFoundException('Promotion not found', entity='promotion')

    for field in ('name', 'discount_type', 'start_date', 'end_date'):
        if data.get(field):
            setattr(promotion, field, data[field])
    for field in ('description', 'discount_value', 'is_active'):
        if field in data and data[field] is not None:
            setattr(promotion, field, data[field])

    validate_promotion_values(
        promotion.discount_type, promotion.discount_value, promotion.start_date, promotion.end_date
    )
    promotion.save()

    if data.get('product_ids') is not None:
        promotion.products.set(_existing_products(data['product_ids']))

    invalidate_catalog_cache()
    logger.info(f"Updated promotion {promotion.id}")
    return get_promotion(promotion.id)


@transaction.atomic
def delete_promotion(promotion_id) -> None:
    deleted, _ = Promotion.objects.filter(pk=promotion_id).delete()
    if not deleted:
        raise NotFoundException('Promotion not found', entity='promotion')
    invalidate_catalog_cache()
    logger.info(f"Deleted promotion {promotion_id}")


def _require_product_ids(product_ids) -> None:
    if not product_ids:
        raise InvalidOperationException('Product IDs array is required', field='product_ids')


@transaction.atomic
def add_promotion_products(promotion_id, product_ids) -> Promotion:
    _require_product_ids(product_ids)
    promotion = get_promotion(promotion_id)
    promotion.products.add(*_existing_products(product_ids))
    invalidate_catalog_cache()
    return get_promotion(promotion.id)


@transaction.atomic
def remove_promotion_products(promotion_id, product_ids) -> Promotion:
    _require_product_ids(product_ids)
    promotion = get_promotion(promotion_id)
    promotion.products.remove(*Product.objects.filter(pk__in=product_ids))
    invalidate_catalog_cache()
    return get_promotion(promotion.id)


# =============================================================================
# STOCK ALERTS
# =============================================================================

def check_low_stock(threshold: int = None) -> List[Product]:
    """
    Email every active admin the active products whose stock is below
    ``threshold``. Returns the products found.
    """
    from apps.accounts.models import User

    threshold = settings.LOW_STOCK_THRESHOLD if threshold is None else threshold
    products = list(
        Product.objects.filter(is_active=True, stock__lt=threshold).order_by('stock', 'name')
    )
    if not products:
        logger.info("No products with low stock found")
        return products

    admins = User.objects.filter(role__in=User.ADMIN_ROLES, status=User.STATUS_ACTIVE)
    product_list = '\n'.join(
        f"- {product.name} (SKU: {product.sku}): {product.stock} left" for product in products
    )
    for admin in admins:
        notify_on_commit(
            to=admin.email,
            subject='Low Stock Alert - ChezFlora',
            template='lowStockAlert',
            context={
                'first_name': admin.first_name,
                'product_count': len(products),
                'product_list': product_list,
                'admin_url': f"{settings.ADMIN_URL}/products",
            },
        )

    logger.info(f"Low stock alert: {len(products)} product(s) below {threshold}")
    return products
