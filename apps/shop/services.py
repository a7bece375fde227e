"""
Cart and order workflow

This module implements:
1. The per-user cart (lazily created, one line per product)
2. Checkout: cart -> order in one atomic block with row-locked stock decrement
3. Customer cancellation with stock restoration
4. Admin order listing and status updates

Stock is checked when the cart changes (advisory) and again, authoritatively,
inside the checkout transaction. Confirmation and status emails are sent
after commit and never affect the outcome.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F, Prefetch
from django.utils import timezone

from apps.accounts.models import Address
from apps.catalog.models import Product
from apps.catalog.services import invalidate_catalog_cache
from apps.core.exceptions import (
    InsufficientStockException,
    InvalidOperationException,
    InvalidTransitionException,
    NotFoundException,
)
from apps.core.notifications import notify_on_commit
from apps.core.pagination import paginate
from apps.core.utils import format_money, generate_order_number, quantize_money
from .models import Cart, CartItem, Order, OrderItem

logger = logging.getLogger(__name__)

ORDER_NUMBER_ATTEMPTS = 5


# =============================================================================
# CART
# =============================================================================

def _cart_queryset():
    return Cart.objects.prefetch_related(
        Prefetch(
            'items',
            queryset=CartItem.objects.select_related('product__category').prefetch_related(
                'product__images', 'product__promotions'
            ),
        )
    )


def cart_total(items) -> Decimal:
    return quantize_money(sum((item.line_total for item in items), Decimal(0)))


def get_cart(user) -> Cart:
    """The user's cart with its items, created on first access."""
    Cart.objects.get_or_create(user=user)
    return _cart_queryset().get(user=user)


def cart_summary(cart: Cart) -> Dict[str, Any]:
    items = list(cart.items.all())
    return {
        'cart': cart,
        'items': items,
        'total': format_money(cart_total(items)),
        'item_count': len(items),
    }


def _touch(cart: Cart) -> None:
    Cart.objects.filter(pk=cart.pk).update(updated_at=timezone.now())


@transaction.atomic
def add_to_cart(user, product_id, quantity: int = 1) -> Cart:
    product = Product.objects.filter(pk=product_id).first()
    if product is None:
        raise NotFoundException('Product not found', entity='product')
    if not product.is_active:
        raise InvalidOperationException('Product is not available', field='product_id')
    if quantity > product.stock:
        raise InsufficientStockException(
            'Not enough product in stock', product_id=product.pk, available=product.stock
        )

    cart, _ = Cart.objects.get_or_create(user=user)
    item = CartItem.objects.select_for_update().filter(cart=cart, product=product).first()

    if item is not None:
        new_quantity = item.quantity + quantity
        if new_quantity > product.stock:
            raise InsufficientStockException(
                f"Only {product.stock} items available in stock",
                product_id=product.pk,
                available=product.stock,
            )
        item.quantity = new_quantity
        item.unit_price = product.price
        item.save(update_fields=['quantity', 'unit_price', 'updated_at'])
    else:
        CartItem.objects.create(cart=cart, product=product, quantity=quantity, unit_price=product.price)

    _touch(cart)
    logger.debug(f"Cart {cart.id}: added {quantity} x {product.id}")
    return _cart_queryset().get(pk=cart.pk)


def _owned_item(user, item_id) -> CartItem:
    item = CartItem.objects.select_related('cart', 'product').filter(pk=item_id, cart__user=user).first()
    if item is None:
        raise NotFoundException('Cart item not found', entity='cart_item')
    return item


@transaction.atomic
def update_cart_item(user, item_id, quantity: int) -> Cart:
    """Set a line's quantity; zero removes the line."""
    item = _owned_item(user, item_id)

    if quantity <= 0:
        item.delete()
    else:
        if quantity > item.product.stock:
            raise InsufficientStockException(
                f"Only {item.product.stock} items available in stock",
                product_id=item.product_id,
                available=item.product.stock,
            )
        item.quantity = quantity
        item.save(update_fields=['quantity', 'updated_at'])

    _touch(item.cart)
    return _cart_queryset().get(pk=item.cart_id)


@transaction.atomic
def remove_cart_item(user, item_id) -> Cart:
    item = _owned_item(user, item_id)
    item.delete()
    _touch(item.cart)
    return _cart_queryset().get(pk=item.cart_id)


@transaction.atomic
def clear_cart(user) -> Cart:
    cart = Cart.objects.filter(user=user).first()
    if cart is None:
        raise NotFoundException('Cart not found', entity='cart')
    CartItem.objects.filter(cart=cart).delete()
    _touch(cart)
    return _cart_queryset().get(pk=cart.pk)


# =============================================================================
# ORDERS
# =============================================================================

def _order_queryset():
    return Order.objects.select_related('user', 'shipping_address', 'billing_address').prefetch_related(
        Prefetch('items', queryset=OrderItem.objects.select_related('product').prefetch_related('product__images'))
    )


def _owned_address(user, address_id, label: str) -> Address:
    address = Address.objects.filter(pk=address_id, user=user).first()
    if address is None:
        raise NotFoundException(f"{label} address not found", entity='address')
    return address


def _insert_order(**fields) -> Order:
    """Create the order row, drawing a new order number if one is already taken."""
    for attempt in range(1, ORDER_NUMBER_ATTEMPTS + 1):
        order_number = generate_order_number()
        try:
            with transaction.atomic():
                return Order.objects.create(order_number=order_number, **fields)
        except IntegrityError:
            if attempt == ORDER_NUMBER_ATTEMPTS:
                raise
            logger.warning(f"Order number {order_number} already in use, retrying")


def create_order(
    user,
    shipping_address_id,
    payment_method: str,
    billing_address_id=None,
    notes: Optional[str] = None,
) -> Order:
    """
    Convert the user's cart into an order.

    Everything between reading the cart and emptying it happens in one
    transaction: if any line is short of stock nothing is written.
    """
    billing_address_id = billing_address_id or shipping_address_id

    with transaction.atomic():
        shipping_address = _owned_address(user, shipping_address_id, 'Shipping')
        billing_address = _owned_address(user, billing_address_id, 'Billing')

        cart = Cart.objects.select_for_update().filter(user=user).first()
        items = list(cart.items.select_related('product')) if cart is not None else []
        if not items:
            raise NotFoundException('Your cart is empty', entity='cart')

        # Lock every product row before the authoritative stock check
        products = {
            product.pk: product
            for product in Product.objects.select_for_update().filter(
                pk__in=[item.product_id for item in items]
            )
        }
        for item in items:
            product = products[item.product_id]
            if item.quantity > product.stock:
                raise InsufficientStockException(
                    f"Not enough stock for {product.name}",
                    product_id=product.pk,
                    available=product.stock,
                )

        order = _insert_order(
            user=user,
            status=Order.STATUS_PENDING,
            payment_status='pending',
            payment_method=payment_method,
            total_amount=cart_total(items),
            shipping_address=shipping_address,
            billing_address=billing_address,
            notes=notes,
        )
        OrderItem.objects.bulk_create([
            OrderItem(order=order, product_id=item.product_id, quantity=item.quantity, unit_price=item.unit_price)
            for item in items
        ])
        for item in items:
            Product.objects.filter(pk=item.product_id).update(stock=F('stock') - item.quantity)

        CartItem.objects.filter(cart=cart).delete()
        _touch(cart)

        notify_on_commit(
            to=user.email,
            subject=f"Order Confirmation - {order.order_number}",
            template='orderConfirmation',
            context={
                'first_name': user.first_name,
                'order_number': order.order_number,
                'order_date': timezone.now().date().isoformat(),
                'total_amount': format_money(order.total_amount),
                'payment_method': order.payment_method,
                'shipping_address': shipping_address.one_line,
                'order_url': f"{settings.FRONTEND_URL}/account/orders/{order.id}",
            },
        )
        invalidate_catalog_cache()

    logger.info(f"Order {order.order_number} created for user {user.id}: {order.total_amount}")
    return _order_queryset().get(pk=order.pk)


def list_orders(user, query_params) -> Tuple[List[Order], Dict]:
    queryset = _order_queryset().filter(user=user)
    status = query_params.get('status')
    if status:
        queryset = queryset.filter(status=status)
    return paginate(queryset.order_by('-created_at'), query_params)


def get_order(user, order_id) -> Order:
    order = _order_queryset().filter(pk=order_id, user=user).first()
    if order is None:
        raise NotFoundException('Order not found', entity='order')
    return order


@transaction.atomic
def cancel_order(user, order_id) -> Order:
    order = Order.objects.select_for_update().filter(pk=order_id, user=user).first()
    if order is None:
        raise NotFoundException('Order not found', entity='order')
    if order.status not in Order.CANCELLABLE_STATUSES:
        raise InvalidTransitionException(
            'Order cannot be cancelled at this stage', current_status=order.status
        )

    order.status = Order.STATUS_CANCELLED
    order.save(update_fields=['status', 'updated_at'])

    for item in order.items.all():
        Product.objects.filter(pk=item.product_id).update(stock=F('stock') + item.quantity)

    notify_on_commit(
        to=user.email,
        subject=f"Order Cancelled - {order.order_number}",
        template='orderCancelled',
        context={
            'first_name': user.first_name,
            'order_number': order.order_number,
            'cancellation_date': timezone.now().date().isoformat(),
            'support_email': settings.SUPPORT_EMAIL,
        },
    )
    invalidate_catalog_cache()
    logger.info(f"Order {order.order_number} cancelled by user {user.id}")
    return _order_queryset().get(pk=order.pk)


# =============================================================================
# ADMIN
# =============================================================================

def list_all_orders(query_params) -> Tuple[List[Order], Dict]:
    queryset = _order_queryset()
    status = query_params.get('status')
    if status:
        queryset = queryset.filter(status=status)
    user_id = query_params.get('user_id')
    if user_id:
        queryset = queryset.filter(user_id=user_id)
    order_number = query_params.get('order_number')
    if order_number:
        queryset = queryset.filter(order_number__icontains=order_number)
    return paginate(queryset.order_by('-created_at'), query_params)


def get_order_admin(order_id) -> Order:
    order = _order_queryset().filter(pk=order_id).first()
    if order is None:
        raise NotFoundException('Order not found', entity='order')
    return order


@transaction.atomic
def update_order_status(order_id, status: str = None, payment_status: str = None) -> Order:
    """
    Set status and/or payment status. Admins may move an order to any
    status; stock is not adjusted here.
    """
    order = Order.objects.select_for_update().select_related('user').filter(pk=order_id).first()
    if order is None:
        raise NotFoundException('Order not found', entity='order')

    previous = order.status
    if status:
        order.status = status
    if payment_status:
        order.payment_status = payment_status
    order.save(update_fields=['status', 'payment_status', 'updated_at'])

    notify_on_commit(
        to=order.user.email,
        subject=f"Order Status Update - {order.order_number}",
        template='orderStatusUpdate',
        context={
            'first_name': order.user.first_name,
            'order_number': order.order_number,
            'status': order.status,
            'payment_status': order.payment_status,
            'update_date': timezone.now().date().isoformat(),
            'order_url': f"{settings.FRONTEND_URL}/account/orders/{order.id}",
        },
    )
    logger.info(f"Order {order.order_number}: {previous} -> {order.status} (payment {order.payment_status})")
    return _order_queryset().get(pk=order.pk)
