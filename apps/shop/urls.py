"""
Shop URL Configuration
"""
from django.urls import path

from .views import (
    AdminOrderDetailView,
    AdminOrderListView,
    AdminOrderStatusView,
    CartItemDetailView,
    CartItemListView,
    CartView,
    OrderCancelView,
    OrderDetailView,
    OrderListView,
)

cart_urlpatterns = [
    path('', CartView.as_view(), name='cart'),
    path('items/', CartItemListView.as_view(), name='cart-items'),
    path('items/<uuid:item_id>/', CartItemDetailView.as_view(), name='cart-item-detail'),
]

order_urlpatterns = [
    path('', OrderListView.as_view(), name='order-list'),
    path('admin/', AdminOrderListView.as_view(), name='admin-order-list'),
    path('admin/<uuid:order_id>/', AdminOrderDetailView.as_view(), name='admin-order-detail'),
    path('admin/<uuid:order_id>/status/', AdminOrderStatusView.as_view(), name='admin-order-status'),
    path('<uuid:order_id>/', OrderDetailView.as_view(), name='order-detail'),
    path('<uuid:order_id>/cancel/', OrderCancelView.as_view(), name='order-cancel'),
]
