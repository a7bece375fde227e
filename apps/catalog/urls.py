"""
Catalog URL Configuration
"""
from django.urls import path

from .views import (
    AdminCategoryDetailView,
    AdminCategoryListView,
    AdminProductDetailView,
    AdminProductListView,
    AdminPromotionDetailView,
    AdminPromotionListView,
    AdminPromotionProductsView,
    CategoryDetailView,
    CategoryListView,
    CategoryProductsView,
    CategoryTreeView,
    ProductDetailView,
    ProductListView,
    ProductSearchView,
    PromotionDetailView,
    PromotionListView,
    PromotionProductsView,
)

category_urlpatterns = [
    path('', CategoryListView.as_view(), name='category-list'),
    path('tree/', CategoryTreeView.as_view(), name='category-tree'),
    path('admin/', AdminCategoryListView.as_view(), name='admin-category-list'),
    path('admin/<uuid:category_id>/', AdminCategoryDetailView.as_view(), name='admin-category-detail'),
    path('<uuid:category_id>/', CategoryDetailView.as_view(), name='category-detail'),
    path('<uuid:category_id>/products/', CategoryProductsView.as_view(), name='category-products'),
]

product_urlpatterns = [
    path('', ProductListView.as_view(), name='product-list'),
    path('search/', ProductSearchView.as_view(), name='product-search'),
    path('admin/', AdminProductListView.as_view(), name='admin-product-list'),
    path('admin/<uuid:product_id>/', AdminProductDetailView.as_view(), name='admin-product-detail'),
    path('<uuid:product_id>/', ProductDetailView.as_view(), name='product-detail'),
]

promotion_urlpatterns = [
    path('', PromotionListView.as_view(), name='promotion-list'),
    path('admin/', AdminPromotionListView.as_view(), name='admin-promotion-list'),
    path('admin/<uuid:promotion_id>/', AdminPromotionDetailView.as_view(), name='admin-promotion-detail'),
    path(
        'admin/<uuid:promotion_id>/products/',
        AdminPromotionProductsView.as_view(),
        name='admin-promotion-products',
    ),
    path('<uuid:promotion_id>/', PromotionDetailView.as_view(), name='promotion-detail'),
    path('<uuid:promotion_id>/products/', PromotionProductsView.as_view(), name='promotion-products'),
]
