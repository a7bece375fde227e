"""
API Views for the catalog

Public reads of products and promotions are cached for anonymous callers;
admin writes invalidate those entries (see catalog.services).
"""
import logging

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from api.permissions import IsAdminRole
from api.responses import success_response
from apps.core.cache import cache_anonymous_get
from . import services
from .serializers import (
    CategorySerializer,
    CategoryTreeSerializer,
    CategoryWriteSerializer,
    ProductIdsSerializer,
    ProductSerializer,
    ProductWriteSerializer,
    PromotionSerializer,
    PromotionWriteSerializer,
)

logger = logging.getLogger(__name__)

PAGE_PARAMETERS = [
    OpenApiParameter('page', int, description="Page number (default 1)"),
    OpenApiParameter('limit', int, description="Items per page, 1-100 (default 10)"),
]


# =============================================================================
# CATEGORIES
# =============================================================================

class CategoryListView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(parameters=PAGE_PARAMETERS, responses={200: CategorySerializer(many=True)})
    def get(self, request):
        rows, pagination = services.list_categories(request.query_params)
        return success_response(CategorySerializer(rows, many=True).data, pagination=pagination)


class CategoryTreeView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(description="Active categories nested under their parents")
    def get(self, request):
        tree = services.category_tree()
        return success_response(CategoryTreeSerializer(tree, many=True).data)


class CategoryDetailView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: CategorySerializer})
    def get(self, request, category_id):
        return success_response(CategorySerializer(services.get_category(category_id)).data)


class CategoryProductsView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(parameters=PAGE_PARAMETERS, responses={200: ProductSerializer(many=True)})
    def get(self, request, category_id):
        rows, pagination = services.list_category_products(category_id, request.query_params)
        return success_response(ProductSerializer(rows, many=True).data, pagination=pagination)


class AdminCategoryListView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(request=CategoryWriteSerializer, responses={201: CategorySerializer})
    def post(self, request):
        serializer = CategoryWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        category = services.create_category(serializer.validated_data)
        return success_response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)


class AdminCategoryDetailView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(request=CategoryWriteSerializer, responses={200: CategorySerializer})
    def put(self, request, category_id):
        serializer = CategoryWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        category = services.update_category(category_id, serializer.validated_data)
        return success_response(CategorySerializer(category).data)

    def delete(self, request, category_id):
        services.delete_category(category_id)
        return success_response(message='Category deleted successfully')


# =============================================================================
# PRODUCTS
# =============================================================================

class ProductListView(APIView):
    """
    Active products with optional filters and sorting.
    """
    permission_classes = [AllowAny]

    @extend_schema(
        parameters=PAGE_PARAMETERS + [
            OpenApiParameter('category', str, description="Category id"),
            OpenApiParameter('search', str, description="Matches name or description"),
            OpenApiParameter('min_price', float),
            OpenApiParameter('max_price', float),
            OpenApiParameter(
                'sort', str,
                enum=['price_asc', 'price_desc', 'newest', 'oldest', 'name_asc', 'name_desc'],
            ),
        ],
        responses={200: ProductSerializer(many=True)},
    )
    @cache_anonymous_get()
    def get(self, request):
        rows, pagination = services.list_products(request.query_params)
        return success_response(ProductSerializer(rows, many=True).data, pagination=pagination)


class ProductSearchView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(
        parameters=PAGE_PARAMETERS + [OpenApiParameter('query', str, required=True)],
        responses={200: ProductSerializer(many=True)},
    )
    @cache_anonymous_get()
    def get(self, request):
        rows, pagination = services.search_products(request.query_params)
        return success_response(ProductSerializer(rows, many=True).data, pagination=pagination)


class ProductDetailView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: ProductSerializer})
    @cache_anonymous_get()
    def get(self, request, product_id):
        return success_response(ProductSerializer(services.get_product(product_id)).data)


class AdminProductListView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(request=ProductWriteSerializer, responses={201: ProductSerializer})
    def post(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = services.create_product(serializer.validated_data)
        return success_response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)


class AdminProductDetailView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(request=ProductWriteSerializer, responses={200: ProductSerializer})
    def put(self, request, product_id):
        serializer = ProductWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        product = services.update_product(product_id, serializer.validated_data)
        return success_response(ProductSerializer(product).data)

    def delete(self, request, product_id):
        services.delete_product(product_id)
        return success_response(message='Product deleted successfully')


# =============================================================================
# PROMOTIONS
# =============================================================================

class PromotionListView(APIView):
    """
    Promotions whose window contains the current time.
    """
    permission_classes = [AllowAny]

    @extend_schema(responses={200: PromotionSerializer(many=True)})
    @cache_anonymous_get()
    def get(self, request):
        promotions = services.list_running_promotions()
        return success_response(PromotionSerializer(promotions, many=True).data)


class PromotionDetailView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: PromotionSerializer})
    @cache_anonymous_get()
    def get(self, request, promotion_id):
        return success_response(PromotionSerializer(services.get_promotion(promotion_id)).data)


class PromotionProductsView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(parameters=PAGE_PARAMETERS, responses={200: ProductSerializer(many=True)})
    @cache_anonymous_get()
    def get(self, request, promotion_id):
        rows, pagination = services.list_promotion_products(promotion_id, request.query_params)
        return success_response(ProductSerializer(rows, many=True).data, pagination=pagination)


class AdminPromotionListView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(
        parameters=PAGE_PARAMETERS + [OpenApiParameter('is_active', bool)],
        responses={200: PromotionSerializer(many=True)},
    )
    def get(self, request):
        rows, pagination = services.list_all_promotions(request.query_params)
        return success_response(PromotionSerializer(rows, many=True).data, pagination=pagination)

    @extend_schema(request=PromotionWriteSerializer, responses={201: PromotionSerializer})
    def post(self, request):
        serializer = PromotionWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        promotion = services.create_promotion(serializer.validated_data)
        return success_response(PromotionSerializer(promotion).data, status=status.HTTP_201_CREATED)


class AdminPromotionDetailView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(request=PromotionWriteSerializer, responses={200: PromotionSerializer})
    def put(self, request, promotion_id):
        serializer = PromotionWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        promotion = services.update_promotion(promotion_id, serializer.validated_data)
        return success_response(PromotionSerializer(promotion).data)

    def delete(self, request, promotion_id):
        services.delete_promotion(promotion_id)
        return success_response(message='Promotion deleted successfully')


class AdminPromotionProductsView(APIView):
    """
    Attach or detach products without touching the rest of the promotion.
    """
    permission_classes = [IsAdminRole]

    @extend_schema(request=ProductIdsSerializer, responses={200: PromotionSerializer})
    def post(self, request, promotion_id):
        serializer = ProductIdsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        promotion = services.add_promotion_products(promotion_id, serializer.validated_data['product_ids'])
        return success_response(PromotionSerializer(promotion).data)

    @extend_schema(request=ProductIdsSerializer, responses={200: PromotionSerializer})
    def delete(self, request, promotion_id):
        serializer = ProductIdsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        promotion = services.remove_promotion_products(
            promotion_id, serializer.validated_data['product_ids']
        )
        return success_response(PromotionSerializer(promotion).data)
