"""
API Views for the cart and orders
"""
import logging

from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from api.permissions import IsAdminRole
from api.responses import success_response
from api.serializers import ErrorSerializer
from . import services
from .serializers import (
    AddToCartSerializer,
    CartSerializer,
    CreateOrderSerializer,
    OrderSerializer,
    OrderStatusUpdateSerializer,
    UpdateCartItemSerializer,
)

logger = logging.getLogger(__name__)


def _cart_response(cart, status_code=status.HTTP_200_OK):
    return success_response(CartSerializer(services.cart_summary(cart)).data, status=status_code)


class CartView(APIView):
    """
    The authenticated user's cart.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: CartSerializer})
    def get(self, request):
        return _cart_response(services.get_cart(request.user))

    @extend_schema(responses={200: CartSerializer})
    def delete(self, request):
        return _cart_response(services.clear_cart(request.user))


class CartItemListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=AddToCartSerializer,
        responses={201: CartSerializer, 400: ErrorSerializer, 404: ErrorSerializer},
    )
    def post(self, request):
        serializer = AddToCartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = services.add_to_cart(
            request.user,
            serializer.validated_data['product_id'],
            serializer.validated_data['quantity'],
        )
        return _cart_response(cart, status.HTTP_201_CREATED)


class CartItemDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=UpdateCartItemSerializer, responses={200: CartSerializer})
    def put(self, request, item_id):
        serializer = UpdateCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = services.update_cart_item(request.user, item_id, serializer.validated_data['quantity'])
        return _cart_response(cart)

    @extend_schema(responses={200: CartSerializer})
    def delete(self, request, item_id):
        return _cart_response(services.remove_cart_item(request.user, item_id))


class OrderListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        parameters=[OpenApiParameter('status', str), OpenApiParameter('page', int), OpenApiParameter('limit', int)],
        responses={200: OrderSerializer(many=True)},
    )
    def get(self, request):
        rows, pagination = services.list_orders(request.user, request.query_params)
        return success_response(OrderSerializer(rows, many=True).data, pagination=pagination)

    @extend_schema(
        request=CreateOrderSerializer,
        responses={201: OrderSerializer, 400: ErrorSerializer, 404: ErrorSerializer},
        description="Place an order from the current cart",
        examples=[
            OpenApiExample(
                "Checkout",
                value={
                    "shipping_address_id": "3f1c9a4e-2a57-4b8e-9c1e-0d5f3b2a7c11",
                    "payment_method": "credit_card",
                    "notes": "Please ring twice",
                },
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order = services.create_order(
            request.user,
            shipping_address_id=data['shipping_address_id'],
            billing_address_id=data.get('billing_address_id'),
            payment_method=data['payment_method'],
            notes=data.get('notes'),
        )
        return success_response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: OrderSerializer})
    def get(self, request, order_id):
        return success_response(OrderSerializer(services.get_order(request.user, order_id)).data)


class OrderCancelView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: OrderSerializer})
    def put(self, request, order_id):
        order = services.cancel_order(request.user, order_id)
        return success_response(OrderSerializer(order).data, message='Order cancelled successfully')


class AdminOrderListView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(
        parameters=[
            OpenApiParameter('status', str),
            OpenApiParameter('user_id', str),
            OpenApiParameter('order_number', str),
            OpenApiParameter('page', int),
            OpenApiParameter('limit', int),
        ],
        responses={200: OrderSerializer(many=True)},
    )
    def get(self, request):
        rows, pagination = services.list_all_orders(request.query_params)
        return success_response(OrderSerializer(rows, many=True).data, pagination=pagination)


class AdminOrderDetailView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(responses={200: OrderSerializer})
    def get(self, request, order_id):
        return success_response(OrderSerializer(services.get_order_admin(order_id)).data)


class AdminOrderStatusView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(request=OrderStatusUpdateSerializer, responses={200: OrderSerializer})
    def put(self, request, order_id):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = services.update_order_status(
            order_id,
            status=serializer.validated_data.get('status'),
            payment_status=serializer.validated_data.get('payment_status'),
        )
        return success_response(OrderSerializer(order).data)
