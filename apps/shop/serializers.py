"""
Shop serializers: cart payloads, checkout input and orders
"""
from rest_framework import serializers

from apps.accounts.serializers import AddressSerializer
from apps.catalog.serializers import ProductImageSerializer, ProductSerializer
from apps.catalog.models import Product
from .models import CartItem, Order, OrderItem


class CartItemSerializer(serializers.ModelSerializer):
    product = ProductSerializer(read_only=True)

    class Meta:
        model = CartItem
        fields = ['id', 'product', 'quantity', 'unit_price', 'created_at', 'updated_at']


class CartSerializer(serializers.Serializer):
    """Renders the dict returned by shop.services.cart_summary."""
    id = serializers.UUIDField(source='cart.id')
    items = CartItemSerializer(many=True)
    total = serializers.CharField()
    item_count = serializers.IntegerField()


class AddToCartSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class UpdateCartItemSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=0, help_text="0 removes the line")


class OrderProductSerializer(serializers.ModelSerializer):
    images = ProductImageSerializer(many=True, read_only=True)

    class Meta:
        model = Product
        fields = ['id', 'name', 'sku', 'images']


class OrderItemSerializer(serializers.ModelSerializer):
    product = OrderProductSerializer(read_only=True)

    class Meta:
        model = OrderItem
        fields = ['id', 'product', 'quantity', 'unit_price']


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    shipping_address = AddressSerializer(read_only=True)
    billing_address = AddressSerializer(read_only=True)
    user_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'user_id', 'status', 'payment_status', 'payment_method',
            'total_amount', 'shipping_address', 'billing_address', 'notes', 'items',
            'created_at', 'updated_at',
        ]


class CreateOrderSerializer(serializers.Serializer):
    shipping_address_id = serializers.UUIDField()
    billing_address_id = serializers.UUIDField(required=False, allow_null=True)
    payment_method = serializers.ChoiceField(choices=Order.PAYMENT_METHOD_CHOICES)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES, required=False)
    payment_status = serializers.ChoiceField(choices=Order.PAYMENT_STATUS_CHOICES, required=False)

    def validate(self, attrs):
        if not attrs.get('status') and not attrs.get('payment_status'):
            raise serializers.ValidationError('Provide status or payment_status')
        return attrs
