"""
Catalog serializers

Product payloads carry a computed ``promotion`` block: the best running
promotion with its discount and final price, or null.
"""
from rest_framework import serializers

from .models import Category, Product, ProductImage, Promotion
from .pricing import effective_price


class CategorySerializer(serializers.ModelSerializer):
    parent_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Category
        fields = [
            'id', 'name', 'description', 'image_url', 'parent_id',
            'is_active', 'sort_order', 'created_at', 'updated_at',
        ]


class CategoryTreeSerializer(serializers.Serializer):
    """Renders a node built by catalog.services.category_tree."""

    def to_representation(self, node):
        data = CategorySerializer(node['category']).data
        data['children'] = [self.to_representation(child) for child in node['children']]
        return data


class CategoryWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, min_length=2)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    image_url = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    parent_id = serializers.UUIDField(required=False, allow_null=True)
    sort_order = serializers.IntegerField(required=False, min_value=0)
    is_active = serializers.BooleanField(required=False)


class ProductImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductImage
        fields = ['id', 'image_url', 'is_primary', 'sort_order']


class CategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name']


class ProductSerializer(serializers.ModelSerializer):
    category = CategorySummarySerializer(read_only=True)
    images = ProductImageSerializer(many=True, read_only=True)
    promotion = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'description', 'price', 'stock', 'sku', 'is_active',
            'category', 'images', 'promotion', 'created_at', 'updated_at',
        ]

    def get_promotion(self, product):
        priced = effective_price(product.price, product.promotions.all())
        return priced.as_dict() if priced else None


class ProductWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, min_length=2)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    stock = serializers.IntegerField(min_value=0, required=False, default=0)
    category_id = serializers.UUIDField(required=False, allow_null=True)
    sku = serializers.CharField(max_length=50, required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False, default=True)
    image_urls = serializers.ListField(
        child=serializers.CharField(max_length=500),
        required=False,
        help_text="Image URLs; the first one becomes the primary image",
    )


class PromotionProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ['id', 'name', 'price', 'stock']


class PromotionSerializer(serializers.ModelSerializer):
    products = PromotionProductSerializer(many=True, read_only=True)

    class Meta:
        model = Promotion
        fields = [
            'id', 'name', 'description', 'discount_type', 'discount_value',
            'start_date', 'end_date', 'is_active', 'products', 'created_at', 'updated_at',
        ]


class PromotionWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, min_length=2)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    discount_type = serializers.ChoiceField(choices=Promotion.DISCOUNT_TYPE_CHOICES)
    discount_value = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
    is_active = serializers.BooleanField(required=False, default=True)
    product_ids = serializers.ListField(child=serializers.UUIDField(), required=False)

    def validate(self, attrs):
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')
        if start_date and end_date and end_date <= start_date:
            raise serializers.ValidationError({'end_date': 'End date must be after start date'})
        if attrs.get('discount_type') == Promotion.TYPE_PERCENTAGE and attrs.get('discount_value', 0) > 100:
            raise serializers.ValidationError(
                {'discount_value': 'Percentage discount cannot exceed 100%'}
            )
        return attrs


class ProductIdsSerializer(serializers.Serializer):
    product_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
