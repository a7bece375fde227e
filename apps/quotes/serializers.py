"""
Quote serializers
"""
from rest_framework import serializers

from apps.accounts.serializers import UserSerializer
from .models import Quote, QuoteItem


class QuoteItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuoteItem
        fields = ['id', 'description', 'quantity', 'unit_price']


class QuoteSerializer(serializers.ModelSerializer):
    items = QuoteItemSerializer(many=True, read_only=True)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Quote
        fields = [
            'id', 'status', 'description', 'event_type', 'event_date', 'budget',
            'client_comment', 'admin_comment', 'validity_date', 'items', 'total_amount',
            'created_at', 'updated_at',
        ]


class AdminQuoteSerializer(QuoteSerializer):
    user = UserSerializer(read_only=True)

    class Meta(QuoteSerializer.Meta):
        fields = QuoteSerializer.Meta.fields + ['user']


class QuoteRequestSerializer(serializers.Serializer):
    description = serializers.CharField(min_length=10)
    event_type = serializers.CharField(min_length=2, max_length=100)
    event_date = serializers.DateField(required=False, allow_null=True)
    budget = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True)
    client_comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class DeclineQuoteSerializer(serializers.Serializer):
    decline_reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class QuoteItemInputSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255)
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)


class AdminQuoteUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Quote.STATUS_CHOICES, required=False)
    admin_comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    validity_date = serializers.DateField(required=False, allow_null=True)
    items = QuoteItemInputSerializer(many=True, required=False)
