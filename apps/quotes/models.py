"""
Quotes Models - Event Quote Requests
Tables: Quotes, QuoteItems
"""
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from apps.core.models import BaseModel


class Quote(BaseModel):
    """
    A customer's request for a priced proposal (weddings, corporate events...).

    requested -> processing -> sent -> accepted | declined
    Any non-terminal quote may become expired.
    """
    STATUS_REQUESTED = 'requested'
    STATUS_PROCESSING = 'processing'
    STATUS_SENT = 'sent'
    STATUS_ACCEPTED = 'accepted'
    STATUS_DECLINED = 'declined'
    STATUS_EXPIRED = 'expired'
    STATUS_CHOICES = [
        (STATUS_REQUESTED, 'Requested'),
        (STATUS_PROCESSING, 'Processing'),
        (STATUS_SENT, 'Sent'),
        (STATUS_ACCEPTED, 'Accepted'),
        (STATUS_DECLINED, 'Declined'),
        (STATUS_EXPIRED, 'Expired'),
    ]
    OPEN_STATUSES = (STATUS_REQUESTED, STATUS_PROCESSING, STATUS_SENT)

    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='quotes')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_REQUESTED)
    description = models.TextField()
    event_type = models.CharField(max_length=100)
    event_date = models.DateField(blank=True, null=True)
    budget = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    client_comment = models.TextField(blank=True, null=True)
    admin_comment = models.TextField(blank=True, null=True)
    validity_date = models.DateField(blank=True, null=True)

    class Meta:
        db_table = 'quotes_quotes'
        verbose_name = 'Quote'
        verbose_name_plural = 'Quotes'
        ordering = ['-created_at']

    def __str__(self):
        return f"Quote {self.id} ({self.event_type}, {self.status})"

    @property
    def total_amount(self) -> Decimal:
        return sum((item.quantity * item.unit_price for item in self.items.all()), Decimal('0.00'))


class QuoteItem(BaseModel):
    quote = models.ForeignKey(Quote, on_delete=models.CASCADE, related_name='items')
    description = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])

    class Meta:
        db_table = 'quotes_quote_items'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.quantity} x {self.description}"
