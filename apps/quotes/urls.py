"""
Quotes URL Configuration
"""
from django.urls import path

from .views import (
    AdminQuoteDetailView,
    AdminQuoteListView,
    QuoteAcceptView,
    QuoteDeclineView,
    QuoteDetailView,
    QuoteListView,
)

quote_urlpatterns = [
    path('', QuoteListView.as_view(), name='quote-list'),
    path('admin/', AdminQuoteListView.as_view(), name='admin-quote-list'),
    path('admin/<uuid:quote_id>/', AdminQuoteDetailView.as_view(), name='admin-quote-detail'),
    path('<uuid:quote_id>/', QuoteDetailView.as_view(), name='quote-detail'),
    path('<uuid:quote_id>/accept/', QuoteAcceptView.as_view(), name='quote-accept'),
    path('<uuid:quote_id>/decline/', QuoteDeclineView.as_view(), name='quote-decline'),
]
