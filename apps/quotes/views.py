"""
API Views for quotes
"""
import logging

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from api.permissions import IsAdminRole
from api.responses import success_response
from . import services
from .serializers import (
    AdminQuoteSerializer,
    AdminQuoteUpdateSerializer,
    DeclineQuoteSerializer,
    QuoteRequestSerializer,
    QuoteSerializer,
)

logger = logging.getLogger(__name__)


class QuoteListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(parameters=[OpenApiParameter('status', str)], responses={200: QuoteSerializer(many=True)})
    def get(self, request):
        rows, pagination = services.list_quotes(request.user, request.query_params)
        return success_response(QuoteSerializer(rows, many=True).data, pagination=pagination)

    @extend_schema(request=QuoteRequestSerializer, responses={201: QuoteSerializer})
    def post(self, request):
        serializer = QuoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        quote = services.request_quote(request.user, serializer.validated_data)
        return success_response(QuoteSerializer(quote).data, status=status.HTTP_201_CREATED)


class QuoteDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: QuoteSerializer})
    def get(self, request, quote_id):
        return success_response(QuoteSerializer(services.get_quote(request.user, quote_id)).data)

    @extend_schema(request=QuoteRequestSerializer, responses={200: QuoteSerializer})
    def put(self, request, quote_id):
        serializer = QuoteRequestSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        quote = services.update_quote(request.user, quote_id, serializer.validated_data)
        return success_response(QuoteSerializer(quote).data)


class QuoteAcceptView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: QuoteSerializer})
    def put(self, request, quote_id):
        quote = services.accept_quote(request.user, quote_id)
        return success_response(QuoteSerializer(quote).data, message='Quote accepted')


class QuoteDeclineView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=DeclineQuoteSerializer, responses={200: QuoteSerializer})
    def put(self, request, quote_id):
        serializer = DeclineQuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        quote = services.decline_quote(
            request.user, quote_id, serializer.validated_data.get('decline_reason')
        )
        return success_response(QuoteSerializer(quote).data, message='Quote declined')


class AdminQuoteListView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(
        parameters=[
            OpenApiParameter('status', str),
            OpenApiParameter('user_id', str),
            OpenApiParameter('event_type', str),
            OpenApiParameter('from_date', str, description="YYYY-MM-DD, on event_date"),
            OpenApiParameter('to_date', str, description="YYYY-MM-DD, on event_date"),
        ],
        responses={200: AdminQuoteSerializer(many=True)},
    )
    def get(self, request):
        rows, pagination = services.list_all_quotes(request.query_params)
        return success_response(AdminQuoteSerializer(rows, many=True).data, pagination=pagination)


class AdminQuoteDetailView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(responses={200: AdminQuoteSerializer})
    def get(self, request, quote_id):
        return success_response(AdminQuoteSerializer(services.get_quote_admin(quote_id)).data)

    @extend_schema(request=AdminQuoteUpdateSerializer, responses={200: AdminQuoteSerializer})
    def put(self, request, quote_id):
        serializer = AdminQuoteUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        quote = services.update_quote_admin(quote_id, serializer.validated_data)
        return success_response(AdminQuoteSerializer(quote).data)
