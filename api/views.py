"""
API Views shared across apps

- Health Check: database connectivity and response cache status
"""
import logging

from django.db import connection
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from apps.core.cache import get_response_cache
from .responses import success_response
from .serializers import HealthCheckSerializer

logger = logging.getLogger(__name__)

API_VERSION = '1.0.0'


class HealthCheckView(APIView):
    """
    System health check endpoint.

    Returns the status of the API, database connectivity,
    and response cache statistics.
    """
    permission_classes = [AllowAny]

    @extend_schema(
        responses={200: HealthCheckSerializer},
        description="Check system health status"
    )
    def get(self, request):
        db_status = "healthy"
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except Exception as e:
            logger.error(f"Health check database failure: {e}")
            db_status = f"unhealthy: {str(e)}"

        response_data = {
            "status": "healthy" if db_status == "healthy" else "degraded",
            "version": API_VERSION,
            "database": db_status,
            "cache": get_response_cache().get_stats(),
            "timestamp": timezone.now().isoformat(),
        }
        return success_response(response_data)
