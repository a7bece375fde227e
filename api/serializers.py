"""
API Serializers shared across apps
"""
from rest_framework import serializers


class HealthCheckSerializer(serializers.Serializer):
    """
    Response serializer for health check.
    """
    status = serializers.CharField(help_text="healthy or degraded")
    version = serializers.CharField()
    database = serializers.CharField()
    cache = serializers.DictField(help_text="Response cache statistics")
    timestamp = serializers.DateTimeField()


class ErrorSerializer(serializers.Serializer):
    """
    Shape of every error response.
    """
    success = serializers.BooleanField(default=False)
    message = serializers.CharField()
    errors = serializers.DictField(required=False)
