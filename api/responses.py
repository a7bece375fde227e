"""
Uniform success envelope for API responses
"""
from rest_framework import status as http_status
from rest_framework.response import Response


def success_response(data=None, message=None, pagination=None, status=http_status.HTTP_200_OK):
    """
    Build ``{success: true, data?, message?, pagination?}``.
    """
    payload = {"success": True}
    if message is not None:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    if pagination is not None:
        payload["pagination"] = pagination
    return Response(payload, status=status)
