"""
API Views for accounts

- Auth: register, login, me, password management, token refresh, logout
- Address book: CRUD plus set-default
"""
import logging

from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from api.responses import success_response
from api.serializers import ErrorSerializer
from . import services
from .serializers import (
    AddressSerializer,
    AddressWriteSerializer,
    ChangePasswordSerializer,
    ForgotPasswordSerializer,
    LoginSerializer,
    ProfileUpdateSerializer,
    RefreshTokenSerializer,
    RegisterSerializer,
    ResetPasswordSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


def _auth_payload(user, tokens):
    return {'user': UserSerializer(user).data, **tokens}


class RegisterView(APIView):
    """
    Create a client account and return a token pair.
    """
    permission_classes = [AllowAny]

    @extend_schema(
        request=RegisterSerializer,
        description="Register a new client account",
        examples=[
            OpenApiExample(
                "Registration",
                value={
                    "first_name": "Marie",
                    "last_name": "Curie",
                    "email": "marie@example.com",
                    "password": "roses123",
                },
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user, tokens = services.register_user(serializer.validated_data)
        return success_response(_auth_payload(user, tokens), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(
        request=LoginSerializer,
        responses={401: ErrorSerializer, 403: ErrorSerializer},
        description="Exchange credentials for a token pair",
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user, tokens = services.login_user(
            serializer.validated_data['email'],
            serializer.validated_data['password'],
        )
        return success_response(_auth_payload(user, tokens))


class MeView(APIView):
    """
    The authenticated user's own profile.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: UserSerializer})
    def get(self, request):
        return success_response(UserSerializer(request.user).data)

    @extend_schema(request=ProfileUpdateSerializer, responses={200: UserSerializer})
    def put(self, request):
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = services.update_profile(request.user, serializer.validated_data)
        return success_response(UserSerializer(user).data)


class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=ChangePasswordSerializer)
    def put(self, request):
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.change_password(
            request.user,
            serializer.validated_data['current_password'],
            serializer.validated_data['new_password'],
        )
        return success_response(message='Password updated successfully')


class ForgotPasswordView(APIView):
    """
    Always answers with the same message so callers cannot probe for accounts.
    """
    permission_classes = [AllowAny]

    @extend_schema(request=ForgotPasswordSerializer)
    def post(self, request):
        serializer = ForgotPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.request_password_reset(serializer.validated_data['email'])
        return success_response(
            message='If a user with that email exists, a password reset link will be sent'
        )


class ResetPasswordView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(request=ResetPasswordSerializer)
    def put(self, request, token):
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.reset_password(token, serializer.validated_data['password'])
        return success_response(message='Password reset successful')


class RefreshTokenView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(request=RefreshTokenSerializer)
    def post(self, request):
        serializer = RefreshTokenSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        tokens = services.refresh_tokens(serializer.validated_data['refresh_token'])
        return success_response(tokens)


class LogoutView(APIView):
    """
    Tokens are stateless; the client discards them.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None)
    def post(self, request):
        logger.info(f"User {request.user.id} logged out")
        return success_response(message='Logged out successfully')


class AddressListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: AddressSerializer(many=True)})
    def get(self, request):
        rows, pagination = services.list_addresses(request.user, request.query_params)
        return success_response(AddressSerializer(rows, many=True).data, pagination=pagination)

    @extend_schema(request=AddressWriteSerializer, responses={201: AddressSerializer})
    def post(self, request):
        serializer = AddressWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        address = services.create_address(request.user, serializer.validated_data)
        return success_response(AddressSerializer(address).data, status=status.HTTP_201_CREATED)


class AddressDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: AddressSerializer})
    def get(self, request, address_id):
        address = services.get_address(request.user, address_id)
        return success_response(AddressSerializer(address).data)

    @extend_schema(request=AddressWriteSerializer, responses={200: AddressSerializer})
    def put(self, request, address_id):
        serializer = AddressWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        address = services.update_address(request.user, address_id, serializer.validated_data)
        return success_response(AddressSerializer(address).data)

    def delete(self, request, address_id):
        promoted = services.delete_address(request.user, address_id)
        data = {'new_default_id': str(promoted.id)} if promoted else None
        return success_response(data, message='Address deleted successfully')


class AddressSetDefaultView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: AddressSerializer})
    def put(self, request, address_id):
        address = services.set_default_address(request.user, address_id)
        return success_response(AddressSerializer(address).data)
