"""
Accounts URL Configuration
"""
from django.urls import path

from .views import (
    AddressDetailView,
    AddressListView,
    AddressSetDefaultView,
    ChangePasswordView,
    ForgotPasswordView,
    LoginView,
    LogoutView,
    MeView,
    RefreshTokenView,
    RegisterView,
    ResetPasswordView,
)

auth_urlpatterns = [
    path('register/', RegisterView.as_view(), name='auth-register'),
    path('login/', LoginView.as_view(), name='auth-login'),
    path('me/', MeView.as_view(), name='auth-me'),
    path('change-password/', ChangePasswordView.as_view(), name='auth-change-password'),
    path('forgot-password/', ForgotPasswordView.as_view(), name='auth-forgot-password'),
    path('reset-password/<str:token>/', ResetPasswordView.as_view(), name='auth-reset-password'),
    path('refresh-token/', RefreshTokenView.as_view(), name='auth-refresh-token'),
    path('logout/', LogoutView.as_view(), name='auth-logout'),
]

address_urlpatterns = [
    path('', AddressListView.as_view(), name='address-list'),
    path('<uuid:address_id>/', AddressDetailView.as_view(), name='address-detail'),
    path('<uuid:address_id>/default/', AddressSetDefaultView.as_view(), name='address-set-default'),
]
