"""
Views de Autenticação - Imobiliária API
=======================================
"""

import logging

from django.conf import settings
from rest_framework import exceptions, permissions, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken, UntypedToken
from rest_framework_simplejwt.views import TokenObtainPairView

from imobiliaria.exceptions import error_body
from imobiliaria.responses import success_response
from imobiliaria.viewsets import SoftDeleteResourceViewSet

from . import services
from .permissions import IsAdminRole, IsSelfOrAdmin
from .serializers import (
    ChangePasswordSerializer,
    LoginSerializer,
    PasswordResetRequestSerializer,
    PasswordResetSerializer,
    RefreshTokenSerializer,
    TokenSerializer,
    UserSerializer,
    UserWriteSerializer,
)
from .services import UserService

security_logger = logging.getLogger("security")


def expires_in():
    """Validade do access token no formato "8h" """
    hours = int(settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"].total_seconds() // 3600)
    return f"{hours}h"


def get_client_ip(request):
    """Obter IP do cliente"""
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def invalid_token_response(exc):
    return Response(error_body(str(exc) or "Token inválido"), status=status.HTTP_401_UNAUTHORIZED)


class LoginView(TokenObtainPairView):
    """
    Login com JWT: devolve usuário, access token, refresh token e validade
    """

    serializer_class = LoginSerializer

    def post(self, request, *args, **kwargs):
        email = request.data.get("email", "")
        serializer = self.get_serializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except (exceptions.AuthenticationFailed, exceptions.ValidationError):
            security_logger.warning(f"Falha de login para {email} - IP: {get_client_ip(request)}")
            raise

        user = serializer.user
        security_logger.info(f"Login bem-sucedido: {user.email} - IP: {get_client_ip(request)}")
        data = {
            "user": UserSerializer(user).data,
            "token": serializer.validated_data["access"],
            "refresh": serializer.validated_data["refresh"],
            "expiresIn": expires_in(),
        }
        return success_response(data, "Login realizado com sucesso!")


@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def refresh_token_view(request):
    """
    Novo access token a partir do refresh token
    """
    serializer = RefreshTokenSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        refresh = RefreshToken(serializer.validated_data["refresh"])
    except TokenError as exc:
        return invalid_token_response(exc)
    return success_response(
        {"token": str(refresh.access_token), "expiresIn": expires_in()}, "Token renovado com sucesso"
    )


@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def verify_token_view(request):
    """
    Verifica assinatura e validade de um token
    """
    serializer = TokenSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        token = UntypedToken(serializer.validated_data["token"])
    except TokenError as exc:
        return invalid_token_response(exc)
    return success_response({"valid": True, "decoded": dict(token.payload)}, "Token válido")


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def logout_view(request):
    """
    Logout invalidando o refresh token
    """
    refresh_token = request.data.get("refresh")
    if refresh_token:
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError as exc:
            return invalid_token_response(exc)
    security_logger.info(f"Logout: {request.user.email}")
    return success_response(None, "Logout realizado com sucesso")


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def me_view(request):
    """
    Obter dados do usuário atual
    """
    return success_response(UserSerializer(request.user).data, "Usuário atual recuperado com sucesso")


@api_view(["POST"])
@permission_classes([IsSelfOrAdmin])
def change_password_view(request, user_id):
    """
    Alterar senha de um usuário (o próprio ou qualquer um, para admins)
    """
    serializer = ChangePasswordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    UserService().change_password(
        user_id, serializer.validated_data["oldPassword"], serializer.validated_data["newPassword"]
    )
    return success_response(None, "Senha alterada com sucesso")


@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def request_password_reset_view(request):
    serializer = PasswordResetRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    result = services.request_password_reset(serializer.validated_data["email"])
    return success_response(result, result["message"])


@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def reset_password_view(request):
    serializer = PasswordResetSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    result = services.reset_password(serializer.validated_data["token"], serializer.validated_data["newPassword"])
    return success_response(result, result["message"])


class UserViewSet(SoftDeleteResourceViewSet):
    """
    ViewSet para gerenciamento de usuários
    """

    service_class = UserService
    serializer_class = UserWriteSerializer
    detail_serializer_class = UserSerializer

    def get_permissions(self):
        if self.action in ("create", "destroy", "restore"):
            return [IsAdminRole()]
        if self.action in ("update", "partial_update", "change_password"):
            return [IsSelfOrAdmin()]
        return super().get_permissions()

    def validated_data(self, request, partial=False):
        data = super().validated_data(request, partial)
        user = request.user
        if "role" in data and not (user.is_superuser or user.is_admin):
            data.pop("role")
        return data

    @action(detail=True, methods=["patch"], url_path="change-password")
    def change_password(self, request, pk=None):
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.get_service().change_password(
            pk, serializer.validated_data["oldPassword"], serializer.validated_data["newPassword"]
        )
        return success_response(None, "Senha alterada com sucesso")
