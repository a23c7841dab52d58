"""
Serializers de Autenticação - Imobiliária API
=============================================
"""

from datetime import date

from django.contrib.auth import authenticate
from django.contrib.auth.models import update_last_login
from rest_framework import exceptions, serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.settings import api_settings

from imobiliaria.serializers import BaseModelSerializer, WriteSerializer, optional, run_validator
from imobiliaria.validators import sanitize_email, validate_name

from .models import User

MIN_PASSWORD_LENGTH = 6
MIN_AGE_YEARS = 16


def validate_new_password(value):
    if len(value) < MIN_PASSWORD_LENGTH:
        raise serializers.ValidationError(f"Senha deve ter no mínimo {MIN_PASSWORD_LENGTH} caracteres")
    return value


class LoginSerializer(TokenObtainPairSerializer):
    """
    Login com e-mail e senha
    """

    username_field = "email"

    def validate(self, attrs):
        email = attrs.get("email", "").strip().lower()
        user = authenticate(self.context.get("request"), email=email, password=attrs.get("password"))
        if user is None:
            raise exceptions.AuthenticationFailed("Email ou senha incorretos")
        self.user = user
        if api_settings.UPDATE_LAST_LOGIN:
            update_last_login(None, user)
        refresh = self.get_token(user)
        return {"refresh": str(refresh), "access": str(refresh.access_token)}

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["email"] = user.email
        token["role"] = user.role
        return token


class UserSerializer(BaseModelSerializer):
    """
    Serializer para User (leitura)
    """

    role_display = serializers.CharField(source="get_role_display", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "birth_date",
            "gender",
            "role",
            "role_display",
            "last_login",
            "created_at",
            "updated_at",
            "deleted_at",
        ]


class UserWriteSerializer(WriteSerializer):
    """
    Entrada de criação/atualização de usuários
    """

    email = serializers.CharField(max_length=254)
    password = serializers.CharField(write_only=True, required=False)

    class Meta(WriteSerializer.Meta):
        model = User
        fields = ["name", "email", "password", "birth_date", "gender", "role"]
        extra_kwargs = {
            "birth_date": {"required": True},
            "gender": {"required": True},
            "role": {"required": False},
        }

    def validate_name(self, value):
        return run_validator(validate_name, value)

    def validate_email(self, value):
        return run_validator(sanitize_email, value)

    def validate_password(self, value):
        return validate_new_password(value)

    def validate_birth_date(self, value):
        if value is None:
            return value
        today = date.today()
        if value >= today:
            raise serializers.ValidationError("Data de nascimento deve ser no passado")
        try:
            limit = today.replace(year=today.year - MIN_AGE_YEARS)
        except ValueError:
            limit = today.replace(year=today.year - MIN_AGE_YEARS, day=28)
        if value > limit:
            raise serializers.ValidationError(f"Usuário deve ter pelo menos {MIN_AGE_YEARS} anos")
        return value

    def validate(self, data):
        if not self.partial and not data.get("password"):
            raise serializers.ValidationError({"password": "Senha é obrigatória"})
        return data


class ChangePasswordSerializer(serializers.Serializer):
    """
    Serializer para mudança de senha
    """

    oldPassword = serializers.CharField()
    newPassword = serializers.CharField()

    def validate_newPassword(self, value):
        return validate_new_password(value)


class TokenSerializer(serializers.Serializer):
    token = serializers.CharField()


class RefreshTokenSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()

    def validate_email(self, value):
        return optional(sanitize_email, value)


class PasswordResetSerializer(serializers.Serializer):
    token = serializers.CharField()
    newPassword = serializers.CharField()

    def validate_newPassword(self, value):
        return validate_new_password(value)
