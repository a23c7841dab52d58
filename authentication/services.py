"""
Services de Autenticação - Imobiliária API
==========================================
"""

import logging

from django.conf import settings
from django.contrib.auth.tokens import default_token_generator
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.mail import send_mail
from django.utils.encoding import force_bytes, force_str
from django.utils.http import urlsafe_base64_decode, urlsafe_base64_encode

from imobiliaria.exceptions import DomainError
from imobiliaria.query import QueryEngine
from imobiliaria.query.fields import DATE, EXACT, TIMESTAMP_FIELDS, direct
from imobiliaria.services import ResourceService

from .models import User

logger = logging.getLogger(__name__)
security_logger = logging.getLogger("security")

RESET_TOKEN_SEPARATOR = ":"
RESET_REQUESTED_MESSAGE = (
    "Se o email existir em nosso sistema, você receberá instruções para redefinir sua senha."
)

USER_FIELDS = {
    "name": direct("name", label="Nome"),
    "email": direct("email", label="E-mail"),
    "gender": direct("gender", EXACT, "Gênero"),
    "role": direct("role", EXACT, "Perfil"),
    "birth_date": direct("birth_date", DATE, "Data de nascimento"),
    **TIMESTAMP_FIELDS,
}


class UserService(ResourceService):
    model = User
    label = "User"
    engine = QueryEngine(USER_FIELDS, ("name", "email"))

    def check_unique(self, data, instance=None):
        """
        E-mail é o login: conflita com qualquer usuário, inclusive excluídos
        """
        email = data.get("email")
        if not email:
            return
        queryset = User.objects.filter(email__iexact=email)
        if instance is not None:
            queryset = queryset.exclude(pk=instance.pk)
        if queryset.exists():
            raise DomainError.conflict("Email already registered", field="email")

    def perform_create(self, data):
        password = data.pop("password")
        return User.objects.create_user(password=password, **data)

    def perform_update(self, instance, data):
        password = data.pop("password", None)
        if password:
            instance.set_password(password)
        return super().perform_update(instance, data)

    def change_password(self, pk, old_password, new_password):
        user = self.get(pk)
        if not user.check_password(old_password):
            security_logger.warning(f"Troca de senha com senha atual incorreta: {user.pk}")
            raise DomainError.validation("Senha atual incorreta")
        user.set_password(new_password)
        user.save(update_fields=["password", "updated_at"])
        logger.info(f"Senha alterada: {user.pk}")
        return user


def make_reset_token(user):
    uid = urlsafe_base64_encode(force_bytes(user.pk))
    return f"{uid}{RESET_TOKEN_SEPARATOR}{default_token_generator.make_token(user)}"


def request_password_reset(email):
    """
    Envia o token de redefinição por e-mail; a resposta não revela se o e-mail existe
    """
    user = User.objects.active().filter(email__iexact=email).first()
    if user is None:
        security_logger.info(f"Redefinição de senha solicitada para e-mail desconhecido: {email}")
        return {"success": True, "message": RESET_REQUESTED_MESSAGE}

    token = make_reset_token(user)
    send_mail(
        subject="Redefinição de senha",
        message=(
            f"Olá, {user.name}.\n\n"
            f"Use o código abaixo para redefinir sua senha:\n\n{token}\n\n"
            "Se você não solicitou a redefinição, ignore este e-mail."
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[user.email],
    )
    security_logger.info(f"Redefinição de senha solicitada: {user.pk}")
    return {"success": True, "message": RESET_REQUESTED_MESSAGE}


def reset_password(token, new_password):
    uid, _, raw_token = token.partition(RESET_TOKEN_SEPARATOR)
    try:
        user = User.objects.active().get(pk=force_str(urlsafe_base64_decode(uid)))
    except (User.DoesNotExist, ValueError, TypeError, DjangoValidationError) as exc:
        raise DomainError.validation("Token inválido ou expirado") from exc

    if not default_token_generator.check_token(user, raw_token):
        security_logger.warning(f"Token de redefinição inválido para {user.pk}")
        raise DomainError.validation("Token inválido ou expirado")

    user.set_password(new_password)
    user.save(update_fields=["password", "updated_at"])
    security_logger.info(f"Senha redefinida: {user.pk}")
    return {"success": True, "message": "Senha redefinida com sucesso"}
