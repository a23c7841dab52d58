"""
Modelos de Autenticação - Imobiliária API
=========================================
"""

from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.contrib.auth.models import PermissionsMixin
from django.db import models

from imobiliaria.models import BaseModel


class UserManager(BaseUserManager):
    """
    Manager de usuários identificados por e-mail
    """

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("O e-mail é obrigatório")
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("role", User.ROLE_DEFAULT)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("role", User.ROLE_ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        return self._create_user(email, password, **extra_fields)

    def active(self):
        return self.get_queryset().filter(deleted_at__isnull=True)


class User(AbstractBaseUser, PermissionsMixin, BaseModel):
    """
    Modelo de usuário customizado
    """

    ROLE_DEFAULT = "DEFAULT"
    ROLE_ADMIN = "ADMIN"
    ROLES = [
        (ROLE_DEFAULT, "Padrão"),
        (ROLE_ADMIN, "Administrador"),
    ]

    GENDERS = [
        ("MALE", "Masculino"),
        ("FEMALE", "Feminino"),
        ("OTHER", "Outro"),
    ]

    name = models.CharField(max_length=150)
    # Único em todas as linhas: o campo de login do Django precisa ser único
    email = models.EmailField(unique=True)
    birth_date = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=GENDERS, default="OTHER")
    role = models.CharField(max_length=10, choices=ROLES, default=ROLE_DEFAULT)
    is_staff = models.BooleanField(default=False)

    objects = UserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    class Meta(BaseModel.Meta):
        verbose_name = "Usuário"
        verbose_name_plural = "Usuários"

    def __str__(self):
        return f"{self.email} ({self.get_role_display()})"

    @property
    def is_active(self):
        """Usuários excluídos logicamente não autenticam"""
        return self.deleted_at is None

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN
