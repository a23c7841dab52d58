"""
Testes de Autenticação e Usuários - Imobiliária API
===================================================
"""

import pytest
from django.core import mail
from rest_framework import status
from rest_framework.test import APIClient

from authentication.models import User
from authentication.services import make_reset_token
from conftest import bearer_client


def user_payload(**overrides):
    return {
        "name": "Paula Gestora",
        "email": "paula@test.com",
        "password": "segura123",
        "birth_date": "1990-05-20",
        "gender": "FEMALE",
        **overrides,
    }


@pytest.mark.django_db
@pytest.mark.views
class TestLogin:
    def test_login_success(self, api_client, default_user):
        response = api_client.post("/api/auth/login", {"email": "corretor@test.com", "password": "corretor123"}, format="json")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Login realizado com sucesso!"
        assert body["data"]["user"]["email"] == "corretor@test.com"
        assert body["data"]["expiresIn"] == "8h"
        assert body["data"]["token"]
        assert body["data"]["refresh"]

        default_user.refresh_from_db()
        assert default_user.last_login is not None

    def test_login_is_case_insensitive_on_email(self, api_client, default_user):
        response = api_client.post("/api/auth/login", {"email": "Corretor@Test.com", "password": "corretor123"}, format="json")
        assert response.status_code == status.HTTP_200_OK

    def test_wrong_password(self, api_client, default_user):
        response = api_client.post("/api/auth/login", {"email": "corretor@test.com", "password": "errada"}, format="json")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"success": False, "message": "Email ou senha incorretos"}

    def test_deleted_user_cannot_login(self, api_client, default_user):
        default_user.soft_delete()
        response = api_client.post("/api/auth/login", {"email": "corretor@test.com", "password": "corretor123"}, format="json")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_missing_fields(self, api_client):
        response = api_client.post("/api/auth/login", {}, format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
@pytest.mark.views
class TestTokens:
    def login(self, client):
        response = client.post("/api/auth/login", {"email": "corretor@test.com", "password": "corretor123"}, format="json")
        return response.json()["data"]

    def test_refresh(self, api_client, default_user):
        tokens = self.login(api_client)
        response = api_client.post("/api/auth/refresh-token", {"refresh": tokens["refresh"]}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Token renovado com sucesso"
        assert response.json()["data"]["token"]

    def test_refresh_with_invalid_token(self, api_client):
        response = api_client.post("/api/auth/refresh-token", {"refresh": "invalido"}, format="json")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["success"] is False

    def test_verify(self, api_client, default_user):
        tokens = self.login(api_client)
        response = api_client.post("/api/auth/verify-token", {"token": tokens["token"]}, format="json")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["valid"] is True
        assert data["decoded"]["email"] == "corretor@test.com"
        assert data["decoded"]["role"] == User.ROLE_DEFAULT

    def test_verify_invalid(self, api_client):
        response = api_client.post("/api/auth/verify-token", {"token": "abc.def.ghi"}, format="json")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_blacklists_refresh_token(self, api_client, default_user):
        tokens = self.login(api_client)
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['token']}")

        response = api_client.post("/api/auth/logout", {"refresh": tokens["refresh"]}, format="json")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Logout realizado com sucesso"

        response = api_client.post("/api/auth/refresh-token", {"refresh": tokens["refresh"]}, format="json")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_requires_authentication(self, api_client):
        assert api_client.post("/api/auth/logout", {}, format="json").status_code == status.HTTP_401_UNAUTHORIZED

    def test_me(self, auth_client):
        response = auth_client.get("/api/auth/me")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["name"] == "João Corretor"
        assert response.json()["data"]["role_display"] == "Padrão"

    def test_token_of_deleted_user_is_rejected(self, auth_client, default_user):
        default_user.soft_delete()
        assert auth_client.get("/api/auth/me").status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
@pytest.mark.views
class TestPasswords:
    def test_change_own_password(self, auth_client, default_user):
        response = auth_client.post(
            f"/api/auth/change-password/{default_user.pk}",
            {"oldPassword": "corretor123", "newPassword": "novasenha1"},
            format="json",
        )
        assert response.status_code == status.HTTP_200_OK
        default_user.refresh_from_db()
        assert default_user.check_password("novasenha1")

    def test_change_password_with_wrong_current(self, auth_client, default_user):
        response = auth_client.post(
            f"/api/auth/change-password/{default_user.pk}",
            {"oldPassword": "errada", "newPassword": "novasenha1"},
            format="json",
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Senha atual incorreta"

    def test_short_new_password(self, auth_client, default_user):
        response = auth_client.patch(
            f"/api/users/{default_user.pk}/change-password",
            {"oldPassword": "corretor123", "newPassword": "123"},
            format="json",
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cannot_change_other_users_password(self, auth_client, admin_user):
        response = auth_client.post(
            f"/api/auth/change-password/{admin_user.pk}",
            {"oldPassword": "admin123", "newPassword": "novasenha1"},
            format="json",
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_reset_flow(self, api_client, default_user):
        response = api_client.post("/api/auth/request-password-reset", {"email": "corretor@test.com"}, format="json")
        assert response.status_code == status.HTTP_200_OK
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ["corretor@test.com"]

        token = mail.outbox[0].body.split("\n\n")[2]
        response = api_client.post("/api/auth/reset-password", {"token": token, "newPassword": "redefinida1"}, format="json")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Senha redefinida com sucesso"

        default_user.refresh_from_db()
        assert default_user.check_password("redefinida1")

    def test_reset_token_is_single_use(self, api_client, default_user):
        token = make_reset_token(default_user)
        api_client.post("/api/auth/reset-password", {"token": token, "newPassword": "redefinida1"}, format="json")

        response = api_client.post("/api/auth/reset-password", {"token": token, "newPassword": "outra1234"}, format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Token inválido ou expirado"

    def test_reset_request_for_unknown_email_does_not_leak(self, api_client):
        response = api_client.post("/api/auth/request-password-reset", {"email": "ninguem@test.com"}, format="json")
        assert response.status_code == status.HTTP_200_OK
        assert len(mail.outbox) == 0

    def test_malformed_reset_token(self, api_client):
        response = api_client.post("/api/auth/reset-password", {"token": "lixo", "newPassword": "redefinida1"}, format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
@pytest.mark.views
class TestUserManagement:
    def test_admin_creates_user(self, admin_client):
        response = admin_client.post("/api/users", user_payload(role=User.ROLE_ADMIN), format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["message"] == "User created successfully"
        assert "password" not in response.json()["data"]
        user = User.objects.get(email="paula@test.com")
        assert user.is_admin
        assert user.check_password("segura123")

    def test_default_user_cannot_create(self, auth_client):
        response = auth_client.post("/api/users", user_payload(), format="json")
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_duplicate_email_conflicts_even_when_deleted(self, admin_client, default_user):
        default_user.soft_delete()
        response = admin_client.post("/api/users", user_payload(email="CORRETOR@test.com"), format="json")
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["message"] == "Email already registered"

    def test_password_is_required_on_create(self, admin_client):
        payload = user_payload()
        payload.pop("password")
        response = admin_client.post("/api/users", payload, format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_birth_date_must_be_in_the_past(self, admin_client):
        response = admin_client.post("/api/users", user_payload(birth_date="2999-01-01"), format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_user_updates_self_but_not_role(self, auth_client, default_user):
        response = auth_client.put(
            f"/api/users/{default_user.pk}", {"name": "João Silva", "role": User.ROLE_ADMIN}, format="json"
        )
        assert response.status_code == status.HTTP_200_OK
        default_user.refresh_from_db()
        assert default_user.name == "João Silva"
        assert default_user.role == User.ROLE_DEFAULT

    def test_user_cannot_update_others(self, auth_client, admin_user):
        response = auth_client.put(f"/api/users/{admin_user.pk}", {"name": "Outro Nome"}, format="json")
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_users(self, auth_client, admin_user):
        response = auth_client.get("/api/users", {"filter[role]": User.ROLE_ADMIN})
        assert response.status_code == status.HTTP_200_OK
        assert [user["email"] for user in response.json()["data"]] == ["admin@test.com"]

    def test_admin_deletes_and_restores(self, admin_client, default_user):
        response = admin_client.delete(f"/api/users/{default_user.pk}")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "User deleted successfully"

        response = admin_client.patch(f"/api/users/{default_user.pk}/restore")
        assert response.status_code == status.HTTP_200_OK
        default_user.refresh_from_db()
        assert default_user.is_active

    def test_default_user_cannot_delete(self, auth_client, admin_user):
        assert auth_client.delete(f"/api/users/{admin_user.pk}").status_code == status.HTTP_403_FORBIDDEN

    def test_anonymous_is_rejected(self):
        assert APIClient().get("/api/users").status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
@pytest.mark.models
class TestUserModel:
    def test_email_is_normalized(self):
        user = User.objects.create_user(email="Fulano@Exemplo.COM", password="x123456", name="Fulano")
        assert user.email == "fulano@exemplo.com"
        assert user.role == User.ROLE_DEFAULT
        assert not user.is_admin

    def test_superuser(self):
        user = User.objects.create_superuser(email="root@test.com", password="x123456", name="Root")
        assert user.is_staff
        assert user.is_superuser
        assert user.is_admin
        assert bearer_client(user).get("/api/users").status_code == status.HTTP_200_OK

    def test_requires_email(self):
        with pytest.raises(ValueError):
            User.objects.create_user(email="", password="x123456", name="Sem Email")
