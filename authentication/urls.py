"""
URLs para Autenticação - Imobiliária API
========================================
"""

from django.urls import include, path, re_path

from imobiliaria.routers import OptionalSlashRouter

from .views import (
    LoginView,
    UserViewSet,
    change_password_view,
    logout_view,
    me_view,
    refresh_token_view,
    request_password_reset_view,
    reset_password_view,
    verify_token_view,
)

app_name = "authentication"

router = OptionalSlashRouter()
router.register(r"users", UserViewSet, basename="user")

auth_patterns = [
    re_path(r"^login/?$", LoginView.as_view(), name="login"),
    re_path(r"^refresh-token/?$", refresh_token_view, name="refresh_token"),
    re_path(r"^verify-token/?$", verify_token_view, name="verify_token"),
    re_path(r"^logout/?$", logout_view, name="logout"),
    re_path(r"^me/?$", me_view, name="me"),
    re_path(r"^change-password/(?P<user_id>[0-9a-fA-F-]+)/?$", change_password_view, name="change_password"),
    re_path(r"^request-password-reset/?$", request_password_reset_view, name="request_password_reset"),
    re_path(r"^reset-password/?$", reset_password_view, name="reset_password"),
]

urlpatterns = [
    path("auth/", include(auth_patterns)),
    path("", include(router.urls)),
]
