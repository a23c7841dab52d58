"""
Testes da infraestrutura HTTP - Imobiliária API
===============================================
"""

import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from rest_framework import status
from rest_framework.exceptions import Throttled
from rest_framework.exceptions import ValidationError as DRFValidationError

from imobiliaria.exceptions import (
    THROTTLED_MESSAGE,
    DomainError,
    ErrorKind,
    custom_exception_handler,
    format_validation_errors,
)
from imobiliaria.pagination import MAX_PAGE, paginated_result
from imobiliaria.responses import success_response
from imobiliaria.throttling import parse_window_rate


@pytest.mark.unit
class TestDomainErrorMapping:
    @pytest.mark.parametrize(
        "error, expected_status",
        [
            (DomainError.not_found("Owner not found"), status.HTTP_404_NOT_FOUND),
            (DomainError.conflict("CPF already exists"), status.HTTP_409_CONFLICT),
            (DomainError.validation("Dados inválidos"), status.HTTP_400_BAD_REQUEST),
            (DomainError.internal(), status.HTTP_500_INTERNAL_SERVER_ERROR),
        ],
    )
    def test_kind_selects_status(self, error, expected_status):
        response = custom_exception_handler(error, {})
        assert response.status_code == expected_status
        assert response.data["success"] is False
        assert response.data["message"] == error.message

    def test_validation_carries_errors(self):
        response = custom_exception_handler(DomainError.validation("Dados inválidos", ["a", "b"]), {})
        assert response.data["errors"] == ["a", "b"]

    def test_not_found_has_no_errors_key(self):
        response = custom_exception_handler(DomainError.not_found("Tenant not found"), {})
        assert "errors" not in response.data

    def test_repr(self):
        assert repr(DomainError(ErrorKind.CONFLICT, "x")) == "DomainError(CONFLICT, 'x')"

    def test_drf_validation_error_is_flattened(self):
        exc = DRFValidationError({"name": ["Campo obrigatório"], "address": {"city": ["Inválida"]}})
        response = custom_exception_handler(exc, {})
        assert response.status_code == 400
        assert response.data["message"] == "Validation error"
        assert response.data["errors"] == ["name: Campo obrigatório", "address.city: Inválida"]

    def test_django_validation_error(self):
        response = custom_exception_handler(DjangoValidationError({"cpf": ["CPF inválido"]}), {})
        assert response.status_code == 400
        assert response.data["errors"] == ["cpf: CPF inválido"]

    def test_throttled(self):
        response = custom_exception_handler(Throttled(wait=60), {})
        assert response.status_code == 429
        assert response.data == {"success": False, "message": THROTTLED_MESSAGE}

    def test_unexpected_error_is_internal(self):
        response = custom_exception_handler(RuntimeError("boom"), {})
        assert response.status_code == 500
        assert response.data["message"] == "Internal server error"

    def test_unique_integrity_error_is_conflict(self):
        response = custom_exception_handler(IntegrityError("UNIQUE constraint failed: cadastros_owner.cpf"), {})
        assert response.status_code == 409
        assert response.data["message"] == "Unique constraint failed"

    @pytest.mark.parametrize("message", ["datatype mismatch", "NOT NULL constraint failed: imoveis_property.title"])
    def test_other_integrity_errors_are_internal(self, message):
        response = custom_exception_handler(IntegrityError(message), {})
        assert response.status_code == 500
        assert response.data == {"success": False, "message": "Internal server error"}


@pytest.mark.unit
class TestFormatValidationErrors:
    def test_non_field_errors_have_no_prefix(self):
        assert format_validation_errors({"non_field_errors": ["Informe CPF ou CNPJ"]}) == ["Informe CPF ou CNPJ"]

    def test_nested_lists(self):
        errors = {"addresses": [{"zip_code": ["Obrigatório"]}, {}]}
        assert format_validation_errors(errors) == ["addresses.zip_code: Obrigatório"]


@pytest.mark.unit
class TestEnvelopes:
    def test_success_response(self):
        response = success_response({"id": 1}, "Owner created successfully", status.HTTP_201_CREATED)
        assert response.status_code == 201
        assert response.data == {"success": True, "data": {"id": 1}, "message": "Owner created successfully"}

    def test_success_response_without_message(self):
        assert "message" not in success_response([]).data

    def test_paginated_result(self):
        page = paginated_result(["a"], 21, 10, 3)
        assert dict(page) == {"data": ["a"], "count": 21, "totalPages": 3, "currentPage": 3}
        assert paginated_result([], 0, 10, 1)["totalPages"] == 0


@pytest.mark.unit
class TestParseWindowRate:
    @pytest.mark.parametrize(
        "rate, expected",
        [
            ("100/15m", (100, 900)),
            ("100/15min", (100, 900)),
            ("10/s", (10, 1)),
            ("1000/1h", (1000, 3600)),
            ("5/day", (5, 86400)),
            (None, (None, None)),
        ],
    )
    def test_rates(self, rate, expected):
        assert parse_window_rate(rate) == expected

    def test_invalid_rate(self):
        with pytest.raises(ValueError):
            parse_window_rate("cem por minuto")


@pytest.mark.django_db
@pytest.mark.views
class TestInfrastructureEndpoints:
    def test_health_is_public(self, api_client):
        response = api_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["service"] == "Imobiliaria API"
        assert body["uptime"] >= 0
        assert "timestamp" in body

    def test_health_with_trailing_slash(self, api_client):
        assert api_client.get("/health/").status_code == 200

    def test_unknown_route(self, api_client):
        response = api_client.get("/api/nao-existe")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Route not found", "path": "/api/nao-existe"}

    def test_api_responses_are_not_cached(self, auth_client):
        response = auth_client.get("/api/owners")
        assert response.status_code == 200
        assert response["Cache-Control"] == "no-cache, no-store, must-revalidate"
        assert response["Pragma"] == "no-cache"
        assert response["Expires"] == "0"
        assert response["X-Content-Type-Options"] == "nosniff"

    def test_authentication_required(self, api_client):
        response = api_client.get("/api/owners")
        assert response.status_code == 401
        assert response.json()["success"] is False

    @pytest.mark.parametrize(
        "path",
        ["/api/owners", "/api/owners/", "/api/tenants", "/api/owners/filters", "/api/dashboard/financial"],
    )
    def test_trailing_slash_is_optional(self, auth_client, path):
        response = auth_client.get(path, {"startDate": "2024-01-01", "endDate": "2024-01-31"})
        assert response.status_code == 200

    def test_post_without_trailing_slash_is_not_redirected(self, auth_client):
        response = auth_client.post("/api/property-types", {"description": "Galpão"}, format="json")
        assert response.status_code == 201
        property_type_id = response.json()["data"]["id"]

        response = auth_client.get(f"/api/property-types/{property_type_id}")
        assert response.status_code == 200

        response = auth_client.patch(f"/api/property-types/{property_type_id}/restore")
        assert response.status_code == 400

    def test_huge_page_is_clamped(self, auth_client, owner):
        response = auth_client.get("/api/owners", {"page": "100000000000000000000"})
        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["count"] == 1
        assert body["currentPage"] == MAX_PAGE
