"""
Configurações globais para testes - Imobiliária API
===================================================
"""

import os
from datetime import date
from decimal import Decimal

import pytest

# Configuração do Django ANTES de qualquer importação Django
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "imobiliaria.settings_test")

import django  # noqa: E402

django.setup()

from django.contrib.auth import get_user_model  # noqa: E402
from rest_framework.test import APIClient  # noqa: E402
from rest_framework_simplejwt.tokens import RefreshToken  # noqa: E402

from cadastros.models import Agency  # noqa: E402
from cadastros.services import OwnerService, TenantService  # noqa: E402
from imoveis.models import PropertyType  # noqa: E402
from imoveis.services import PropertyService  # noqa: E402
from locacoes.models import Lease  # noqa: E402

User = get_user_model()

# Documentos válidos (dígitos verificadores corretos)
VALID_CPFS = ["52998224725", "11144477735", "12345678909"]
VALID_CNPJS = ["11222333000181", "11444777000161"]


@pytest.fixture
def api_client():
    """
    Fixture que fornece um cliente de API para testes
    """
    return APIClient()


@pytest.fixture
def admin_user(db):
    """
    Fixture que cria um usuário administrador
    """
    return User.objects.create_user(
        email="admin@test.com",
        password="admin123",
        name="Admin Sistema",
        role=User.ROLE_ADMIN,
    )


@pytest.fixture
def default_user(db):
    """
    Fixture que cria um usuário comum
    """
    return User.objects.create_user(
        email="corretor@test.com",
        password="corretor123",
        name="João Corretor",
    )


def bearer_client(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(user).access_token}")
    return client


@pytest.fixture
def admin_client(admin_user):
    """
    Cliente autenticado (JWT) como administrador
    """
    return bearer_client(admin_user)


@pytest.fixture
def auth_client(default_user):
    """
    Cliente autenticado (JWT) como usuário comum
    """
    return bearer_client(default_user)


@pytest.fixture
def address_data():
    return {
        "zip_code": "01310-100",
        "street": "Avenida Paulista",
        "number": "1000",
        "district": "Bela Vista",
        "city": "São Paulo",
        "state": "SP",
    }


@pytest.fixture
def contact_data():
    return {
        "contact": "Maria Souza",
        "phone": "1133334444",
        "cellphone": "11988887777",
        "email": "maria@test.com",
    }


@pytest.fixture
def owner(db, address_data, contact_data):
    """
    Proprietário com endereço e contato
    """
    return OwnerService().create(
        {
            "name": "Carlos Proprietário",
            "internal_code": "P001",
            "cpf": VALID_CPFS[0],
            "occupation": "Empresário",
            "marital_status": "Casado",
            "addresses": [address_data],
            "contacts": [contact_data],
        }
    )


@pytest.fixture
def tenant(db):
    """
    Inquilino com endereço e contato
    """
    return TenantService().create(
        {
            "name": "Ana Inquilina",
            "internal_code": "I001",
            "cpf": VALID_CPFS[1],
            "occupation": "Professora",
            "marital_status": "Solteira",
            "addresses": [
                {
                    "zip_code": "20040-002",
                    "street": "Rua da Assembleia",
                    "number": "10",
                    "district": "Centro",
                    "city": "Rio de Janeiro",
                    "state": "RJ",
                }
            ],
            "contacts": [{"contact": "Ana", "cellphone": "21999998888", "email": "ana@test.com"}],
        }
    )


@pytest.fixture
def agency(db):
    return Agency.objects.create(trade_name="Imobiliária Central", legal_name="Central Imóveis LTDA", cnpj=VALID_CNPJS[0])


@pytest.fixture
def property_type(db):
    return PropertyType.objects.create(description="Casa")


@pytest.fixture
def property_obj(db, owner, property_type, agency):
    """
    Imóvel com endereço e valores
    """
    return PropertyService().create(
        {
            "owner_id": owner.pk,
            "type_id": property_type.pk,
            "agency_id": agency.pk,
            "title": "Casa na Vila Mariana",
            "bedrooms": 3,
            "bathrooms": 2,
            "area_total": Decimal("180.00"),
            "tax_registration": "123.456.789-0",
            "address": {
                "zip_code": "04101-000",
                "street": "Rua Domingos de Morais",
                "number": "200",
                "district": "Vila Mariana",
                "city": "São Paulo",
                "state": "SP",
            },
            "values": {
                "rental_value": Decimal("3500.00"),
                "purchase_value": Decimal("800000.00"),
                "property_tax": Decimal("150.00"),
                "condo_fee": Decimal("0"),
                "status": "AVAILABLE",
            },
        }
    )


@pytest.fixture
def lease(db, property_obj, property_type, owner, tenant):
    return Lease.objects.create(
        property=property_obj,
        type=property_type,
        owner=owner,
        tenant=tenant,
        contract_number="2024-001",
        start_date=date(2024, 1, 1),
        end_date=date(2025, 12, 31),
        rent_amount=Decimal("3500.00"),
        rent_due_day=5,
    )


# Marks customizados para pytest
def pytest_configure(config):
    """Configura marks customizados"""
    config.addinivalue_line("markers", "unit: marca testes unitários")
    config.addinivalue_line("markers", "integration: marca testes de integração")
    config.addinivalue_line("markers", "models: marca testes de modelos")
    config.addinivalue_line("markers", "views: marca testes de views")
    config.addinivalue_line("markers", "services: marca testes de services")
    config.addinivalue_line("markers", "query: marca testes do motor de consulta")
