"""
Testes de API para Cadastros - Imobiliária API
==============================================
"""

import pytest
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.models import User
from cadastros.models import Agency, Owner, OwnerAddress, Tenant
from cadastros.services import OwnerService
from conftest import VALID_CNPJS, VALID_CPFS


@pytest.mark.django_db
@pytest.mark.views
class TestOwnerAPI(TestCase):
    """
    CRUD de proprietários com autenticação
    """

    def setUp(self):
        self.user = User.objects.create_user(email="corretor@test.com", password="corretor123", name="Corretor")
        self.client = APIClient()
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(self.user).access_token}")

        self.owner_data = {
            "name": "Carlos Proprietário",
            "internal_code": "P001",
            "cpf": "529.982.247-25",
            "occupation": "Engenheiro",
            "marital_status": "Casado",
            "addresses": [
                {
                    "zip_code": "01310100",
                    "street": "Avenida Paulista",
                    "number": "1000",
                    "district": "Bela Vista",
                    "city": "São Paulo",
                    "state": "sp",
                }
            ],
            "contacts": [{"contact": "Carlos", "cellphone": "(11) 98888-7777", "email": "CARLOS@test.com"}],
        }

    def create_owner(self, **overrides):
        return self.client.post("/api/owners", {**self.owner_data, **overrides}, format="json")

    def test_create_owner(self):
        response = self.create_owner()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "Owner created successfully")
        self.assertEqual(body["data"]["cpf"], "52998224725")
        self.assertIsNone(body["data"]["deleted_at"])

        address = body["data"]["addresses"][0]
        self.assertEqual(address["zip_code"], "01310-100")
        self.assertEqual(address["state"], "SP")
        self.assertEqual(address["country"], "Brasil")
        contact = body["data"]["contacts"][0]
        self.assertEqual(contact["cellphone"], "11988887777")
        self.assertEqual(contact["email"], "carlos@test.com")

    def test_create_with_trailing_slash(self):
        response = self.client.post("/api/owners/", self.owner_data, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_duplicate_cpf_conflicts(self):
        self.create_owner()
        response = self.create_owner(internal_code="P002")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json(), {"success": False, "message": "CPF already registered"})

    def test_duplicate_internal_code_conflicts(self):
        self.create_owner()
        response = self.create_owner(cpf=VALID_CPFS[1])
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json()["message"], "Internal code already registered")

    def test_deleted_owner_does_not_block_natural_key(self):
        owner_id = self.create_owner().json()["data"]["id"]
        self.client.delete(f"/api/owners/{owner_id}")

        response = self.create_owner()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Owner.objects.filter(cpf=VALID_CPFS[0]).count(), 2)

    def test_invalid_cpf(self):
        response = self.create_owner(cpf="111.111.111-11")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["message"], "Validation error")
        self.assertIn("cpf: CPF inválido", response.json()["errors"])

    def test_requires_cpf_or_cnpj(self):
        response = self.create_owner(cpf=None)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.create_owner(cnpj=VALID_CNPJS[0])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("cnpj: Informe apenas CPF ou CNPJ", response.json()["errors"])

    def test_legal_entity_owner(self):
        response = self.create_owner(
            cpf=None,
            cnpj="11.222.333/0001-81",
            name="Silva & Filhos Empreendimentos 2000 Ltda",
            occupation="",
            marital_status="",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()["data"]["cnpj"], VALID_CNPJS[0])
        self.assertEqual(response.json()["data"]["name"], "Silva & Filhos Empreendimentos 2000 Ltda")

    def test_name_is_sanitized(self):
        response = self.create_owner(name="  <b>Construtora Alfa</b>   S/A, filial 2 ")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()["data"]["name"], "Construtora Alfa S/A, filial 2")

    def test_blank_name(self):
        response = self.create_owner(name="   ")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_individual_requires_occupation_and_marital_status(self):
        response = self.create_owner(occupation="", marital_status="")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        errors = response.json()["errors"]
        self.assertIn("occupation: Profissão é obrigatória para pessoa física", errors)
        self.assertIn("marital_status: Estado civil é obrigatório para pessoa física", errors)
        self.assertEqual(Owner.objects.count(), 0)

    def test_legal_entity_rejects_individual_fields(self):
        response = self.create_owner(cpf=None, cnpj=VALID_CNPJS[0], name="Imóveis Carlos Ltda")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        errors = response.json()["errors"]
        self.assertIn("occupation: Profissão não é permitida para pessoa jurídica", errors)
        self.assertIn("marital_status: Estado civil não é permitido para pessoa jurídica", errors)

    def test_update_checks_stored_person_kind(self):
        owner_id = self.create_owner().json()["data"]["id"]

        response = self.client.put(f"/api/owners/{owner_id}", {"marital_status": ""}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("marital_status: Estado civil é obrigatório para pessoa física", response.json()["errors"])

        response = self.client.put(f"/api/owners/{owner_id}", {"cnpj": VALID_CNPJS[0]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("cnpj: Informe apenas CPF ou CNPJ", response.json()["errors"])

    def test_missing_name(self):
        data = dict(self.owner_data)
        data.pop("name")
        response = self.client.post("/api/owners", data, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_retrieve(self):
        owner_id = self.create_owner().json()["data"]["id"]
        response = self.client.get(f"/api/owners/{owner_id}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["data"]["name"], "Carlos Proprietário")

    def test_retrieve_unknown_and_malformed_id(self):
        for owner_id in ("0b6f8c1e-2f5a-4d7e-9a51-5c8b7f4a2d10", "nao-e-uuid"):
            response = self.client.get(f"/api/owners/{owner_id}")
            self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
            self.assertEqual(response.json()["message"], "Owner not found")

    def test_update_is_partial(self):
        owner_id = self.create_owner().json()["data"]["id"]
        response = self.client.put(f"/api/owners/{owner_id}", {"occupation": "Arquiteto"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["message"], "Owner updated successfully")
        self.assertEqual(response.json()["data"]["occupation"], "Arquiteto")
        self.assertEqual(response.json()["data"]["cpf"], VALID_CPFS[0])
        self.assertEqual(len(response.json()["data"]["addresses"]), 1)

    def test_update_replaces_addresses(self):
        owner_id = self.create_owner().json()["data"]["id"]
        new_address = {
            "zip_code": "13010-000",
            "street": "Rua Barão de Jaguara",
            "number": "50",
            "district": "Centro",
            "city": "Campinas",
            "state": "SP",
        }
        response = self.client.put(f"/api/owners/{owner_id}", {"addresses": [new_address]}, format="json")

        addresses = response.json()["data"]["addresses"]
        self.assertEqual([address["city"] for address in addresses], ["Campinas"])
        self.assertEqual(OwnerAddress.objects.filter(owner_id=owner_id).count(), 2)
        self.assertEqual(OwnerAddress.active.filter(owner_id=owner_id).count(), 1)

    def test_update_conflict_message(self):
        self.create_owner()
        other_id = self.create_owner(internal_code="P002", cpf=VALID_CPFS[1]).json()["data"]["id"]

        response = self.client.put(f"/api/owners/{other_id}", {"internal_code": "P001"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json()["message"], "Internal code already registered for another owner")

    def test_update_deleted_owner(self):
        owner_id = self.create_owner().json()["data"]["id"]
        self.client.delete(f"/api/owners/{owner_id}")
        response = self.client.put(f"/api/owners/{owner_id}", {"occupation": "Arquiteto"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_and_restore_cycle(self):
        owner_id = self.create_owner().json()["data"]["id"]

        response = self.client.delete(f"/api/owners/{owner_id}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {"success": True, "data": None, "message": "Owner deleted successfully"})
        self.assertEqual(self.client.get(f"/api/owners/{owner_id}").status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.delete(f"/api/owners/{owner_id}")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()["message"], "Owner not found or already deleted")

        response = self.client.patch(f"/api/owners/{owner_id}/restore")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["message"], "Owner restored successfully")

        response = self.client.get(f"/api/owners/{owner_id}")
        self.assertEqual(len(response.json()["data"]["addresses"]), 1)
        self.assertEqual(len(response.json()["data"]["contacts"]), 1)

    def test_restore_active_owner(self):
        owner_id = self.create_owner().json()["data"]["id"]
        response = self.client.patch(f"/api/owners/{owner_id}/restore")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["message"], "Owner is not deleted")

    def test_restore_unknown_owner(self):
        response = self.client.patch("/api/owners/0b6f8c1e-2f5a-4d7e-9a51-5c8b7f4a2d10/restore")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_envelope(self):
        self.create_owner()
        self.create_owner(internal_code="P002", cpf=VALID_CPFS[1], name="Beatriz Lima")

        response = self.client.get("/api/owners", {"limit": 1, "sort[name]": "asc"})
        body = response.json()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(body["count"], 2)
        self.assertEqual(body["totalPages"], 2)
        self.assertEqual(body["currentPage"], 1)
        self.assertEqual(body["data"][0]["name"], "Beatriz Lima")

    def test_list_filters_and_include_inactive(self):
        owner_id = self.create_owner().json()["data"]["id"]
        self.create_owner(internal_code="P002", cpf=VALID_CPFS[1], name="Beatriz Lima")
        self.client.delete(f"/api/owners/{owner_id}")

        self.assertEqual(self.client.get("/api/owners").json()["count"], 1)
        self.assertEqual(self.client.get("/api/owners", {"includeInactive": "true"}).json()["count"], 2)
        self.assertEqual(self.client.get("/api/owners", {"filter[name]": "beatriz"}).json()["count"], 1)

    def test_filters_endpoint(self):
        self.create_owner()
        response = self.client.get("/api/owners/filters")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()["data"]
        self.assertEqual(data["defaultSort"], "created_at:desc")
        fields = [entry["field"] for entry in data["filters"]]
        self.assertIn("internal_code", fields)
        self.assertIn("city", fields)

    def test_requires_authentication(self):
        response = APIClient().post("/api/owners", self.owner_data, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


@pytest.mark.django_db
@pytest.mark.services
class TestOwnerCascade:
    def test_delete_cascades_to_links_and_records(self, owner):
        OwnerService().delete(owner.pk)
        owner.refresh_from_db()

        link = owner.addresses.get()
        assert link.deleted_at == owner.deleted_at
        assert link.address.deleted_at == owner.deleted_at
        assert owner.contacts.get().contact.deleted_at == owner.deleted_at

    def test_restore_only_brings_back_links_deleted_with_entity(self, owner, address_data):
        OwnerService().update(owner.pk, {"addresses": [{**address_data, "number": "2000"}]})
        OwnerService().delete(owner.pk)
        OwnerService().restore(owner.pk)

        active_numbers = [link.address.number for link in owner.addresses.filter(deleted_at__isnull=True)]
        assert active_numbers == ["2000"]

    def test_active_manager(self, owner):
        assert Owner.active.count() == 1
        OwnerService().delete(owner.pk)
        assert Owner.active.count() == 0
        assert Owner.objects.count() == 1


@pytest.mark.django_db
@pytest.mark.views
class TestAgencyAPI:
    def agency_payload(self, **overrides):
        return {
            "trade_name": "Imobiliária Horizonte",
            "legal_name": "Horizonte Negócios Imobiliários LTDA",
            "cnpj": VALID_CNPJS[1],
            "license_number": "CRECI-12345",
            "contacts": [{"contact": "Recepção", "phone": "1133332222", "email": "contato@horizonte.com"}],
            **overrides,
        }

    def test_create_agency(self, auth_client):
        response = auth_client.post("/api/agencies", self.agency_payload(), format="json")
        assert response.status_code == 201
        assert response.json()["message"] == "Agency created successfully"
        assert response.json()["data"]["contacts"][0]["contact"] == "Recepção"

    def test_duplicate_cnpj(self, auth_client, agency):
        response = auth_client.post("/api/agencies", self.agency_payload(cnpj=agency.cnpj), format="json")
        assert response.status_code == 409
        assert response.json()["message"] == "CNPJ already registered"

    def test_invalid_cnpj(self, auth_client):
        response = auth_client.post("/api/agencies", self.agency_payload(cnpj="11222333000100"), format="json")
        assert response.status_code == 400

    def test_contact_suggestions(self, auth_client):
        auth_client.post("/api/agencies", self.agency_payload(), format="json")
        response = auth_client.get("/api/agencies/suggestions/contacts", {"q": "recepcao"})

        assert response.status_code == 200
        assert response["Cache-Control"] == "public, max-age=30"
        assert [contact["email"] for contact in response.json()["data"]] == ["contato@horizonte.com"]

    def test_suggestions_skip_deleted_agencies(self, auth_client):
        agency_id = auth_client.post("/api/agencies", self.agency_payload(), format="json").json()["data"]["id"]
        auth_client.delete(f"/api/agencies/{agency_id}")

        response = auth_client.get("/api/agencies/suggestions/contacts", {"q": "recepcao"})
        assert response.json()["data"] == []

    def test_delete_agency(self, auth_client, agency):
        response = auth_client.delete(f"/api/agencies/{agency.pk}")
        assert response.status_code == 200
        agency.refresh_from_db()
        assert agency.deleted_at is not None
        assert Agency.active.count() == 0


@pytest.mark.django_db
@pytest.mark.views
class TestTenantAPI:
    def test_list_search_by_city_without_accent(self, auth_client, tenant, owner):
        response = auth_client.get("/api/tenants", {"search": "rio de janeiro"})
        assert response.json()["count"] == 1
        assert response.json()["data"][0]["internal_code"] == "I001"

    def test_tenant_and_owner_keys_are_independent(self, auth_client, owner):
        payload = {
            "name": "Carlos Inquilino",
            "internal_code": owner.internal_code,
            "cpf": owner.cpf,
            "occupation": "Motorista",
            "marital_status": "Solteiro",
        }
        response = auth_client.post("/api/tenants", payload, format="json")
        assert response.status_code == 201
        assert Tenant.objects.count() == 1

    def test_contact_suggestions_without_term(self, auth_client, tenant):
        response = auth_client.get("/api/tenants/suggestions/contacts")
        assert response.status_code == 200
        assert [contact["contact"] for contact in response.json()["data"]] == ["Ana"]

    def test_limit_above_maximum_is_clamped(self, auth_client, tenant):
        response = auth_client.get("/api/tenants", {"limit": 500})
        assert response.status_code == 200
        assert response.json()["count"] == 1
        assert response.json()["totalPages"] == 1
