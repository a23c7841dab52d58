"""
Testes do Dashboard - Imobiliária API
=====================================
"""

import datetime
from types import SimpleNamespace

import pytest
from django.utils import timezone
from rest_framework import status

from dashboard.services import DashboardService, calc_variation, period_comparison, vacancy_months
from imoveis.models import Document
from imoveis.services import PropertyService


@pytest.mark.unit
class TestCalcVariation:
    def test_growth(self):
        assert calc_variation(150, 100) == {"result": 150.0, "variation": 50.0, "isPositive": True, "data": []}

    def test_drop(self):
        result = calc_variation(50, 100)
        assert result["variation"] == -50.0
        assert result["isPositive"] is False

    def test_variation_is_clamped(self):
        assert calc_variation(300, 100)["variation"] == 100
        assert calc_variation(-300, 100)["variation"] == -100

    def test_previous_zero(self):
        assert calc_variation(10, 0) == {"result": 10.0, "variation": 0, "isPositive": True, "data": []}
        assert calc_variation(-1, 0)["isPositive"] is False

    def test_none_and_data(self):
        result = calc_variation(None, None, [{"id": "1"}])
        assert result["result"] == 0.0
        assert result["data"] == [{"id": "1"}]


@pytest.mark.unit
class TestVacancyMonths:
    def test_never_leased(self):
        assert vacancy_months([], datetime.date(2024, 6, 15)) == 12

    def test_current_lease(self):
        leases = [SimpleNamespace(end_date=datetime.date(2024, 12, 31))]
        assert vacancy_months(leases, datetime.date(2024, 6, 15)) == 0

    def test_months_since_last_lease(self):
        leases = [SimpleNamespace(end_date=datetime.date(2024, 1, 31))]
        assert vacancy_months(leases, datetime.date(2024, 6, 15)) == 5


@pytest.mark.unit
class TestPeriodComparison:
    def test_previous_period_has_same_length(self):
        current, previous = period_comparison(datetime.date(2024, 1, 1), datetime.date(2024, 1, 31))
        local = timezone.localtime

        assert local(current.start).replace(tzinfo=None) == datetime.datetime(2024, 1, 1)
        assert local(current.end).replace(tzinfo=None) == datetime.datetime(2024, 1, 31, 23, 59, 59, 999999)
        assert local(previous.start).replace(tzinfo=None) == datetime.datetime(2023, 12, 1)
        assert previous.end == current.start - datetime.timedelta(microseconds=1)

    def test_single_day(self):
        current, previous = period_comparison(datetime.date(2024, 3, 10), datetime.date(2024, 3, 10))
        assert timezone.localtime(previous.start).date() == datetime.date(2024, 3, 9)
        assert timezone.localtime(previous.end).date() == datetime.date(2024, 3, 9)


def period_params():
    today = timezone.localdate()
    return {"startDate": (today - datetime.timedelta(days=30)).isoformat(), "endDate": today.isoformat()}


@pytest.mark.django_db
@pytest.mark.services
class TestDashboardService:
    @pytest.fixture
    def service(self):
        today = timezone.localdate()
        return DashboardService(today - datetime.timedelta(days=30), today)

    def test_financial(self, service, property_obj, lease):
        metrics = service.financial()

        assert set(metrics) == {
            "averageRentalTicket",
            "totalRentalActive",
            "totalAcquisitionValue",
            "financialVacancyRate",
            "totalPropertyTaxAndCondoFee",
            "vacancyInMonths",
        }
        assert metrics["averageRentalTicket"]["result"] == 3500.0
        assert metrics["averageRentalTicket"]["variation"] == 0
        assert metrics["totalRentalActive"]["data"][0]["leaseInfo"] == {
            "contractNumber": "2024-001",
            "tenantName": "Ana Inquilina",
        }
        assert metrics["totalAcquisitionValue"]["result"] == 800000.0
        assert metrics["totalPropertyTaxAndCondoFee"]["result"] == 150.0
        assert metrics["financialVacancyRate"]["result"] == 100.0

    def test_portfolio(self, service, property_obj):
        Document.objects.create(property=property_obj, file_path="/media/e.pdf", type=Document.TITLE_DEED)
        metrics = service.portfolio()

        assert metrics["totalProperties"]["result"] == 1
        pending = metrics["propertiesWithPendingDocuments"]["data"][0]
        assert pending["missingDocuments"] == [Document.REGISTRATION, Document.PROPERTY_RECORD]
        assert [(item["name"], item["value"]) for item in metrics["availablePropertiesByType"]] == [("Casa", 1)]
        assert metrics["occupationRate"]["result"] == 0
        assert metrics["physicalVacancy"]["data"][0]["vacancyMonths"] == 12

    def test_deleted_properties_are_ignored(self, service, property_obj):
        PropertyService().delete(property_obj.pk)
        assert service.portfolio()["totalProperties"]["result"] == 0
        assert service.map() == {"addresses": []}

    def test_clients(self, service, property_obj, lease):
        metrics = service.clients()

        assert metrics["ownersTotal"]["result"] == 1
        assert metrics["tenantsTotal"]["data"][0]["properties"][0]["contractNumber"] == "2024-001"
        assert metrics["propertiesPerOwner"]["result"] == 1.0
        assert metrics["agenciesTotal"]["result"] == 1
        assert metrics["propertiesByAgency"][0]["name"] == "Imobiliária Central"
        assert metrics["propertiesByAgency"][0]["value"] == 1

    def test_previous_period_is_compared(self, property_obj):
        today = timezone.localdate()
        service = DashboardService(today + datetime.timedelta(days=1), today + datetime.timedelta(days=1))

        total = service.portfolio()["totalProperties"]
        assert total["result"] == 0
        assert total["variation"] == -100
        assert total["isPositive"] is False

    def test_map(self, service, property_obj):
        (address,) = service.map()["addresses"]
        assert address["propertyId"] == str(property_obj.pk)
        assert address["district"] == "Vila Mariana"
        assert address["info"] == "Casa na Vila Mariana (São Paulo/SP)"


@pytest.mark.django_db
@pytest.mark.views
class TestDashboardAPI:
    @pytest.mark.parametrize("section", ["financial", "portfolio", "clients", "map", "all"])
    def test_sections(self, auth_client, property_obj, section):
        response = auth_client.get(f"/api/dashboard/{section}", period_params())
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["success"] is True

    def test_all_groups_every_section(self, auth_client, property_obj):
        data = auth_client.get("/api/dashboard/all", period_params()).json()["data"]
        assert set(data) == {"financial", "portfolio", "clients", "map"}

    def test_dates_are_required(self, auth_client):
        response = auth_client.get("/api/dashboard/financial")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "startDate: startDate é obrigatório" in response.json()["errors"]
        assert "endDate: endDate é obrigatório" in response.json()["errors"]

    def test_invalid_date_format(self, auth_client):
        response = auth_client.get("/api/dashboard/financial", {"startDate": "01/02/2024", "endDate": "2024-02-10"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_start_after_end(self, auth_client):
        response = auth_client.get("/api/dashboard/portfolio", {"startDate": "2024-03-01", "endDate": "2024-02-01"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"] == ["startDate não pode ser maior que endDate"]

    def test_range_limit(self, auth_client):
        response = auth_client.get("/api/dashboard/clients", {"startDate": "2023-01-01", "endDate": "2024-06-01"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_authentication(self, api_client):
        assert api_client.get("/api/dashboard/all", period_params()).status_code == status.HTTP_401_UNAUTHORIZED
