"""
Métricas do Dashboard - Imobiliária API
=======================================

Cada métrica compara o período pedido com o período anterior de mesma
duração e é devolvida como ``{result, variation, isPositive, data}``.
"""

import datetime
import logging
from collections import Counter, namedtuple

from django.db.models import Prefetch
from django.utils import timezone

from cadastros.models import Agency, Owner, Tenant
from imoveis.models import Document, Property, PropertyAddress, PropertyValue
from locacoes.models import Lease

logger = logging.getLogger(__name__)

AVAILABLE = "AVAILABLE"
NO_TYPE = "Outros"
# Imóvel sem nenhuma locação conta como vago há 12 meses
NEVER_LEASED_MONTHS = 12

Period = namedtuple("Period", ["start", "end"])
PeriodComparison = namedtuple("PeriodComparison", ["current", "previous"])


def period_comparison(start_date, end_date):
    """
    Período atual (dias inteiros, inclusive) e o anterior de mesma duração,
    terminando imediatamente antes do início do atual
    """
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.datetime.combine(start_date, datetime.time.min), tz)
    end = timezone.make_aware(datetime.datetime.combine(end_date, datetime.time.max), tz)
    tick = datetime.timedelta(microseconds=1)
    length = end - start
    previous = Period(start - length - tick, start - tick)
    return PeriodComparison(Period(start, end), previous)


def to_number(value):
    return 0.0 if value is None else float(value)


def calc_variation(current, previous, data=None):
    """
    Variação percentual limitada a [-100, 100]; 0 quando o anterior é 0
    """
    current = to_number(current)
    previous = to_number(previous)
    if previous == 0:
        return {
            "result": round(current, 2),
            "variation": 0,
            "isPositive": current >= 0,
            "data": data or [],
        }
    variation = (current - previous) / previous * 100
    variation = max(min(variation, 100), -100)
    return {
        "result": round(current, 2),
        "variation": round(variation, 2),
        "isPositive": variation >= 0,
        "data": data or [],
    }


def vacancy_months(leases, reference_date):
    """
    Meses desde o fim da última locação (0 se ainda vigente)
    """
    if not leases:
        return NEVER_LEASED_MONTHS
    lease_end = leases[0].end_date
    if lease_end >= reference_date:
        return 0
    months = (reference_date.year - lease_end.year) * 12 + (reference_date.month - lease_end.month)
    return max(0, months)


def ratio(part, total):
    return part / total * 100 if total else 0


def created_between(queryset, period):
    return queryset.filter(created_at__gte=period.start, created_at__lte=period.end, deleted_at__isnull=True)


def properties_in(period):
    """
    Imóveis ativos criados no período, com o valor mais recente, documentos
    ativos e a última locação já carregados
    """
    queryset = created_between(Property.objects.select_related("type", "agency", "owner"), period)
    return list(
        queryset.prefetch_related(
            Prefetch(
                "values",
                queryset=PropertyValue.objects.filter(deleted_at__isnull=True).order_by("-created_at"),
                to_attr="active_values",
            ),
            Prefetch(
                "documents",
                queryset=Document.objects.filter(deleted_at__isnull=True),
                to_attr="active_documents",
            ),
            Prefetch(
                "leases",
                queryset=Lease.objects.filter(deleted_at__isnull=True).select_related("tenant").order_by("-end_date"),
                to_attr="active_leases",
            ),
        )
    )


def latest_value(prop):
    return prop.active_values[0] if prop.active_values else None


def value_of(prop, field):
    value = latest_value(prop)
    return to_number(getattr(value, field, None)) if value else 0.0


def status_of(prop):
    value = latest_value(prop)
    return value.status if value else None


def type_name(prop):
    return prop.type.description if prop.type_id else None


def missing_documents(prop):
    present = {document.type for document in prop.active_documents}
    return [doc_type for doc_type in Document.REQUIRED_TYPES if doc_type not in present]


class DashboardService:
    """
    Métricas financeiras, de portfólio, de clientes e o mapa de imóveis
    """

    def __init__(self, start_date, end_date):
        self.start_date = start_date
        self.end_date = end_date
        self.periods = period_comparison(start_date, end_date)

    @property
    def previous_end_date(self):
        return timezone.localtime(self.periods.previous.end).date()

    # Financeiro

    def financial(self):
        properties = properties_in(self.periods.current)
        previous = properties_in(self.periods.previous)
        end = self.end_date

        rental = [
            {
                "id": str(p.pk),
                "title": p.title,
                "rentalValue": value_of(p, "rental_value"),
                "type": type_name(p),
                "areaTotal": to_number(p.area_total),
                "valuePerSqm": round(value_of(p, "rental_value") / to_number(p.area_total), 2) if p.area_total else 0,
                "owner": p.owner.name,
            }
            for p in properties
            if value_of(p, "rental_value") > 0
        ]
        average_ticket = sum(item["rentalValue"] for item in rental) / len(rental) if rental else 0
        previous_average = sum(value_of(p, "rental_value") for p in previous) / len(previous) if previous else 0

        active_rental = []
        for p in properties:
            if value_of(p, "rental_value") <= 0 or status_of(p) != AVAILABLE:
                continue
            lease = p.active_leases[0] if p.active_leases else None
            active_rental.append(
                {
                    "id": str(p.pk),
                    "title": p.title,
                    "rentalValue": value_of(p, "rental_value"),
                    "status": status_of(p),
                    "type": type_name(p),
                    "agency": {"tradeName": p.agency.trade_name} if p.agency else None,
                    "leaseInfo": (
                        {"contractNumber": lease.contract_number, "tenantName": lease.tenant.name} if lease else None
                    ),
                }
            )
        previous_rent = sum(value_of(p, "rental_value") for p in previous if status_of(p) == AVAILABLE)

        taxes = []
        for p in properties:
            tax, condo = value_of(p, "property_tax"), value_of(p, "condo_fee")
            if tax <= 0 and condo <= 0:
                continue
            rent = value_of(p, "rental_value")
            cost_ratio = round((tax + condo) / rent * 100, 2) if rent > 0 else 0
            taxes.append(
                {
                    "id": str(p.pk),
                    "title": p.title,
                    "type": type_name(p),
                    "propertyTax": tax,
                    "condoFee": condo,
                    "totalTaxAndCondo": tax + condo,
                    "rentalValue": rent,
                    "costToRentRatio": cost_ratio,
                }
            )
        previous_taxes = sum(value_of(p, "property_tax") + value_of(p, "condo_fee") for p in previous)

        acquisitions = []
        for p in properties:
            purchase = value_of(p, "purchase_value")
            if purchase <= 0:
                continue
            acquisitions.append(
                {
                    "id": str(p.pk),
                    "title": p.title,
                    "type": type_name(p),
                    "purchaseValue": purchase,
                    "currentStatus": status_of(p),
                    "acquisitionDate": latest_value(p).created_at,
                    "saleValue": value_of(p, "sale_value"),
                    "estimatedAnnualROI": round(value_of(p, "rental_value") * 12 / purchase * 100, 2),
                }
            )
        previous_acquisitions = sum(value_of(p, "purchase_value") for p in previous)

        vacant = []
        for p in properties:
            if status_of(p) != AVAILABLE:
                continue
            months = vacancy_months(p.active_leases, end)
            vacant.append(
                {
                    "id": str(p.pk),
                    "title": p.title,
                    "rentalValue": value_of(p, "rental_value"),
                    "vacancyMonths": months,
                    "estimatedLoss": value_of(p, "rental_value") * months,
                }
            )
        previous_vacant = [p for p in previous if status_of(p) == AVAILABLE]
        previous_months = sum(vacancy_months(p.active_leases, self.previous_end_date) for p in previous)

        logger.info(f"Métricas financeiras: {len(properties)} imóveis de {self.start_date} a {end}")
        return {
            "averageRentalTicket": calc_variation(average_ticket, previous_average, rental),
            "totalRentalActive": calc_variation(
                sum(item["rentalValue"] for item in active_rental), previous_rent, active_rental
            ),
            "totalAcquisitionValue": calc_variation(
                sum(item["purchaseValue"] for item in acquisitions), previous_acquisitions, acquisitions
            ),
            "financialVacancyRate": calc_variation(
                ratio(len(vacant), len(properties)), ratio(len(previous_vacant), len(previous)), vacant
            ),
            "totalPropertyTaxAndCondoFee": calc_variation(
                sum(item["totalTaxAndCondo"] for item in taxes), previous_taxes, taxes
            ),
            "vacancyInMonths": calc_variation(
                sum(item["vacancyMonths"] for item in vacant), previous_months, vacant
            ),
        }

    # Portfólio

    def portfolio(self):
        properties = properties_in(self.periods.current)
        previous = properties_in(self.periods.previous)
        end = self.end_date

        details = [
            {
                "id": str(p.pk),
                "title": p.title,
                "type": type_name(p),
                "status": status_of(p),
                "rentalValue": value_of(p, "rental_value"),
                "areaTotal": to_number(p.area_total),
                "documentCount": len(p.active_documents),
                "agency": {"tradeName": p.agency.trade_name} if p.agency else None,
            }
            for p in properties
        ]

        pending = [
            {
                "id": str(p.pk),
                "title": p.title,
                "type": type_name(p),
                "documentCount": len(p.active_documents),
                "missingDocuments": missing_documents(p),
            }
            for p in properties
            if missing_documents(p)
        ]
        previous_pending = sum(1 for p in previous if missing_documents(p))

        with_sale_value = [
            {
                "id": str(p.pk),
                "title": p.title,
                "type": type_name(p),
                "saleValue": value_of(p, "sale_value"),
                "rentalValue": value_of(p, "rental_value"),
            }
            for p in properties
            if value_of(p, "sale_value") > 0
        ]
        previous_sale = sum(1 for p in previous if value_of(p, "sale_value") > 0)

        available = [
            {
                "id": str(p.pk),
                "title": p.title,
                "type": type_name(p) or NO_TYPE,
                "rentalValue": value_of(p, "rental_value"),
                "areaTotal": to_number(p.area_total),
                "monthsVacant": vacancy_months(p.active_leases, end),
            }
            for p in properties
            if status_of(p) == AVAILABLE
        ]
        occupied = [
            {
                "id": str(p.pk),
                "title": p.title,
                "type": type_name(p),
                "rentalValue": value_of(p, "rental_value"),
                "status": status_of(p),
            }
            for p in properties
            if status_of(p) != AVAILABLE
        ]
        previous_available = sum(1 for p in previous if status_of(p) == AVAILABLE)

        by_type = Counter(item["type"] for item in available)
        available_by_type = [
            {"name": name, "value": value, "data": [item for item in available if item["type"] == name]}
            for name, value in by_type.items()
        ]

        physical = [
            {"id": str(p.pk), "title": p.title, "vacancyMonths": vacancy_months(p.active_leases, end)}
            for p in properties
        ]
        previous_physical = sum(vacancy_months(p.active_leases, self.previous_end_date) for p in previous)

        logger.info(f"Métricas de portfólio: {len(properties)} imóveis de {self.start_date} a {end}")
        return {
            "totalProperties": calc_variation(len(properties), len(previous), details),
            "propertiesWithPendingDocuments": calc_variation(len(pending), previous_pending, pending),
            "totalPropertiesWithSaleValue": calc_variation(len(with_sale_value), previous_sale, with_sale_value),
            "availablePropertiesByType": available_by_type,
            "vacancyRate": calc_variation(
                ratio(len(available), len(properties)), ratio(previous_available, len(previous)), available
            ),
            "occupationRate": calc_variation(
                ratio(len(occupied), len(properties)),
                ratio(len(previous) - previous_available, len(previous)),
                occupied,
            ),
            "physicalVacancy": calc_variation(
                sum(item["vacancyMonths"] for item in physical), previous_physical, physical
            ),
        }

    # Clientes

    def clients(self):
        current, previous = self.periods
        active_properties = Prefetch(
            "properties",
            queryset=Property.objects.filter(deleted_at__isnull=True)
            .select_related("type")
            .prefetch_related(
                Prefetch(
                    "values",
                    queryset=PropertyValue.objects.filter(deleted_at__isnull=True).order_by("-created_at"),
                    to_attr="active_values",
                )
            ),
            to_attr="active_properties",
        )

        owners = list(created_between(Owner.objects.all(), current).prefetch_related(active_properties))
        tenants = list(
            created_between(Tenant.objects.all(), current).prefetch_related(
                Prefetch(
                    "leases",
                    queryset=Lease.objects.filter(deleted_at__isnull=True).select_related("property__type"),
                    to_attr="active_leases",
                )
            )
        )
        agencies = list(created_between(Agency.objects.all(), current).prefetch_related(active_properties))

        previous_owners = created_between(Owner.objects.all(), previous).count()
        previous_tenants = created_between(Tenant.objects.all(), previous).count()
        previous_agencies = created_between(Agency.objects.all(), previous).count()

        def property_summary(prop):
            return {
                "id": str(prop.pk),
                "title": prop.title,
                "type": type_name(prop),
                "status": status_of(prop),
                "rentalValue": value_of(prop, "rental_value"),
                "saleValue": value_of(prop, "sale_value"),
            }

        owners_details = [
            {
                "id": str(owner.pk),
                "name": owner.name,
                "createdAt": owner.created_at,
                "propertiesCount": len(owner.active_properties),
                "properties": [property_summary(prop) for prop in owner.active_properties],
            }
            for owner in owners
        ]
        tenants_details = [
            {
                "id": str(tenant.pk),
                "name": tenant.name,
                "createdAt": tenant.created_at,
                "properties": [
                    {
                        "id": str(lease.property_id),
                        "title": lease.property.title,
                        "type": lease.property.type.description,
                        "contractNumber": lease.contract_number,
                        "rentalValue": to_number(lease.rent_amount),
                    }
                    for lease in tenant.active_leases
                ],
            }
            for tenant in tenants
        ]
        agencies_details = [
            {
                "id": str(agency.pk),
                "legalName": agency.legal_name,
                "tradeName": agency.trade_name,
                "createdAt": agency.created_at,
                "propertiesCount": len(agency.active_properties),
            }
            for agency in agencies
        ]

        total_properties = sum(len(owner.active_properties) for owner in owners)
        per_owner = total_properties / len(owners) if owners else 0
        # Sem histórico por período, o anterior reaproveita a média atual
        previous_per_owner = per_owner if previous_owners else 0

        logger.info(f"Métricas de clientes de {self.start_date} a {self.end_date}")
        return {
            "ownersTotal": calc_variation(len(owners), previous_owners, owners_details),
            "tenantsTotal": calc_variation(len(tenants), previous_tenants, tenants_details),
            "propertiesPerOwner": calc_variation(per_owner, previous_per_owner, owners_details),
            "agenciesTotal": calc_variation(len(agencies), previous_agencies, agencies_details),
            "propertiesByAgency": [
                {
                    "name": agency.trade_name or agency.legal_name,
                    "value": len(agency.active_properties),
                    "data": [
                        dict(
                            property_summary(prop),
                            areaTotal=to_number(prop.area_total),
                            agency={"id": str(agency.pk), "tradeName": agency.trade_name, "legalName": agency.legal_name},
                        )
                        for prop in agency.active_properties
                    ],
                }
                for agency in agencies
            ],
        }

    # Mapa

    def map(self):
        """
        Endereços ativos dos imóveis criados no período (sem geocodificação)
        """
        links = (
            PropertyAddress.objects.filter(
                deleted_at__isnull=True,
                address__deleted_at__isnull=True,
                property__deleted_at__isnull=True,
                property__created_at__gte=self.periods.current.start,
                property__created_at__lte=self.periods.current.end,
            )
            .select_related("property", "address")
            .order_by("property__created_at", "created_at")
        )
        addresses = [
            {
                "propertyId": str(link.property_id),
                "title": link.property.title,
                "street": link.address.street,
                "number": link.address.number,
                "district": link.address.district,
                "city": link.address.city,
                "state": link.address.state,
                "zipCode": link.address.zip_code,
                "country": link.address.country,
                "info": f"{link.property.title} ({link.address.city}/{link.address.state})",
            }
            for link in links
        ]
        return {"addresses": addresses}

    def all(self):
        return {
            "financial": self.financial(),
            "portfolio": self.portfolio(),
            "clients": self.clients(),
            "map": self.map(),
        }
