"""
Paginação personalizada para Imobiliária API
============================================
"""

import math
from collections import OrderedDict

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# Mantém o OFFSET (page * limit) dentro do inteiro aceito pelos bancos
MAX_PAGE = 1_000_000


def clamp_limit(limit, maximum=MAX_PAGE_SIZE):
    """Limita o tamanho da página ao intervalo [1, maximum]"""
    return max(1, min(int(limit), maximum))


def clamp_page(page):
    """Limita a página ao intervalo [1, MAX_PAGE]"""
    return max(1, min(int(page), MAX_PAGE))


def paginated_result(data, count, limit, page):
    """
    Envelope uniforme das listagens
    """
    take = clamp_limit(limit)
    return OrderedDict(
        [
            ("data", data),
            ("count", count),
            ("totalPages", math.ceil(count / take) if count else 0),
            ("currentPage", clamp_page(page)),
        ]
    )


class StandardResultsSetPagination(PageNumberPagination):
    """
    Paginação padrão da API (limit/page), sem erro para páginas fora do intervalo
    """

    page_size = DEFAULT_PAGE_SIZE
    page_size_query_param = "limit"
    max_page_size = MAX_PAGE_SIZE
    page_query_param = "page"

    def paginate_queryset(self, queryset, request, view=None):
        self.request = request
        self.limit = self.get_page_size(request)
        try:
            self.current_page = clamp_page(request.query_params.get(self.page_query_param, 1))
        except (TypeError, ValueError):
            self.current_page = 1

        self.count = queryset.count()
        skip = (self.current_page - 1) * self.limit
        return list(queryset[skip : skip + self.limit])

    def get_page_size(self, request):
        try:
            return clamp_limit(request.query_params.get(self.page_size_query_param, self.page_size))
        except (TypeError, ValueError):
            return self.page_size

    def get_paginated_response(self, data):
        """
        Customizar resposta paginada
        """
        return Response(paginated_result(data, self.count, self.limit, self.current_page))
