"""
Rate limiting - Imobiliária API
===============================

Taxas no formato ``<requisições>/<janela>``, em que a janela aceita um
multiplicador: ``100/15m``, ``1000/1h``, ``10/s``.
"""

import re

from rest_framework.throttling import AnonRateThrottle, UserRateThrottle

UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}

RATE_PATTERN = re.compile(r"^\s*(\d+)\s*/\s*(\d*)\s*([smhd])[a-z]*\s*$", re.IGNORECASE)


def parse_window_rate(rate):
    """
    Retorna ``(num_requests, duration_seconds)`` ou ``(None, None)`` sem limite
    """
    if rate is None:
        return None, None
    match = RATE_PATTERN.match(str(rate))
    if not match:
        raise ValueError(f"Taxa de rate limit inválida: {rate!r}")
    num, multiplier, unit = match.groups()
    return int(num), int(multiplier or 1) * UNIT_SECONDS[unit.lower()]


class WindowRateMixin:
    def parse_rate(self, rate):
        return parse_window_rate(rate)


class WindowAnonRateThrottle(WindowRateMixin, AnonRateThrottle):
    """Limite por IP para clientes não autenticados"""


class WindowUserRateThrottle(WindowRateMixin, UserRateThrottle):
    """Limite por usuário autenticado"""
