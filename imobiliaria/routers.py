"""
Roteadores - Imobiliária API
============================
"""

from rest_framework.routers import SimpleRouter


class OptionalSlashRouter(SimpleRouter):
    """
    SimpleRouter que aceita as rotas com ou sem barra final
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.trailing_slash = "/?"
