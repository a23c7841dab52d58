"""
WSGI config for imobiliaria project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "imobiliaria.settings")

application = get_wsgi_application()
