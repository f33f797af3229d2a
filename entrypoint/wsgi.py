"""WSGI entry point (``gunicorn entrypoint.wsgi:app``)."""
from __future__ import annotations

from eureka.startup.wiring import create_app

app = create_app()
