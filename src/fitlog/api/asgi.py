"""ASGI application instance built from environment settings."""

from fitlog.api.app import create_app
from fitlog.config import Settings
from fitlog.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
