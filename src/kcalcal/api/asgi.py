"""ASGI entrypoint for the kcalcal API."""

from kcalcal.api.app import create_app
from kcalcal.containers import build_container

app = create_app(build_container())
