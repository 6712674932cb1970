"""ASGI entrypoint for the nutrition resolution API."""

from healthos_nutrition.api.app import create_app
from healthos_nutrition.containers import build_container

app = create_app(build_container())
