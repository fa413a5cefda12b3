"""ASGI entrypoint for the glycoscan API."""

from glycoscan.api.app import create_app
from glycoscan.containers import build_container

app = create_app(build_container())
