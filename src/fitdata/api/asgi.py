"""ASGI entrypoint for the fitdata gateway."""

from fitdata.api.app import create_app
from fitdata.containers import build_container

app = create_app(build_container())
