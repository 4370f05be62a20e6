"""ASGI entrypoint for the contribution logger."""

from contribution_logger.api.app import create_app
from contribution_logger.containers import build_container

app = create_app(build_container())
