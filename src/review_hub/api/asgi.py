"""ASGI entrypoint for the review service API."""

from review_hub.api.app import create_app
from review_hub.containers import build_container

app = create_app(build_container())
