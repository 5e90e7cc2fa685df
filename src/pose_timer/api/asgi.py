"""ASGI entrypoint for the pose timer API."""

from pose_timer.api.app import create_app
from pose_timer.containers import build_container

app = create_app(build_container())
