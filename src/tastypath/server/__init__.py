"""ASGI application factory and dependencies for the TastyPath server."""

from tastypath.server.app import app, create_app

__all__ = ["app", "create_app"]
