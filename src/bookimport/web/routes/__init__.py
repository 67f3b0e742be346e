"""Route blueprints registration."""

from flask import Flask

from .api import api_bp


def register_blueprints(app: Flask) -> None:
    """Register all blueprints."""
    app.register_blueprint(api_bp)
