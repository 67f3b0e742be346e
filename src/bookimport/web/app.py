"""Flask application factory."""

from __future__ import annotations

import logging

from flask import Flask

from ..config import Settings
from .routes import register_blueprints
from .routes.api import SETTINGS_KEY

_logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> Flask:
    """Create and configure Flask application."""
    app = Flask(__name__)
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    app.config[SETTINGS_KEY] = settings or Settings()
    register_blueprints(app)

    return app


def run_server(settings: Settings, *, debug: bool = False) -> None:
    """Run the HTTP API until interrupted."""
    app = create_app(settings)
    host, port = settings.web.host, settings.web.port
    _logger.info("Starting API on http://%s:%s", host, port)
    try:
        app.run(host=host, port=port, debug=debug, threaded=True, use_reloader=False)
    except OSError as exc:
        _logger.error("Failed to start API: %s", exc)
        raise
