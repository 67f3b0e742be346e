"""API routes."""

from flask import Blueprint, current_app, jsonify, request

from ...config import ConfigurationError, Settings
from ...importer import try_import_book
from ...paths import is_directory

SETTINGS_KEY = "BOOKIMPORT_SETTINGS"

api_bp = Blueprint("api", __name__, url_prefix="/api")


def _settings() -> Settings:
    return current_app.config[SETTINGS_KEY]


@api_bp.route("/import", methods=["POST"])
def import_book():
    """Import the archive named in the JSON body into the storage root."""
    data = request.get_json(silent=True) or {}
    path = data.get("path")
    if not isinstance(path, str) or not path.strip():
        return jsonify({"error": "Request body must contain a 'path' string"}), 400

    settings = _settings()
    try:
        storage_root = settings.require_storage_root()
    except ConfigurationError as exc:
        return jsonify({"error": str(exc)}), 500

    result = try_import_book(
        path, storage_root, cleanup_on_failure=settings.cleanup_on_failure
    )
    if not result.ok:
        return jsonify(result.to_dict()), 422
    return jsonify(result.to_dict())


@api_bp.route("/is-directory")
def is_directory_query():
    """Classify a path as directory or not."""
    path = request.args.get("path", "")
    return jsonify({"is_directory": is_directory(path)})


@api_bp.route("/health")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok", "service": "bookimport"})
