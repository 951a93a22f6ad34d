from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .config import MAX_UPLOAD_BYTES, Settings, load_settings
from .service import ContentMutator, OperationResult

logger = logging.getLogger(__name__)


def _json_error(code: str, message: str, status: int = 400, **extra: Any):
    payload: dict[str, Any] = {"code": code, "message": message}
    payload.update(extra)
    return jsonify(payload), status


def _result(result: OperationResult):
    return jsonify(result.to_dict())


def _payload() -> dict[str, Any]:
    payload = request.get_json(silent=True) or {}
    return payload if isinstance(payload, dict) else {}


def _segments(value: Any) -> list[str] | None:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        return None
    return value


def create_app(settings: Settings | None = None, mutator: ContentMutator | None = None) -> Flask:
    settings = settings or load_settings()
    mutator = mutator or ContentMutator(settings)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_BYTES

    @app.errorhandler(Exception)
    def _server_error(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        logger.exception("Unhandled error")
        return _json_error("SERVER_ERROR", f"Server error: {exc}", 500)

    @app.route("/api/save-md", methods=["POST"])
    def api_save_md():
        payload = _payload()
        file_path = payload.get("filePath")
        content = payload.get("content")
        if not isinstance(file_path, str) or not file_path or not isinstance(content, str) or not content:
            return _json_error("MISSING_PARAMS", "Missing required parameters: filePath and content")
        result = mutator.save_document(file_path, content)
        if result.success:
            mutator.refresh_home_page()
        return _result(result)

    @app.route("/api/add-nav", methods=["POST"])
    def api_add_nav():
        name = _payload().get("nodeName")
        if not isinstance(name, str) or not name:
            return _json_error("MISSING_PARAMS", "Missing required parameter: nodeName")
        return _result(mutator.add_category(name))

    @app.route("/api/add-node", methods=["POST"])
    def api_add_node():
        payload = _payload()
        name = payload.get("nodeName")
        parents = _segments(payload.get("paths"))
        if not isinstance(name, str) or not name or parents is None:
            return _json_error("MISSING_PARAMS", "Missing required parameters: nodeName, paths")
        return _result(mutator.add_node(name, parents))

    @app.route("/api/add-md", methods=["POST"])
    def api_add_md():
        payload = _payload()
        name = payload.get("mdName")
        parents = _segments(payload.get("paths"))
        if not isinstance(name, str) or not name or parents is None:
            return _json_error("MISSING_PARAMS", "Missing required parameters: mdName, paths")
        return _result(mutator.add_document(name, parents))

    @app.route("/api/del-node", methods=["POST"])
    def api_del_node():
        segments = _segments(_payload().get("paths"))
        if segments is None:
            return _json_error("MISSING_PARAMS", "Missing required parameter: paths")
        return _result(mutator.delete_node(segments))

    @app.route("/api/upload/img", methods=["POST"])
    def api_upload_img():
        upload = request.files.get("file")
        if upload is None:
            return _json_error("NO_FILE", "No file uploaded")
        md_path = request.form.get("mdPath") or ""
        return _result(mutator.upload_image(upload.filename or "", upload.read(), md_path))

    @app.route("/api/open-md", methods=["POST"])
    def api_open_md():
        file_path = _payload().get("filePath")
        if not isinstance(file_path, str) or not file_path:
            return _json_error("MISSING_PARAMS", "Missing required parameter: filePath")
        return _result(mutator.open_document(file_path))

    @app.route("/api/recent", methods=["GET"])
    def api_recent():
        return jsonify([f.to_dict() for f in mutator.recently_modified()])

    @app.route("/api/health", methods=["GET"])
    def api_health():
        return jsonify({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()})

    return app
