"""Flask application serving the logging API."""

import logging
from datetime import date

from flask import Flask, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from api.src.db import LogDatabase, parse_timestamp
from api.src.validator import LogEntryValidator

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _error(message: str, status: int):
    return jsonify(success=False, error=message), status


# Largest value SQLite and PostgreSQL accept for LIMIT and OFFSET.
MAX_QUERY_INT = 2**63 - 1


def _non_negative_int(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    value = int(raw)
    if value < 0:
        raise ValueError(f"{name} must not be negative")
    if value > MAX_QUERY_INT:
        raise ValueError(f"{name} is too large")
    return value


def create_app(database: LogDatabase) -> Flask:
    app = Flask(__name__)
    app.config["DATABASE"] = database
    validator = LogEntryValidator()

    @app.after_request
    def add_cors_headers(response):
        if request.path == "/api/logs":
            response.headers.update(CORS_HEADERS)
        return response

    @app.errorhandler(SQLAlchemyError)
    def database_error(exc):
        logger.exception("Database error on %s %s", request.method, request.path)
        return _error(str(exc), 500)

    @app.route("/api/logs", methods=["GET", "POST", "OPTIONS"])
    def logs_endpoint():
        if request.method == "OPTIONS":
            return jsonify({})
        if request.method == "POST":
            return create_log()
        return list_logs()

    def create_log():
        body = request.get_json(silent=True)
        if body is None:
            return _error("request body must be JSON", 400)

        is_valid, message = validator.validate(body)
        if not is_valid:
            return _error(message, 400)

        if body.get("timestamp"):
            try:
                parse_timestamp(body["timestamp"])
            except (ValueError, OverflowError):
                return _error(f"invalid timestamp: {body['timestamp']!r}", 400)

        log_id = database.insert_log(body)
        return jsonify(success=True, id=log_id, message="Log entry created")

    def list_logs():
        try:
            limit = _non_negative_int("limit", 100)
            offset = _non_negative_int("offset", 0)
            start = parse_timestamp(request.args["from"]) if request.args.get("from") else None
            end = parse_timestamp(request.args["to"]) if request.args.get("to") else None
        except (ValueError, OverflowError) as exc:
            return _error(f"invalid query parameter: {exc}", 400)

        entries = database.query_logs(
            category=request.args.get("category") or None,
            session_id=request.args.get("session_id") or None,
            start=start,
            end=end,
            limit=limit,
            offset=offset,
        )
        return jsonify(success=True, count=len(entries), logs=entries)

    @app.route("/api/init", methods=["POST"])
    def init_db():
        database.init()
        return jsonify(success=True, message="Database initialized")

    @app.route("/api/init", methods=["GET"])
    def init_hint():
        return jsonify(message="POST to this endpoint to initialize the database tables")

    @app.route("/api/costs", methods=["GET"])
    def costs():
        raw = request.args.get("date", "")
        try:
            day = date.fromisoformat(raw)
        except ValueError:
            return _error("date must be given as YYYY-MM-DD", 400)
        return jsonify(success=True, date=day.isoformat(), costs=database.daily_costs(day))

    @app.route("/health")
    def health():
        return jsonify(status="ok")

    return app
