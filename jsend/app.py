"""Demo Flask application serving JSend envelopes."""
import logging
from pathlib import Path

from flask import Flask, request
from werkzeug.exceptions import HTTPException

from .errors import InvalidRawJSONError
from .middleware.logging import setup_request_logging
from .observability import configure_structured_logging
from .utils.config import (
    EnvironmentSettings,
    load_environment_settings,
    log_configuration_snapshot,
)
from .utils.responses import error_response, fail_response, success_response, wrapped_response

_MIN_ECHO_STATUS = 200
_MAX_ECHO_STATUS = 599


def _configure_logging(app: Flask) -> None:
    """Resolve ``LOG_LEVEL_NAME`` into a numeric level before the logger is built."""

    level = str(app.config.get("LOG_LEVEL_NAME", "INFO")).upper()
    logging_level = getattr(logging, level, None)
    if not isinstance(logging_level, int):
        logging_level = logging.INFO
    app.config["LOG_LEVEL"] = logging_level


def _register_example_routes(app: Flask) -> None:
    @app.route("/health")
    def health():
        return success_response({"status": "ok", "environment": app.config["APP_ENV"]})

    @app.route("/examples/user")
    def example_user():
        """Direct encoder usage: the payload is JSON-encoded for the caller."""

        return success_response({"id": 1, "name": "foo"})

    @app.route("/examples/echo", methods=["POST"])
    def example_echo():
        """Wrapped writer usage: the raw body is classified by ``?status=``."""

        try:
            status_code = int(request.args.get("status", "200"))
        except ValueError:
            status_code = 0
        if not _MIN_ECHO_STATUS <= status_code <= _MAX_ECHO_STATUS:
            return fail_response(
                {"status": f"must be between {_MIN_ECHO_STATUS} and {_MAX_ECHO_STATUS}"}
            )

        writer = wrapped_response()
        writer.set_status_code(status_code)
        try:
            writer.write(request.get_data())
        except InvalidRawJSONError as exc:
            app.logger.info("Rejected echo body", extra={"reason": str(exc)})
            return fail_response({"body": str(exc)})
        return writer.sink.response


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def http_error_handler(error: HTTPException):
        """Render client errors as ``fail`` and server errors as ``error``."""

        status_code = error.code or 500
        message = error.description or error.name or "Error"
        if status_code < 500:
            return fail_response({"code": status_code, "message": message}, status_code)
        return error_response(status_code, message)

    @app.errorhandler(Exception)
    def generic_error_handler(error: Exception):  # noqa: D401 - brief message sufficient
        """Return an ``error`` envelope for unexpected exceptions."""

        app.logger.exception("Unhandled exception", exc_info=error)
        return error_response(500, "Internal Server Error")


def create_app() -> Flask:
    """Create and configure the Flask application."""

    project_root = Path(__file__).resolve().parent.parent
    settings: EnvironmentSettings = load_environment_settings(project_root=project_root)
    app = Flask(__name__)

    app.config["APP_ENV"] = settings.name
    app.config["CONFIG_ENV_FILES"] = settings.loaded_files
    app.config["LOG_LEVEL_NAME"] = (settings.get("LOG_LEVEL", "INFO") or "INFO").upper()
    app.config["LOGGER_NAME"] = settings.get("LOGGER_NAME", "jsend.app") or "jsend.app"
    app.config["APP_PORT"] = int(settings.get("APP_PORT") or settings.get("PORT") or "5000")

    _configure_logging(app)
    configure_structured_logging(app)
    setup_request_logging(app)

    log_configuration_snapshot(
        logger=app.logger,
        settings=settings,
        config=app.config,
        keys_of_interest=["APP_ENV", "CONFIG_ENV_FILES", "LOG_LEVEL_NAME", "LOGGER_NAME", "APP_PORT"],
    )

    _register_example_routes(app)
    _register_error_handlers(app)
    return app


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(application.config["APP_PORT"]))
