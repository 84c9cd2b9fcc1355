import json
import logging
from unittest.mock import MagicMock, patch

from fastapi import FastAPI

from tymout.config import Settings
from tymout.config.logging import JsonFormatter
from tymout.core.exceptions import (
    AuthenticationError,
    DownstreamTimeoutError,
    DownstreamUnavailableError,
    DuplicateFeedbackError,
    NotAuthorizedError,
    NotFoundError,
    UnknownServiceError,
    ValidationError,
)
from tymout.core.telemetry import setup_telemetry


class TestExceptions:
    def test_status_codes(self):
        assert ValidationError("bad").status_code == 400
        assert DuplicateFeedbackError("event", "e1").status_code == 400
        assert AuthenticationError().status_code == 401
        assert NotAuthorizedError("no").status_code == 401
        assert NotFoundError("Feedback", "f1").status_code == 404
        assert UnknownServiceError("circle").status_code == 500
        assert DownstreamUnavailableError("event", "HTTP 500").status_code == 500
        assert DownstreamTimeoutError("event", 30.0).status_code == 500

    def test_to_dict_without_details(self):
        assert ValidationError("City is required").to_dict() == {
            "success": False,
            "error": "City is required",
            "code": "VALIDATION_ERROR",
        }

    def test_to_dict_with_details(self):
        body = NotFoundError("Feedback", "f1").to_dict()
        assert body["error"] == "Feedback not found: f1"
        assert body["details"] == {"resource": "Feedback", "identifier": "f1"}

    def test_unknown_service_message(self):
        assert UnknownServiceError("circle").message == "Invalid service name: circle"

    def test_timeout_message(self):
        assert DownstreamTimeoutError("user", 30.0).message == "Service timed out: user after 30s"


class TestJsonFormatter:
    def test_includes_extra_context(self):
        record = logging.LogRecord(
            "tymout.clients", logging.ERROR, __file__, 1, "call failed", None, None
        )
        record.service = "event"
        record.endpoint = "/events/city"

        payload = json.loads(JsonFormatter().format(record))

        assert payload["level"] == "ERROR"
        assert payload["message"] == "call failed"
        assert payload["service"] == "event"
        assert payload["endpoint"] == "/events/city"
        assert "user_id" not in payload


class TestTelemetry:
    @patch("tymout.core.telemetry.get_settings")
    @patch("tymout.core.telemetry.Instrumentator")
    def test_setup_telemetry_prometheus_enabled(self, mock_instrumentator, mock_get_settings):
        mock_settings = MagicMock()
        mock_settings.ENABLE_PROMETHEUS = True
        mock_settings.ENABLE_OTEL = False
        mock_get_settings.return_value = mock_settings

        app = FastAPI()
        setup_telemetry(app)

        mock_instrumentator.assert_called_once()
        mock_instrumentator.return_value.instrument.assert_called_once_with(app)

    @patch("tymout.core.telemetry.get_settings")
    @patch("tymout.core.telemetry.OTLPSpanExporter")
    @patch("tymout.core.telemetry.BatchSpanProcessor")
    @patch("tymout.core.telemetry.FastAPIInstrumentor")
    def test_setup_telemetry_otel_enabled(
        self, mock_fastapi_instr, mock_processor, mock_exporter, mock_get_settings
    ):
        mock_settings = MagicMock()
        mock_settings.ENABLE_PROMETHEUS = False
        mock_settings.ENABLE_OTEL = True
        mock_settings.APP_NAME = "test"
        mock_settings.APP_VERSION = "1.0"
        mock_settings.DEBUG = False
        mock_settings.OTEL_EXPORTER_ENDPOINT = "http://collector:4317"
        mock_get_settings.return_value = mock_settings

        app = FastAPI()
        setup_telemetry(app)

        mock_exporter.assert_called_once_with(endpoint="http://collector:4317")
        mock_processor.assert_called_once_with(mock_exporter.return_value)
        mock_fastapi_instr.instrument_app.assert_called_once()
        assert "/health" in mock_fastapi_instr.instrument_app.call_args.kwargs["excluded_urls"]


class TestSettings:
    def test_pagination_settings(self):
        settings = Settings()
        assert settings.MAX_LIMIT == 50
        assert settings.INTEREST_RESULTS_LIMIT == 10
        assert not hasattr(settings, "DEFAULT_LIMIT")
