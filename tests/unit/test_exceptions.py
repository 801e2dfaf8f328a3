"""Unit tests for custom exception hierarchy"""
import pytest
import psycopg
from datetime import datetime

from src.exceptions import (
    WasteAppError,
    ValidationError,
    DatabaseError,
    ConnectionError,
    QueryError,
    ExternalAPIError,
    AIProviderError,
    ImageFetchError,
    AuthenticationError,
    ConfigurationError,
    ClassificationError,
    ResponseParseError,
    UnknownCategoryError,
    ChatError,
    wrap_external_exception,
)


class TestWasteAppError:
    """Test base exception class"""

    def test_basic_exception(self):
        error = WasteAppError("Test error")
        assert error.message == "Test error"
        assert error.user_message == "An error occurred. Please try again."
        assert error.request_id is not None
        assert isinstance(error.timestamp, datetime)
        assert error.status_code == 500

    def test_exception_with_context(self):
        error = WasteAppError(
            message="Saving pickup failed",
            user_id="user-123",
            operation="schedule_pickup",
            context={"address": "12 Green Street"},
            user_message="Could not schedule your pickup",
        )
        assert error.user_id == "user-123"
        assert error.operation == "schedule_pickup"
        assert error.context["address"] == "12 Green Street"

    def test_to_dict(self):
        error = WasteAppError("boom", user_message="Something broke", request_id="req-1")
        data = error.to_dict()

        assert data["error"] == "Something broke"
        assert data["error_type"] == "WasteAppError"
        assert data["request_id"] == "req-1"
        assert "timestamp" in data


class TestValidationError:
    """Test field-level validation errors"""

    def test_single_field(self):
        error = ValidationError("Address is required", field="address")

        assert error.status_code == 422
        assert error.fields == {"address": "Address is required"}
        assert error.user_message == "Invalid address: Address is required"

    def test_many_fields(self):
        fields = {"address": "Address is required", "waste_types": "Please select at least one waste type"}
        error = ValidationError("Address is required", fields=fields)

        data = error.to_dict()
        assert data["error"] == "Address is required"
        assert data["fields"] == fields


class TestStatusCodes:
    """HTTP status carried by each error type"""

    @pytest.mark.parametrize("error,status", [
        (ConnectionError(), 503),
        (QueryError("insert failed"), 500),
        (AuthenticationError(), 401),
        (ConfigurationError("no key"), 500),
        (ClassificationError("bad"), 500),
        (ExternalAPIError("upstream", status_code=502), 500),
    ])
    def test_status_code(self, error, status):
        assert error.status_code == status

    def test_database_errors_share_a_base(self):
        assert isinstance(QueryError("x"), DatabaseError)
        assert isinstance(ConnectionError(), DatabaseError)


class TestDomainErrors:
    """Classification, AI and chat errors"""

    def test_classification_error_message(self):
        error = ClassificationError("model timed out")
        assert error.user_message == "Classification failed: model timed out"

    def test_response_parse_error_truncates_raw_response(self):
        error = ResponseParseError(raw_response="x" * 2000)
        assert error.raw_response == "x" * 2000
        assert len(error.context["raw_response"]) == 500

    def test_unknown_category_error(self):
        error = UnknownCategoryError("Styrofoam")
        assert isinstance(error, ClassificationError)
        assert error.message == "Unknown waste category: 'Styrofoam'"

    def test_ai_provider_error_surfaces_message(self):
        error = AIProviderError("quota exceeded", provider="openai")
        assert error.service == "openai"
        assert error.user_message == "quota exceeded"

    def test_image_fetch_error(self):
        error = ImageFetchError("404")
        assert error.service == "image host"
        assert isinstance(error, ExternalAPIError)

    def test_external_api_error_keeps_upstream_status(self):
        error = ExternalAPIError("bad gateway", service="gemini", status_code=502)
        assert error.upstream_status_code == 502

    def test_chat_error(self):
        error = ChatError("rate limited")
        assert error.user_message == "Failed to get response from assistant: rate limited"

    def test_configuration_error_custom_message(self):
        error = ConfigurationError("missing", config_key="CHAT_MODEL", user_message="Chatbot is not configured.")
        assert error.config_key == "CHAT_MODEL"
        assert error.user_message == "Chatbot is not configured."


class TestWrapExternalException:
    """Test wrapping third-party exceptions"""

    def test_wrap_operational_error(self):
        wrapped = wrap_external_exception(psycopg.OperationalError("server closed"), operation="get_user_stats")

        assert isinstance(wrapped, ConnectionError)
        assert wrapped.operation == "get_user_stats"

    def test_wrap_query_error(self):
        wrapped = wrap_external_exception(psycopg.errors.UniqueViolation("dup"), operation="award_user_badge")
        assert isinstance(wrapped, QueryError)

    def test_wrap_generic(self):
        wrapped = wrap_external_exception(KeyError("id"), operation="save_classification", user_id="user-123")

        assert type(wrapped) is WasteAppError
        assert wrapped.user_id == "user-123"
        assert "save_classification failed" in wrapped.message
