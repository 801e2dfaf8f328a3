"""
Standardized exception hierarchy for smart-waste
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class WasteAppError(Exception):
    """
    Base exception for all smart-waste errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise WasteAppError(
            message="Failed to save pickup request",
            user_id="user-123",
            operation="schedule_pickup",
            context={"address": "1 Main St"}
        )
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.utcnow()

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.user_message,
            "error_type": self.__class__.__name__,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (User Input)
# ==========================================

class ValidationError(WasteAppError):
    """
    Raised when user input fails validation

    Carries field-level messages so forms can show them next to each input.

    Example:
        raise ValidationError(
            message="Pickup request is invalid",
            fields={"address": "Address is required"},
            user_id="user-123"
        )
    """

    status_code = 422

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        fields: Optional[Dict[str, str]] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        self.fields = fields or ({field: message} if field else {})
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value, "fields": self.fields},
            **kwargs
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["fields"] = self.fields
        return data


# ==========================================
# Database Errors
# ==========================================

class DatabaseError(WasteAppError):
    """
    Base class for database-related errors
    """
    pass


class ConnectionError(DatabaseError):
    """Database connection failed"""

    status_code = 503

    def __init__(self, message: str = "Database connection failed", **kwargs):
        super().__init__(
            message=message,
            user_message="We're having trouble connecting to the database. Please try again in a moment.",
            **kwargs
        )


class QueryError(DatabaseError):
    """Database query execution failed"""

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        **kwargs
    ):
        self.query = query
        super().__init__(
            message=message,
            user_message="We encountered a database issue. Please try again.",
            context={"query": query},
            **kwargs
        )


# ==========================================
# External API Errors
# ==========================================

class ExternalAPIError(WasteAppError):
    """
    Base class for external API failures
    """

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        status_code: Optional[int] = None,
        user_message: Optional[str] = None,
        **kwargs
    ):
        self.service = service
        self.upstream_status_code = status_code
        super().__init__(
            message=message,
            user_message=user_message or f"We're having trouble connecting to {service or 'an external service'}. Please try again later.",
            context={"service": service, "status_code": status_code},
            **kwargs
        )


class AIProviderError(ExternalAPIError):
    """Generative AI provider call failed (vision or chat)"""

    def __init__(self, message: str, provider: Optional[str] = None, **kwargs):
        kwargs.setdefault("user_message", message)
        super().__init__(
            message=message,
            service=provider or "AI provider",
            **kwargs
        )


class ImageFetchError(ExternalAPIError):
    """Downloading the image to classify failed"""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            service="image host",
            user_message="We couldn't load that image. Please check the URL and try again.",
            **kwargs
        )


# ==========================================
# Authentication
# ==========================================

class AuthenticationError(WasteAppError):
    """Authentication failed"""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication failed",
        **kwargs
    ):
        super().__init__(
            message=message,
            user_message="Unauthorized",
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(WasteAppError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        user_message: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message=user_message or "The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Classification / AI Errors
# ==========================================

class ClassificationError(WasteAppError):
    """Waste classification failed"""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("user_message", f"Classification failed: {message}")
        super().__init__(message=message, **kwargs)


class ResponseParseError(ClassificationError):
    """AI response could not be parsed into JSON"""

    def __init__(self, message: str = "Invalid response format from AI", raw_response: Optional[str] = None, **kwargs):
        self.raw_response = raw_response
        super().__init__(
            message=message,
            context={"raw_response": (raw_response or "")[:500]},
            **kwargs
        )


class UnknownCategoryError(ClassificationError):
    """A category outside the closed WasteCategory enum was looked up"""

    def __init__(self, category: Any, **kwargs):
        self.category = category
        super().__init__(
            message=f"Unknown waste category: {category!r}",
            context={"category": str(category)},
            **kwargs
        )


class ChatError(WasteAppError):
    """Chat assistant failed to answer"""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            user_message=f"Failed to get response from assistant: {message}",
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_external_exception(
    error: Exception,
    operation: str,
    user_id: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> WasteAppError:
    """
    Wrap driver exceptions (psycopg) into our exception hierarchy

    Args:
        error: Original exception
        operation: What operation was being performed
        user_id: User ID if applicable
        context: Additional context

    Returns:
        Appropriate WasteAppError subclass

    Example:
        try:
            await cur.execute(query)
        except psycopg.Error as e:
            raise wrap_external_exception(
                e,
                operation="create_pickup_request",
                user_id="user-123",
            )
    """
    import psycopg

    # Database errors
    if isinstance(error, psycopg.OperationalError):
        return ConnectionError(
            message=f"Database connection failed: {str(error)}",
            user_id=user_id,
            operation=operation,
            context=context,
            cause=error
        )
    elif isinstance(error, psycopg.Error):
        return QueryError(
            message=f"Database query failed: {str(error)}",
            user_id=user_id,
            operation=operation,
            cause=error
        )

    # Generic fallback
    else:
        return WasteAppError(
            message=f"{operation} failed: {str(error)}",
            user_id=user_id,
            operation=operation,
            context=context,
            cause=error
        )
