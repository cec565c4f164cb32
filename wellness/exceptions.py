"""
Standardized exception hierarchy for the wellness dashboard
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class WellnessError(Exception):
    """
    Base exception for all wellness dashboard errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise WellnessError(
            message="Failed to save progress",
            user_id="user-123",
            operation="complete_task",
            context={"table": "user_progress"}
        )
    """

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
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # 'message' is reserved by LogRecord
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
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors
# ==========================================

class ValidationError(WellnessError):
    """
    Raised when a value fails validation

    Examples:
    - Non-positive XP amount
    - Unknown reward type in a stored reward row
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class StorageError(WellnessError):
    """
    Base class for persistence gateway failures

    Raised for any failed gateway call (network, permission, malformed filter).
    The progress engine never retries; it propagates these to the caller.
    """

    def __init__(self, message: str, table: Optional[str] = None, **kwargs):
        self.table = table
        kwargs.setdefault("user_message", "We couldn't save your progress. Please try again.")
        context = kwargs.pop("context", None) or {}
        context.setdefault("table", table)
        super().__init__(message=message, context=context, **kwargs)


class ConnectionError(StorageError):
    """Storage backend could not be reached"""

    def __init__(self, message: str = "Storage connection failed", **kwargs):
        super().__init__(
            message=message,
            user_message="We're having trouble reaching your saved progress. Please try again in a moment.",
            **kwargs
        )


class QueryError(StorageError):
    """Storage backend rejected or failed a query"""

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        **kwargs
    ):
        self.query = query
        context = kwargs.pop("context", None) or {}
        context["query"] = query
        super().__init__(
            message=message,
            user_message="We encountered an issue saving your data. Please try again.",
            context=context,
            **kwargs
        )


class NotFoundError(WellnessError):
    """Requested record does not exist or does not belong to the current user"""

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs
    ):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(
            message=message,
            user_message=f"{record_type or 'Record'} not found.",
            context={"record_type": record_type, "record_id": record_id},
            **kwargs
        )


# ==========================================
# Authentication
# ==========================================

class AuthenticationError(WellnessError):
    """Authentication failed"""

    def __init__(
        self,
        message: str = "Authentication failed",
        **kwargs
    ):
        super().__init__(
            message=message,
            user_message="Authentication failed. Please check your credentials.",
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(WellnessError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_external_exception(
    error: Exception,
    operation: str,
    table: Optional[str] = None,
    user_id: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> StorageError:
    """
    Wrap backend exceptions (psycopg, httpx) into StorageError subclasses

    Args:
        error: Original exception
        operation: What gateway operation was being performed
        table: Table the operation targeted
        user_id: User ID if applicable
        context: Additional context

    Returns:
        Appropriate StorageError subclass

    Example:
        try:
            await cur.execute(query, params)
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="insert", table="user_rewards")
    """
    import httpx
    import psycopg

    if isinstance(error, StorageError):
        return error

    if isinstance(error, psycopg.OperationalError):
        return ConnectionError(
            message=f"Database connection failed: {str(error)}",
            table=table,
            user_id=user_id,
            operation=operation,
            context=context,
            cause=error
        )
    elif isinstance(error, psycopg.Error):
        return QueryError(
            message=f"Database query failed: {str(error)}",
            table=table,
            user_id=user_id,
            operation=operation,
            context=context,
            cause=error
        )
    elif isinstance(error, (httpx.ConnectError, httpx.TimeoutException)):
        return ConnectionError(
            message=f"Storage API unreachable: {str(error)}",
            table=table,
            user_id=user_id,
            operation=operation,
            context=context,
            cause=error
        )
    elif isinstance(error, httpx.HTTPStatusError):
        return QueryError(
            message=f"Storage API returned error: {error.response.status_code}",
            table=table,
            user_id=user_id,
            operation=operation,
            context=context,
            cause=error
        )

    return StorageError(
        message=f"{operation} failed: {str(error)}",
        table=table,
        user_id=user_id,
        operation=operation,
        context=context,
        cause=error
    )
