"""Custom exceptions for the BasketRec API.

Defines specific exception types for better error handling and reporting.
"""

from typing import Any, Dict, Optional


class BasketRecException(Exception):
    """Base exception for BasketRec errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for API responses
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class ModelNotFoundError(BasketRecException):
    """Raised when no affinity model has been built."""

    def __init__(self, data_path: str, details: Optional[Dict[str, Any]] = None):
        message = (
            f"Model not available: no purchase data at '{data_path}'. "
            "Set BASKETREC_DATA_PATH to a purchase CSV."
        )
        super().__init__(
            message=message,
            status_code=503,
            details=details or {"data_path": data_path},
        )


class ModelLoadError(BasketRecException):
    """Raised when the purchase data cannot be turned into a model."""

    def __init__(self, data_path: str, error: Exception):
        message = f"Failed to build model from '{data_path}': {str(error)}"
        super().__init__(
            message=message,
            status_code=500,
            details={
                "data_path": data_path,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )
