"""
Domain-Specific Exceptions for the Keyboard Store

All exceptions extend KeyboardStoreError. They are grouped by the layer
that raises them:

1. Codec Errors (record <-> item conversion)
2. Resource Not Found Errors
3. Provisioning Errors
4. Store Operation Errors
"""

from typing import Any, Dict, Optional

from .base import KeyboardStoreError


# =============================================================================
# Codec Errors
# =============================================================================

class EncodingError(KeyboardStoreError):
    """Raised when a record cannot be represented as a DynamoDB item.

    Used for:
    - Key values that do not fit the declared attribute type (e.g. a
      non-numeric id for an N-typed partition key)
    - Missing key fields when building a key map
    """

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        """Initialize encoding error.

        Args:
            message: Human-readable error message
            errors: Dictionary of field-level encoding errors
            original_error: The original exception that caused this error
        """
        self.errors = errors or {}
        context = {
            'encoding_errors': self.errors
        }
        super().__init__(message, original_error, context)


class DecodingError(KeyboardStoreError):
    """Raised when a stored item cannot be turned back into a record.

    Used for:
    - Items missing required attributes
    - Attributes whose type does not match the model (schema drift)
    """

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        """Initialize decoding error.

        Args:
            message: Human-readable error message
            errors: Dictionary of field-level decoding errors
            original_error: The original exception that caused this error
        """
        self.errors = errors or {}
        context = {
            'decoding_errors': self.errors
        }
        super().__init__(message, original_error, context)


# =============================================================================
# Resource Not Found Errors
# =============================================================================

class NotFoundError(KeyboardStoreError):
    """Raised when a DynamoDB resource (table or item) is not found.

    Expected and non-fatal: a missing table is what triggers provisioning.
    """

    def __init__(self, message: str, resource_type: Optional[str] = None, resource_name: Optional[str] = None, original_error: Optional[Exception] = None):
        """Initialize not found error.

        Args:
            message: Human-readable error message
            resource_type: Type of resource not found (e.g., 'table', 'item')
            resource_name: Name of the resource not found
            original_error: The original exception that caused this error
        """
        self.resource_type = resource_type
        self.resource_name = resource_name
        context = {}
        if resource_type:
            context['resource_type'] = resource_type
        if resource_name:
            context['resource_name'] = resource_name
        super().__init__(message, original_error, context)


# =============================================================================
# Provisioning Errors
# =============================================================================

class ProvisioningError(KeyboardStoreError):
    """Raised when the store rejects a table creation request."""

    def __init__(self, message: str, table_name: Optional[str] = None, original_error: Optional[Exception] = None):
        self.table_name = table_name
        context = {}
        if table_name:
            context['table_name'] = table_name
        super().__init__(message, original_error, context)


class TimeoutError(ProvisioningError):
    """Raised when a new table does not become ACTIVE within the wait bound."""

    def __init__(self, message: str, table_name: Optional[str] = None, timeout_seconds: Optional[float] = None, original_error: Optional[Exception] = None):
        self.timeout_seconds = timeout_seconds
        super().__init__(message, table_name, original_error)
        if timeout_seconds is not None:
            self.context['timeout_seconds'] = timeout_seconds


# =============================================================================
# Store Operation Errors
# =============================================================================

class StoreOperationError(KeyboardStoreError):
    """Common base for failures of a single store call.

    ``retryable`` marks throttling and temporary service failures; no retry
    policy is applied here, callers decide.
    """

    def __init__(self, message: str, retryable: bool = False, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        self.retryable = retryable
        context = dict(context or {})
        if retryable:
            context['retryable'] = True
        super().__init__(message, original_error, context)


class TransportError(StoreOperationError):
    """Raised when the store cannot be reached or refuses the caller.

    Used for:
    - Network connectivity issues and timeouts
    - Authentication/authorization failures
    - Invalid endpoint configurations
    - Existence checks that could not be answered
    """


class QueryBuildError(StoreOperationError):
    """Raised when a projection or filter expression cannot be built."""


class StoreReadError(StoreOperationError):
    """Raised when GetItem, Query or Scan fails."""


class StoreWriteError(StoreOperationError):
    """Raised when PutItem fails (throttling, validation failure)."""
