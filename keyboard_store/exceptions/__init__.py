# Base exception class
from .base import KeyboardStoreError

# Domain-specific exceptions
from .domain_exceptions import (
    DecodingError,
    EncodingError,
    NotFoundError,
    ProvisioningError,
    QueryBuildError,
    StoreOperationError,
    StoreReadError,
    StoreWriteError,
    TimeoutError,
    TransportError,
)

__all__ = [
    # Base exception
    "KeyboardStoreError",

    # Domain exceptions (alphabetically ordered)
    "DecodingError",
    "EncodingError",
    "NotFoundError",
    "ProvisioningError",
    "QueryBuildError",
    "StoreOperationError",
    "StoreReadError",
    "StoreWriteError",
    "TimeoutError",
    "TransportError",
]
