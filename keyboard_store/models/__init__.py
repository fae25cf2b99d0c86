# Table metadata building blocks
from .base import (
    KeyType,
    ScalarType,
    TableMeta,
)

# Core domain models
from .domain_models import (
    Keyboard,
)

# Read-only views of store state
from .views import (
    ACTIVE_STATUS,
    TableDescriptor,
)

__all__ = [
    # Table metadata
    "KeyType",
    "ScalarType",
    "TableMeta",

    # Domain models
    "Keyboard",

    # Views
    "ACTIVE_STATUS",
    "TableDescriptor",
]
