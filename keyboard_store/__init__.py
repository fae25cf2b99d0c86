"""
Keyboard Store

A small keyboard catalog backed by a DynamoDB table, built on boto3 and
Pydantic: a Meta-driven record codec, a table gateway with existence-checked
provisioning, and a FastAPI read/write surface.
"""

from .config import DynamoDBConfig
from .exceptions import (
    DecodingError,
    EncodingError,
    KeyboardStoreError,
    NotFoundError,
    ProvisioningError,
    QueryBuildError,
    StoreReadError,
    StoreWriteError,
    TimeoutError,
    TransportError,
)
from .models import (
    Keyboard,
    TableDescriptor,
)
from .core import (
    RecordKeyCodec,
    TableGateway,
    TableState,
    create_table_gateway,
)

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "DynamoDBConfig",

    # Exceptions
    "DecodingError",
    "EncodingError",
    "KeyboardStoreError",
    "NotFoundError",
    "ProvisioningError",
    "QueryBuildError",
    "StoreReadError",
    "StoreWriteError",
    "TimeoutError",
    "TransportError",

    # Models
    "Keyboard",
    "TableDescriptor",

    # Codec and gateway
    "RecordKeyCodec",
    "TableGateway",
    "TableState",
    "create_table_gateway",
]
