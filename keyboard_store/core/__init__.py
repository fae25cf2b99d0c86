"""
Core infrastructure components for DynamoDB operations.

- RecordKeyCodec: record <-> item conversion driven by the model's Meta
- TableGateway: existence check, provisioning, get/put/query/scan
- Factory functions for creating gateways
"""

from .codec import RecordKeyCodec
from .table_gateway import TableGateway, TableState, create_table_gateway, map_dynamodb_error

__all__ = [
    "RecordKeyCodec",
    "TableGateway",
    "TableState",
    "create_table_gateway",
    "map_dynamodb_error",
]
