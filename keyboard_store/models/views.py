"""
Read-Only View Models

Snapshots of store-side state returned by the gateway. They are built from
raw boto3 responses and never written back.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

ACTIVE_STATUS = "ACTIVE"


class TableDescriptor(BaseModel):
    """
    Description of a provisioned DynamoDB table.

    Mirrors the parts of a ``TableDescription`` the service cares about:
    identity, status, key schema and provisioned throughput.
    """

    table_name: str = Field(..., description="Full table name")
    table_status: str = Field(..., description="CREATING, ACTIVE, UPDATING, ...")
    table_arn: Optional[str] = Field(None, description="Table ARN")
    key_schema: List[Tuple[str, str]] = Field(
        default_factory=list,
        description="Ordered (attribute_name, key_type) pairs, HASH first"
    )
    attribute_definitions: Dict[str, str] = Field(
        default_factory=dict,
        description="Attribute name to scalar type (S, N, B)"
    )
    read_capacity_units: Optional[int] = Field(None, description="Provisioned read capacity")
    write_capacity_units: Optional[int] = Field(None, description="Provisioned write capacity")
    item_count: Optional[int] = Field(None, description="Approximate item count")
    creation_date_time: Optional[datetime] = Field(None, description="When the table was created")

    @property
    def is_active(self) -> bool:
        return self.table_status == ACTIVE_STATUS

    @classmethod
    def from_description(cls, description: Dict[str, Any]) -> 'TableDescriptor':
        """Build a descriptor from a boto3 ``TableDescription`` dict.

        Args:
            description: The ``Table`` (DescribeTable) or ``TableDescription``
                (CreateTable) element of a DynamoDB response

        Returns:
            TableDescriptor instance
        """
        throughput = description.get('ProvisionedThroughput') or {}
        item_count = description.get('ItemCount')
        return cls(
            table_name=description['TableName'],
            table_status=description.get('TableStatus', 'UNKNOWN'),
            table_arn=description.get('TableArn'),
            key_schema=[
                (element['AttributeName'], element['KeyType'])
                for element in description.get('KeySchema', [])
            ],
            attribute_definitions={
                definition['AttributeName']: definition['AttributeType']
                for definition in description.get('AttributeDefinitions', [])
            },
            read_capacity_units=throughput.get('ReadCapacityUnits'),
            write_capacity_units=throughput.get('WriteCapacityUnits'),
            item_count=int(item_count) if item_count is not None else None,
            creation_date_time=description.get('CreationDateTime'),
        )
