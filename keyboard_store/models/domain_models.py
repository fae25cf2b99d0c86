"""
Domain Models for the Keyboard Store

The catalog holds a single entity, the keyboard. Its identity is the
composite key (id, name): DynamoDB enforces uniqueness on the pair, not on
the id alone.
"""

from decimal import Decimal, DecimalException

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import ScalarType, TableMeta, canonical_number, to_dynamodb_number


class Keyboard(BaseModel):
    """
    A keyboard in the catalog.

    ``id`` is carried as a string but stored with the DynamoDB Number type
    (the table's partition key); ``name`` is the sort key. Instances are
    immutable: a changed keyboard is a new record written over the old one.
    """

    id: str = Field(..., description="Numeric identifier, stored as the partition key")
    name: str = Field(..., description="Keyboard model name, stored as the sort key")

    model_config = ConfigDict(frozen=True)

    @field_validator("id")
    @classmethod
    def canonicalize_numeric_id(cls, value: str) -> str:
        """Spell numeric ids the way the store hands them back ("01" -> "1").

        Ids that are not storable numbers are kept as given; the codec rejects
        them on write.
        """
        try:
            number = to_dynamodb_number(Decimal(value))
        except DecimalException:
            return value
        return canonical_number(number) if number.is_finite() else value

    class Meta(TableMeta):
        table_name = "keebdb-keyboards"
        partition_key = "id"
        partition_key_type = ScalarType.NUMBER
        sort_key = "name"
        sort_key_type = ScalarType.STRING
        projection = ["id", "name"]
