"""
Base Model Components

Table metadata shared by every record model. A model declares its DynamoDB
shape through an inner ``Meta`` class deriving from ``TableMeta``; the codec
and the gateway read the key schema from there, so neither hardcodes
attribute names.

## Usage Example

```python
class Keyboard(BaseModel):
    id: str
    name: str

    class Meta(TableMeta):
        table_name = "keebdb-keyboards"
        partition_key = "id"
        partition_key_type = ScalarType.NUMBER
        sort_key = "name"
        sort_key_type = ScalarType.STRING
```
"""

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from boto3.dynamodb.types import DYNAMODB_CONTEXT


class ScalarType(str, Enum):
    """DynamoDB scalar attribute types usable in a key schema."""
    STRING = "S"
    NUMBER = "N"
    BINARY = "B"


class KeyType(str, Enum):
    """Role of an attribute within the primary key."""
    HASH = "HASH"
    RANGE = "RANGE"


def normalize_number(number: Decimal) -> Decimal:
    """Drop trailing zeros from a finite Decimal without rounding.

    Unlike ``Decimal.normalize`` this ignores the context precision, so wide
    values keep every significant digit. Every zero becomes ``Decimal(0)``.
    """
    if not number.is_finite():
        return number
    sign, digits, exponent = number.as_tuple()
    if not any(digits):
        return Decimal(0)
    digits = list(digits)
    while digits[-1] == 0:
        digits.pop()
        exponent += 1
    return Decimal((sign, tuple(digits), exponent))


def canonical_number(number: Decimal) -> str:
    """Plain-notation string for a finite number: ``1E+2`` -> ``100``, ``1.50`` -> ``1.5``."""
    return format(normalize_number(number), "f")


def to_dynamodb_number(number: Decimal) -> Decimal:
    """Fit a number into the DynamoDB number type.

    DynamoDB keeps at most 38 significant digits within a bounded exponent
    range. Values outside it raise a ``decimal.DecimalException`` subclass
    such as ``Inexact`` or ``Overflow``.
    """
    return DYNAMODB_CONTEXT.create_decimal(normalize_number(number))


class TableMeta:
    """Base class for table metadata definitions."""
    table_name: str
    partition_key: str
    partition_key_type: ScalarType = ScalarType.STRING
    sort_key: Optional[str] = None
    sort_key_type: ScalarType = ScalarType.STRING
    projection: Optional[List[str]] = None

    @classmethod
    def get_key_fields(cls) -> List[str]:
        """Get DynamoDB item key field names.

        Returns the list of fields that form the DynamoDB item key:
        - For simple keys: [partition_key]
        - For composite keys: [partition_key, sort_key]
        """
        fields = [cls.partition_key]
        if cls.sort_key:
            fields.append(cls.sort_key)
        return fields

    @classmethod
    def get_key_types(cls) -> dict:
        """Map each key field to its declared scalar type."""
        types = {cls.partition_key: ScalarType(cls.partition_key_type)}
        if cls.sort_key:
            types[cls.sort_key] = ScalarType(cls.sort_key_type)
        return types
