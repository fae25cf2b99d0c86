"""
Record <-> DynamoDB item conversion.

RecordKeyCodec reads a model's ``Meta`` key schema and converts records into
the item form the boto3 Table resource expects, and back. Only key attributes
get type conversion (an N-typed key needs a Decimal); every other field passes
through ``model_dump``, so new non-key attributes need no codec or gateway
change.
"""

import logging
from collections.abc import Mapping
from decimal import Decimal, DecimalException, InvalidOperation
from typing import Any, Dict, Generic, List, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import DecodingError, EncodingError
from ..models.base import KeyType, ScalarType, canonical_number, to_dynamodb_number
from ..utils import extract_model_metadata

logger = logging.getLogger(__name__)

ModelT = TypeVar('ModelT', bound=BaseModel)


def _to_number(field: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise EncodingError(
            f"Cannot encode boolean as number for '{field}'",
            errors={field: repr(value)}
        )
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise EncodingError(
            f"Cannot encode '{field}' as a DynamoDB number: {value!r}",
            errors={field: repr(value)},
            original_error=e
        ) from e
    if not number.is_finite():
        raise EncodingError(
            f"DynamoDB numbers must be finite, got {value!r} for '{field}'",
            errors={field: repr(value)}
        )
    try:
        return to_dynamodb_number(number)
    except DecimalException as e:
        raise EncodingError(
            f"'{field}' is out of range for a DynamoDB number: {value!r}",
            errors={field: repr(value)},
            original_error=e
        ) from e


class RecordKeyCodec(Generic[ModelT]):
    """
    Converts between a record model and its DynamoDB item.

    Example:
        codec = RecordKeyCodec(Keyboard)
        codec.encode_key(Keyboard(id="1", name="Model M"))
        # {'id': Decimal('1'), 'name': 'Model M'}
    """

    def __init__(self, model_class: Type[ModelT]):
        self.model_class = model_class
        self.metadata = extract_model_metadata(model_class)
        self.key_types: Dict[str, ScalarType] = self.metadata['key_types']

    @property
    def key_fields(self) -> List[str]:
        return self.metadata['primary_key_fields']

    @property
    def partition_key(self) -> str:
        return self.metadata['partition_key']

    @property
    def sort_key(self):
        return self.metadata['sort_key']

    def projection_fields(self) -> List[str]:
        """Fields requested when scanning without an explicit projection."""
        return list(self.metadata['projection'])

    def encode_value(self, field: str, value: Any) -> Any:
        """Encode a single attribute value for storage.

        Key attributes are checked against their declared scalar type;
        non-key attributes are returned unchanged.

        Raises:
            EncodingError: If a key value cannot be represented
        """
        scalar_type = self.key_types.get(field)
        if scalar_type is None:
            return value
        if scalar_type == ScalarType.NUMBER:
            return _to_number(field, value)
        if scalar_type == ScalarType.STRING and not isinstance(value, str):
            raise EncodingError(
                f"Key attribute '{field}' must be a string, got {type(value).__name__}",
                errors={field: repr(value)}
            )
        if scalar_type == ScalarType.BINARY and not isinstance(value, (bytes, bytearray)):
            raise EncodingError(
                f"Key attribute '{field}' must be binary, got {type(value).__name__}",
                errors={field: repr(value)}
            )
        return value

    def key_from_values(self, **values: Any) -> Dict[str, Any]:
        """Build a key map from raw key values.

        Raises:
            EncodingError: If a key field is missing or cannot be encoded
        """
        missing = [field for field in self.key_fields if values.get(field) is None]
        if missing:
            raise EncodingError(
                f"Missing key field(s) {missing} for {self.model_class.__name__}",
                errors={field: 'missing' for field in missing}
            )
        return {field: self.encode_value(field, values[field]) for field in self.key_fields}

    def encode_key(self, record: ModelT) -> Dict[str, Any]:
        """Produce exactly the key attributes of a record."""
        values = {field: getattr(record, field, None) for field in self.key_fields}
        return self.key_from_values(**values)

    def encode_full(self, record: ModelT) -> Dict[str, Any]:
        """Produce the full item for a record, key attributes included."""
        if not isinstance(record, self.model_class):
            raise EncodingError(
                f"Expected {self.model_class.__name__}, got {type(record).__name__}"
            )
        item = record.model_dump(exclude_none=True)
        item.update(self.encode_key(record))
        return item

    def decode_item(self, item: Mapping) -> ModelT:
        """Rebuild a record from a stored item.

        N-typed key attributes declared as ``str`` on the model come back
        from boto3 as Decimal and are turned back into strings.

        Raises:
            DecodingError: If attributes are missing or have the wrong type
        """
        if not isinstance(item, Mapping):
            raise DecodingError(f"Expected a mapping item, got {type(item).__name__}")

        converted = dict(item)
        for field, scalar_type in self.key_types.items():
            value = converted.get(field)
            if scalar_type == ScalarType.NUMBER and isinstance(value, Decimal):
                if self.model_class.model_fields[field].annotation is str:
                    converted[field] = canonical_number(value)

        try:
            return self.model_class.model_validate(converted)
        except PydanticValidationError as e:
            errors = {
                '.'.join(str(part) for part in error['loc']) or '__root__': error['msg']
                for error in e.errors()
            }
            logger.error(f"Failed to decode item into {self.model_class.__name__}: {errors}")
            raise DecodingError(
                f"Failed to decode item into {self.model_class.__name__}",
                errors=errors,
                original_error=e
            ) from e

    def decode_items(self, items: List[Mapping]) -> List[ModelT]:
        return [self.decode_item(item) for item in items]

    def key_schema(self) -> List[Dict[str, str]]:
        """KeySchema fragment for CreateTable, partition key first."""
        schema = [{'AttributeName': self.partition_key, 'KeyType': KeyType.HASH.value}]
        if self.sort_key:
            schema.append({'AttributeName': self.sort_key, 'KeyType': KeyType.RANGE.value})
        return schema

    def attribute_definitions(self) -> List[Dict[str, str]]:
        """AttributeDefinitions fragment for CreateTable."""
        return [
            {'AttributeName': field, 'AttributeType': self.key_types[field].value}
            for field in self.key_fields
        ]
