"""
Keyboard Store Utilities

Expression building and model introspection shared by the codec and the
gateway:
- Projection expressions with reserved-word-safe attribute names
- Equality filter expressions
- Partition key conditions for queries
- Meta-class driven model metadata
"""

from typing import Any, Dict, List, Optional, Type

from boto3.dynamodb.conditions import Attr, Key
from pydantic import BaseModel

from .models.base import TableMeta


# =============================================================================
# Query Building Utilities
# =============================================================================

def build_projection_expression(fields: Optional[List[str]]) -> tuple[Optional[str], Optional[Dict[str, str]]]:
    """Build ProjectionExpression with ExpressionAttributeNames for DynamoDB operations.

    This helper safely handles DynamoDB reserved words by using expression
    attribute names; ``name`` is one of them, so the keyboard projection
    cannot be written literally.

    Args:
        fields: List of field names to project, None for all fields

    Returns:
        Tuple of (ProjectionExpression, ExpressionAttributeNames) or (None, None)

    Example:
        >>> build_projection_expression(['id', 'name'])
        ('#f0, #f1', {'#f0': 'id', '#f1': 'name'})
    """
    if not fields:
        return None, None

    expression_names = {}
    projection_parts = []

    for i, field in enumerate(fields):
        attr_name = f"#f{i}"
        expression_names[attr_name] = field
        projection_parts.append(attr_name)

    projection_expression = ', '.join(projection_parts)
    return projection_expression, expression_names


def build_filter_expression(filters: Optional[Dict[str, Any]]):
    """Build FilterExpression for DynamoDB operations.

    Args:
        filters: Dictionary of attribute names to values

    Returns:
        FilterExpression for boto3, or None if no filters

    Example:
        >>> build_filter_expression({'name': 'Model M'})
        # Returns: Attr('name').eq('Model M')
    """
    if not filters:
        return None

    conditions = []
    for attr_name, value in filters.items():
        conditions.append(Attr(attr_name).eq(value))

    # Combine conditions with AND
    filter_expr = conditions[0]
    for condition in conditions[1:]:
        filter_expr = filter_expr & condition

    return filter_expr


def build_key_condition(partition_key: str, partition_value: Any):
    """Build a KeyConditionExpression selecting one partition.

    Args:
        partition_key: Partition key attribute name
        partition_value: Partition key value, already encoded for the store

    Returns:
        KeyConditionExpression for boto3
    """
    return Key(partition_key).eq(partition_value)


# =============================================================================
# Domain Model Introspection (Meta Class Only)
# =============================================================================

def extract_model_metadata(model_class: Type[BaseModel]) -> Dict[str, Any]:
    """Extract metadata from a Pydantic model's Meta class.

    Args:
        model_class: Pydantic BaseModel class with Meta class

    Returns:
        Dictionary with model metadata

    Raises:
        ValueError: If model doesn't have required Meta class attributes

    Example:
        >>> metadata = extract_model_metadata(Keyboard)
        >>> metadata['primary_key_fields']
        ['id', 'name']
    """
    if not hasattr(model_class, 'Meta'):
        raise ValueError(f"Model {model_class.__name__} must have a Meta class with partition_key and sort_key attributes")

    meta = model_class.Meta
    if not (isinstance(meta, type) and issubclass(meta, TableMeta)):
        raise ValueError(f"Model {model_class.__name__}.Meta must derive from TableMeta")

    partition_key = getattr(meta, 'partition_key', None)
    sort_key = getattr(meta, 'sort_key', None)  # Can be None for simple keys

    if not partition_key:
        raise ValueError(f"Model {model_class.__name__}.Meta must define partition_key")

    available_fields = list(model_class.model_fields.keys())
    key_fields = meta.get_key_fields()
    for key_field in key_fields:
        if key_field not in available_fields:
            raise ValueError(f"Key field '{key_field}' is not a field of {model_class.__name__}")

    return {
        'partition_key': partition_key,
        'sort_key': sort_key,
        'primary_key_fields': key_fields,
        'key_types': meta.get_key_types(),
        'available_fields': available_fields,
        'projection': getattr(meta, 'projection', None) or available_fields,
    }
