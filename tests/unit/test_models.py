from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from keyboard_store.models import Keyboard, ScalarType, TableDescriptor


class TestKeyboard:

    def test_key_metadata(self):
        assert Keyboard.Meta.get_key_fields() == ['id', 'name']
        assert Keyboard.Meta.get_key_types() == {'id': ScalarType.NUMBER, 'name': ScalarType.STRING}

    def test_records_are_immutable(self):
        keyboard = Keyboard(id="1", name="Model M")

        with pytest.raises(PydanticValidationError):
            keyboard.name = "Model F"

    def test_json_shape(self):
        assert Keyboard(id="1", name="Model M").model_dump() == {'id': '1', 'name': 'Model M'}

    @pytest.mark.parametrize("given, stored", [
        ("01", "1"),
        ("1e2", "100"),
        ("1.50", "1.5"),
        ("-0", "0"),
        ("42", "42"),
    ])
    def test_numeric_id_is_canonical(self, given, stored):
        assert Keyboard(id=given, name="Model M").id == stored

    @pytest.mark.parametrize("given", ["model-m", "", "NaN", "1" * 40, "1e200"])
    def test_unstorable_id_is_kept_as_given(self, given):
        assert Keyboard(id=given, name="Model M").id == given


class TestTableDescriptor:

    def test_from_description(self):
        created = datetime(2024, 1, 1, tzinfo=timezone.utc)
        descriptor = TableDescriptor.from_description({
            'TableName': 'keebdb-keyboards',
            'TableStatus': 'ACTIVE',
            'TableArn': 'arn:aws:dynamodb:us-east-1:123456789012:table/keebdb-keyboards',
            'KeySchema': [
                {'AttributeName': 'id', 'KeyType': 'HASH'},
                {'AttributeName': 'name', 'KeyType': 'RANGE'},
            ],
            'AttributeDefinitions': [
                {'AttributeName': 'id', 'AttributeType': 'N'},
                {'AttributeName': 'name', 'AttributeType': 'S'},
            ],
            'ProvisionedThroughput': {'ReadCapacityUnits': 5, 'WriteCapacityUnits': 5},
            'ItemCount': 3,
            'CreationDateTime': created,
        })

        assert descriptor.is_active
        assert descriptor.key_schema == [('id', 'HASH'), ('name', 'RANGE')]
        assert descriptor.attribute_definitions == {'id': 'N', 'name': 'S'}
        assert descriptor.read_capacity_units == 5
        assert descriptor.write_capacity_units == 5
        assert descriptor.item_count == 3
        assert descriptor.creation_date_time == created

    def test_creating_table_is_not_active(self):
        descriptor = TableDescriptor.from_description({
            'TableName': 'keebdb-keyboards',
            'TableStatus': 'CREATING',
        })

        assert not descriptor.is_active
        assert descriptor.key_schema == []
        assert descriptor.read_capacity_units is None
