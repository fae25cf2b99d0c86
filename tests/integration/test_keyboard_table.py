"""
Keyboard table integration tests against moto's DynamoDB.

Covers the table lifecycle (absent -> created -> present) and the item
operations end to end, including the N-typed partition key.
"""

from typing import Optional

import pytest

from keyboard_store import Keyboard, TableGateway, TableState, create_table_gateway
from keyboard_store.exceptions import EncodingError, NotFoundError, QueryBuildError


class ExtendedKeyboard(Keyboard):
    """Keyboard with a non-key attribute, sharing the keyboard table schema."""
    layout: Optional[str] = None


class TestTableLifecycle:

    def test_absent_table_is_created_and_active(self, empty_gateway):
        """Absent table: exists() is False, create() returns an ACTIVE descriptor, exists() turns True."""
        assert empty_gateway.exists() is False
        assert empty_gateway.state == TableState.ABSENT

        descriptor = empty_gateway.create()

        assert descriptor.table_name == empty_gateway.table_name
        assert descriptor.table_status == "ACTIVE"
        assert descriptor.key_schema == [('id', 'HASH'), ('name', 'RANGE')]
        assert descriptor.attribute_definitions == {'id': 'N', 'name': 'S'}
        assert descriptor.read_capacity_units == 5
        assert descriptor.write_capacity_units == 5
        assert empty_gateway.exists() is True
        assert empty_gateway.state == TableState.PRESENT

    def test_exists_is_stable(self, empty_gateway):
        assert empty_gateway.exists() == empty_gateway.exists()

    def test_describe_absent_table(self, empty_gateway):
        with pytest.raises(NotFoundError):
            empty_gateway.describe()

    def test_ensure_table_creates_once(self, empty_gateway):
        assert empty_gateway.ensure_table() == TableState.PRESENT
        assert empty_gateway.ensure_table() == TableState.PRESENT

        assert empty_gateway.list_tables().count(empty_gateway.table_name) == 1

    def test_ensure_table_uses_existing_table(self, gateway):
        assert gateway.ensure_table() == TableState.PRESENT
        assert gateway.describe().is_active

    def test_list_tables(self, gateway):
        assert gateway.table_name in gateway.list_tables()

    def test_scan_of_absent_table_is_not_found(self, empty_gateway):
        with pytest.raises(NotFoundError):
            empty_gateway.scan()


class TestItemOperations:

    def test_put_then_scan(self, gateway, model_m):
        gateway.put(model_m)

        assert gateway.scan() == [Keyboard(id="1", name="Model M")]

    def test_identical_key_overwrites(self, gateway, model_m):
        gateway.put(model_m)
        gateway.put(Keyboard(id="1", name="Model M"))

        assert gateway.scan() == [model_m]

    def test_latest_non_key_value_wins(self, mock_dynamodb_config, keyboard_table):
        extended = TableGateway(mock_dynamodb_config, keyboard_table.name, model_class=ExtendedKeyboard)

        extended.put(ExtendedKeyboard(id="1", name="Model M", layout="ANSI"))
        extended.put(ExtendedKeyboard(id="1", name="Model M", layout="ISO"))

        assert extended.get("1", "Model M").layout == "ISO"
        assert len(extended.scan()) == 1

    def test_scan_returns_every_item(self, gateway, sample_keyboards):
        for keyboard in sample_keyboards:
            gateway.put(keyboard)

        scanned = gateway.scan()

        assert len(scanned) == len(sample_keyboards)
        assert set(scanned) == set(sample_keyboards)

    def test_scan_empty_table(self, gateway):
        assert gateway.scan() == []

    def test_scan_with_filter(self, gateway, sample_keyboards):
        for keyboard in sample_keyboards:
            gateway.put(keyboard)

        assert gateway.scan(filters={'name': 'Planck'}) == [Keyboard(id="3", name="Planck")]

    def test_scan_filter_with_out_of_range_id(self, gateway):
        with pytest.raises(QueryBuildError):
            gateway.scan(filters={'id': "1" * 40})

    def test_get_by_composite_key(self, gateway, sample_keyboards):
        for keyboard in sample_keyboards:
            gateway.put(keyboard)

        assert gateway.get("1", "Model F") == Keyboard(id="1", name="Model F")
        assert gateway.get("1", "Planck") is None

    def test_query_by_id(self, gateway, sample_keyboards):
        for keyboard in sample_keyboards:
            gateway.put(keyboard)

        names = sorted(keyboard.name for keyboard in gateway.query_by_id("1"))

        assert names == ["Model F", "Model M"]
        assert gateway.query_by_id("99") == []

    def test_non_numeric_id_is_rejected_before_write(self, gateway):
        with pytest.raises(EncodingError):
            gateway.put(Keyboard(id="one", name="Model M"))

        assert gateway.scan() == []

    @pytest.mark.parametrize("bad_id", ["1" * 40, "1e200"])
    def test_out_of_range_id_is_rejected_before_write(self, gateway, bad_id):
        with pytest.raises(EncodingError):
            gateway.put(Keyboard(id=bad_id, name="Model M"))

        with pytest.raises(EncodingError):
            gateway.get(bad_id, "Model M")

        with pytest.raises(EncodingError):
            gateway.query_by_id(bad_id)

        assert gateway.scan() == []

    def test_non_canonical_id_reads_back_unchanged(self, gateway):
        keyboard = Keyboard(id="01", name="Model M")
        gateway.put(keyboard)

        assert gateway.get("1", "Model M") == keyboard
        assert gateway.query_by_id("1") == [keyboard]
        assert gateway.scan() == [keyboard]

    def test_factory_gateway_reads_same_table(self, mock_dynamodb_config, gateway, model_m):
        gateway.put(model_m)

        assert create_table_gateway(mock_dynamodb_config).scan() == [model_m]
