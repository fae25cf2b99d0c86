"""
Test configuration and fixtures for the keyboard store.

Provides configurations, moto-backed DynamoDB resources and gateways bound
to a mocked keyboard table.
"""

import sys
from pathlib import Path

# Add parent directory to path so we can import keyboard_store
sys.path.insert(0, str(Path(__file__).parent.parent))

import boto3
import pytest
from moto import mock_aws

from keyboard_store import DynamoDBConfig, Keyboard, TableGateway, create_table_gateway

TEST_TABLE_NAME = "test_dev_keebdb-keyboards"


@pytest.fixture(autouse=True)
def aws_environment(monkeypatch):
    """Keep tests away from real credentials and endpoints."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    for name in ("DYNAMODB_ENDPOINT_URL", "DYNAMODB_TABLE_PREFIX", "ENVIRONMENT",
                 "KEYBOARD_TABLE_NAME", "API_HOST", "API_PORT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_dynamodb_config():
    """DynamoDB configuration for mocked testing."""
    return DynamoDBConfig(
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name="us-east-1",
        endpoint_url=None,  # Use default AWS endpoint for moto
        environment="dev",
        table_prefix="test",
        provisioning_timeout_seconds=10,
        provisioning_poll_delay_seconds=1
    )


@pytest.fixture
def mock_dynamodb_resource():
    """Mock DynamoDB resource."""
    with mock_aws():
        yield boto3.resource('dynamodb', region_name='us-east-1')


@pytest.fixture
def keyboard_table(mock_dynamodb_resource):
    """Create the keyboard table the way the gateway provisions it."""
    table = mock_dynamodb_resource.create_table(
        TableName=TEST_TABLE_NAME,
        KeySchema=[
            {'AttributeName': 'id', 'KeyType': 'HASH'},
            {'AttributeName': 'name', 'KeyType': 'RANGE'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'id', 'AttributeType': 'N'},
            {'AttributeName': 'name', 'AttributeType': 'S'}
        ],
        BillingMode='PROVISIONED',
        ProvisionedThroughput={'ReadCapacityUnits': 5, 'WriteCapacityUnits': 5}
    )
    return table


@pytest.fixture
def empty_gateway(mock_dynamodb_config, mock_dynamodb_resource) -> TableGateway:
    """Gateway whose table does not exist yet."""
    return create_table_gateway(mock_dynamodb_config)


@pytest.fixture
def gateway(mock_dynamodb_config, keyboard_table) -> TableGateway:
    """Gateway bound to an existing, empty keyboard table."""
    return create_table_gateway(mock_dynamodb_config)


@pytest.fixture
def model_m():
    return Keyboard(id="1", name="Model M")


@pytest.fixture
def sample_keyboards():
    return [
        Keyboard(id="1", name="Model M"),
        Keyboard(id="1", name="Model F"),
        Keyboard(id="2", name="HHKB Professional"),
        Keyboard(id="3", name="Planck"),
    ]
