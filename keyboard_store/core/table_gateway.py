"""
Keyboard Table Gateway

Owns the boto3 DynamoDB handles and the table identity, and exposes the
handful of operations the service needs:

- existence check and synchronous provisioning of the keyboard table
- point lookup by the full composite key, and lookup by partition
- upsert
- projection-based scan

Every boto3 failure is mapped to a domain exception through
map_dynamodb_error; nothing in here terminates the process.

Scans and queries read a single page. A table large enough to need more
pages is logged as truncated rather than silently cut.
"""

import logging
import math
from enum import Enum
from typing import Any, Dict, List, Optional, Type

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, WaiterError

from ..config import DynamoDBConfig
from ..exceptions import (
    EncodingError,
    NotFoundError,
    ProvisioningError,
    QueryBuildError,
    StoreReadError,
    StoreWriteError,
    TimeoutError,
    TransportError,
)
from ..models import Keyboard, TableDescriptor
from ..utils import build_filter_expression, build_key_condition, build_projection_expression
from .codec import RecordKeyCodec

logger = logging.getLogger(__name__)


# Error class raised for a failed call when the error code has no more
# specific mapping.
OPERATION_ERRORS = {
    'DescribeTable': TransportError,
    'ListTables': TransportError,
    'CreateTable': ProvisioningError,
    'GetItem': StoreReadError,
    'Query': StoreReadError,
    'Scan': StoreReadError,
    'PutItem': StoreWriteError,
}

RETRYABLE_ERROR_CODES = {
    'ProvisionedThroughputExceededException',
    'RequestLimitExceeded',
    'ThrottlingException',
    'TooManyRequestsException',
    'InternalServerError',
    'ServiceUnavailable',
    'ServiceUnavailableException',
    'RequestTimeoutException',
}

EXPECTED_ERROR_CODES = {
    'ValidationException',
    'ResourceInUseException',
    'LimitExceededException',
    'ConditionalCheckFailedException',
    'ItemCollectionSizeLimitExceededException',
}

TRANSPORT_ERROR_CODES = {
    'UnrecognizedClientException',
    'AccessDeniedException',
    'MissingAuthenticationTokenException',
    'InvalidEndpointException',
    'IncompleteSignatureException',
    'InvalidSignatureException',
    'ExpiredTokenException',
    'TokenRefreshRequiredException',
}


def map_dynamodb_error(
    error: ClientError,
    operation: str,
    table_name: str,
    resource_id: Optional[str] = None
) -> Exception:
    """Map DynamoDB ClientError to domain-specific exceptions.

    Args:
        error: The boto3 ClientError
        operation: The operation that failed (e.g., "GetItem", "PutItem")
        table_name: The DynamoDB table name
        resource_id: Optional resource identifier for context

    Returns:
        NotFoundError for a missing table, TransportError for
        auth/endpoint failures, otherwise the operation's own error class
        (TransportError, ProvisioningError, StoreReadError or
        StoreWriteError) with ``retryable`` set for throttling codes.
    """
    error_code = error.response.get('Error', {}).get('Code', 'Unknown')
    error_message = error.response.get('Error', {}).get('Message', str(error))

    context = f"{operation} on {table_name}"
    if resource_id:
        context += f" (resource: {resource_id})"

    full_message = f"{context}: {error_message}"
    error_context = {'operation': operation, 'table_name': table_name, 'error_code': error_code}
    if resource_id:
        error_context['resource_id'] = resource_id

    if error_code == 'ResourceNotFoundException':
        return NotFoundError(f"Table not found - {full_message}", 'table', table_name, original_error=error)

    if error_code in TRANSPORT_ERROR_CODES:
        return TransportError(
            f"Authentication/endpoint failure - {full_message}",
            original_error=error,
            context=error_context
        )

    retryable = error_code in RETRYABLE_ERROR_CODES
    error_class = OPERATION_ERRORS.get(operation)
    if error_class is None:
        logger.warning(f"Unknown DynamoDB operation '{operation}' mapped to TransportError")
        error_class = TransportError
    elif not retryable and error_code not in EXPECTED_ERROR_CODES:
        logger.warning(f"Unknown DynamoDB error code '{error_code}' mapped to {error_class.__name__}")

    if issubclass(error_class, ProvisioningError):
        return error_class(f"Table creation rejected - {full_message}", table_name, original_error=error)

    prefix = "Throttling" if retryable else "DynamoDB operation failed"
    return error_class(f"{prefix} - {full_message}", retryable=retryable, original_error=error, context=error_context)


class TableState(str, Enum):
    """Lifecycle of the gateway's table within one process run."""
    UNKNOWN = "unknown"
    ABSENT = "absent"
    PROVISIONING = "provisioning"
    PRESENT = "present"
    FAILED = "failed"


class TableGateway:
    """
    Gateway for the keyboard table.

    Holds the configuration, the table name and lazily-created boto3
    handles; there is no other shared state between calls, so concurrent
    callers need no locking.
    """

    def __init__(self, config: DynamoDBConfig, table_name: str, model_class: Type[Keyboard] = Keyboard):
        """Initialize table gateway.

        Args:
            config: DynamoDB configuration
            table_name: Full name of the DynamoDB table
            model_class: Record model stored in the table
        """
        self.config = config
        self.table_name = table_name
        self.codec = RecordKeyCodec(model_class)
        self.state = TableState.UNKNOWN
        self._dynamodb = None
        self._table = None

    @property
    def dynamodb(self):
        """Lazy initialization of DynamoDB resource."""
        if self._dynamodb is None:
            try:
                session = boto3.Session(
                    aws_access_key_id=self.config.aws_access_key_id,
                    aws_secret_access_key=self.config.aws_secret_access_key,
                    region_name=self.config.region_name
                )

                dynamodb_config = {
                    'region_name': self.config.region_name
                }

                if self.config.endpoint_url:
                    dynamodb_config['endpoint_url'] = self.config.endpoint_url

                boto_config = Config(
                    retries={'max_attempts': self.config.retries},
                    max_pool_connections=self.config.max_pool_connections,
                    read_timeout=self.config.timeout_seconds,
                    connect_timeout=self.config.timeout_seconds
                )
                dynamodb_config['config'] = boto_config

                self._dynamodb = session.resource('dynamodb', **dynamodb_config)
            except Exception as e:
                logger.error(f"Failed to create DynamoDB resource: {e}")
                raise TransportError(f"Failed to connect to DynamoDB: {e}", original_error=e) from e
        return self._dynamodb

    @property
    def client(self):
        """Low-level client behind the resource, used for table management."""
        return self.dynamodb.meta.client

    @property
    def table(self):
        """Get boto3 DynamoDB Table resource."""
        if self._table is None:
            try:
                self._table = self.dynamodb.Table(self.table_name)
            except Exception as e:
                logger.error(f"Failed to access table '{self.table_name}': {e}")
                raise TransportError(f"Failed to access table '{self.table_name}': {e}", original_error=e) from e
        return self._table

    def _translate(self, error: Exception, operation: str, resource_id: Optional[str] = None) -> Exception:
        if isinstance(error, ClientError):
            return map_dynamodb_error(error, operation, self.table_name, resource_id)
        return TransportError(
            f"{operation} on {self.table_name} failed: {error}",
            original_error=error,
            context={'operation': operation, 'table_name': self.table_name}
        )

    # -------------------------------------------------------------------------
    # Table lifecycle
    # -------------------------------------------------------------------------

    def describe(self) -> TableDescriptor:
        """
        Describe the table.

        Returns:
            TableDescriptor for the current table state

        Raises:
            NotFoundError: The table does not exist
            TransportError: The store could not be queried
        """
        try:
            response = self.client.describe_table(TableName=self.table_name)
        except (ClientError, BotoCoreError) as e:
            raise self._translate(e, "DescribeTable") from e
        return TableDescriptor.from_description(response['Table'])

    def exists(self) -> bool:
        """
        Check whether the table exists.

        Only a "does not exist" answer from the store returns False; any
        other failure raises, so callers never create a table because of
        a network or permission problem.

        Returns:
            True if the table is found, False if the store reports it missing

        Raises:
            TransportError: Existence could not be determined
        """
        try:
            descriptor = self.describe()
        except NotFoundError:
            logger.info(f"Table {self.table_name} does not exist.")
            self.state = TableState.ABSENT
            return False
        except TransportError as e:
            logger.error(f"Couldn't determine existence of table {self.table_name}: {e}")
            raise

        if descriptor.is_active:
            self.state = TableState.PRESENT
        else:
            logger.info(f"Table {self.table_name} exists with status {descriptor.table_status}")
            self.state = TableState.PROVISIONING
        return True

    def create(self) -> TableDescriptor:
        """
        Create the table and block until it is ACTIVE.

        Uses the record model's key schema and the provisioned throughput
        from configuration. Does not check for an existing table first;
        use exists() or ensure_table() for that.

        Returns:
            Descriptor of the ACTIVE table

        Raises:
            ProvisioningError: The store rejected the request
            TimeoutError: The table was not ACTIVE within the configured bound
        """
        self.state = TableState.PROVISIONING
        try:
            self.client.create_table(
                TableName=self.table_name,
                AttributeDefinitions=self.codec.attribute_definitions(),
                KeySchema=self.codec.key_schema(),
                ProvisionedThroughput={
                    'ReadCapacityUnits': self.config.read_capacity_units,
                    'WriteCapacityUnits': self.config.write_capacity_units,
                }
            )
        except ClientError as e:
            self.state = TableState.FAILED
            raise map_dynamodb_error(e, "CreateTable", self.table_name) from e
        except BotoCoreError as e:
            self.state = TableState.FAILED
            raise ProvisioningError(f"Failed to create table {self.table_name}: {e}", self.table_name, e) from e

        logger.info(f"Creating table {self.table_name}, waiting for it to become active")
        descriptor = self._wait_until_active()
        logger.info(f"Table {self.table_name} is active")
        return descriptor

    def _wait_until_active(self) -> TableDescriptor:
        timeout = self.config.provisioning_timeout_seconds
        delay = max(1, int(round(self.config.provisioning_poll_delay_seconds)))
        max_attempts = max(1, math.ceil(timeout / delay))

        waiter = self.client.get_waiter('table_exists')
        try:
            waiter.wait(
                TableName=self.table_name,
                WaiterConfig={'Delay': delay, 'MaxAttempts': max_attempts}
            )
        except WaiterError as e:
            self.state = TableState.FAILED
            if 'Max attempts exceeded' in str(e.kwargs.get('reason', '')):
                raise TimeoutError(
                    f"Table {self.table_name} was not active after {timeout} seconds",
                    self.table_name,
                    timeout,
                    original_error=e
                ) from e
            raise ProvisioningError(
                f"Waiting for table {self.table_name} failed: {e}",
                self.table_name,
                original_error=e
            ) from e

        try:
            descriptor = self.describe()
        except (NotFoundError, TransportError) as e:
            self.state = TableState.FAILED
            raise ProvisioningError(
                f"Table {self.table_name} vanished after creation: {e}",
                self.table_name,
                original_error=e
            ) from e

        self.state = TableState.PRESENT
        return descriptor

    def ensure_table(self) -> TableState:
        """
        Make sure the table exists, creating it if the store reports it missing.

        Once the table is confirmed present no further checks are made.

        Returns:
            TableState.PRESENT

        Raises:
            TransportError: Existence could not be determined
            ProvisioningError: Creation failed or timed out
        """
        if self.state == TableState.PRESENT:
            return self.state

        if self.exists():
            if self.state == TableState.PROVISIONING:
                self._wait_until_active()
            return self.state

        logger.info(f"Table {self.table_name} not found. Creating new one...")
        self.create()
        return self.state

    def list_tables(self) -> List[str]:
        """
        List the table names visible to the configured credentials.

        Raises:
            TransportError: The store could not be queried
        """
        names: List[str] = []
        try:
            paginator = self.client.get_paginator('list_tables')
            for page in paginator.paginate():
                names.extend(page.get('TableNames', []))
        except (ClientError, BotoCoreError) as e:
            raise self._translate(e, "ListTables") from e
        return names

    # -------------------------------------------------------------------------
    # Item operations
    # -------------------------------------------------------------------------

    def get(self, keyboard_id: str, name: str) -> Optional[Keyboard]:
        """
        Get a keyboard by its full composite key.

        DynamoDB Operation: GetItem

        Args:
            keyboard_id: Partition key value
            name: Sort key value

        Returns:
            The keyboard, or None if no item has this key

        Raises:
            EncodingError: The key cannot be encoded
            StoreReadError: The read failed
            DecodingError: The stored item does not fit the model
        """
        key = self.codec.key_from_values(**{
            self.codec.partition_key: keyboard_id,
            self.codec.sort_key: name,
        })
        try:
            response = self.table.get_item(Key=key)
        except (ClientError, BotoCoreError) as e:
            raise self._translate(e, "GetItem", f"{keyboard_id}/{name}") from e

        item = response.get('Item')
        if not item:
            return None
        return self.codec.decode_item(item)

    def query_by_id(self, keyboard_id: str, projection: Optional[List[str]] = None) -> List[Keyboard]:
        """
        Get every keyboard sharing a partition key value.

        DynamoDB Operation: Query on the table's partition key (single page)

        Raises:
            EncodingError: The id cannot be encoded
            QueryBuildError: The projection is invalid
            StoreReadError: The query failed
            DecodingError: A returned item does not fit the model
        """
        partition_key = self.codec.partition_key
        query_kwargs: Dict[str, Any] = {
            'KeyConditionExpression': build_key_condition(
                partition_key, self.codec.encode_value(partition_key, keyboard_id)
            )
        }
        query_kwargs.update(self._projection_kwargs(projection))

        try:
            response = self.table.query(**query_kwargs)
        except (ClientError, BotoCoreError) as e:
            raise self._translate(e, "Query", keyboard_id) from e

        self._warn_if_truncated("Query", response)
        return self.codec.decode_items(response.get('Items', []))

    def put(self, keyboard: Keyboard) -> None:
        """
        Insert or replace a keyboard.

        DynamoDB Operation: PutItem (no condition, so an identical key
        overwrites the existing item)

        Raises:
            EncodingError: The record cannot be encoded
            StoreWriteError: The write failed
        """
        item = self.codec.encode_full(keyboard)
        resource_id = f"{keyboard.id}/{keyboard.name}"
        try:
            self.table.put_item(Item=item)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Couldn't add item to table {self.table_name}: {e}")
            raise self._translate(e, "PutItem", resource_id) from e
        logger.info(f"Put item in {self.table_name}: {resource_id}")

    def scan(
        self,
        projection: Optional[List[str]] = None,
        filters: Optional[Dict[str, Any]] = None
    ) -> List[Keyboard]:
        """
        Return every keyboard in the table.

        DynamoDB Operation: Scan projected to the model's fields, with an
        optional equality filter. Only the first page is read; if the store
        reports more, a warning is logged.

        Args:
            projection: Fields to return (defaults to the model's projection)
            filters: Attribute name to value equality filters, empty by default

        Raises:
            QueryBuildError: The projection or filter cannot be built
            StoreReadError: The scan failed
            DecodingError: A returned item does not fit the model
        """
        scan_kwargs = self._projection_kwargs(projection)

        try:
            encoded_filters = {
                attr: self.codec.encode_value(attr, value)
                for attr, value in (filters or {}).items()
            }
        except EncodingError as e:
            raise QueryBuildError(f"Could not build filter expression for scan: {e}", original_error=e) from e

        filter_expression = build_filter_expression(encoded_filters)
        if filter_expression is not None:
            scan_kwargs['FilterExpression'] = filter_expression

        try:
            response = self.table.scan(**scan_kwargs)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Couldn't scan {self.table_name}: {e}")
            raise self._translate(e, "Scan") from e

        self._warn_if_truncated("Scan", response)
        return self.codec.decode_items(response.get('Items', []))

    def _projection_kwargs(self, projection: Optional[List[str]]) -> Dict[str, Any]:
        fields = self.codec.projection_fields() if projection is None else list(projection)
        if not fields:
            raise QueryBuildError("Projection must name at least one field")

        available = set(self.codec.metadata['available_fields'])
        unknown = [field for field in fields if field not in available]
        if unknown:
            raise QueryBuildError(
                f"Projection names unknown field(s) {unknown}",
                context={'available_fields': sorted(available)}
            )

        proj_expr, expr_names = build_projection_expression(fields)
        return {'ProjectionExpression': proj_expr, 'ExpressionAttributeNames': expr_names}

    def _warn_if_truncated(self, operation: str, response: Dict[str, Any]) -> None:
        if response.get('LastEvaluatedKey'):
            logger.warning(
                f"{operation} on {self.table_name} returned {len(response.get('Items', []))} items "
                f"but more pages exist; only the first page is returned"
            )


def create_table_gateway(config: DynamoDBConfig, base_name: Optional[str] = None) -> TableGateway:
    """
    Factory function to create a TableGateway instance.

    Args:
        config: DynamoDB configuration
        base_name: Base table name (defaults to config.keyboard_table_name)

    Returns:
        Configured TableGateway instance
    """
    full_table_name = config.get_table_name(base_name or config.keyboard_table_name)
    return TableGateway(config, full_table_name)
