"""
Process entry point.

Startup sequence: load configuration, configure logging, make sure the
keyboard table exists (creating it if needed), log the current catalog,
then serve the HTTP API with uvicorn. Failing to load configuration or
to provision the table ends the process; nothing after startup does.
"""

import logging
import sys
from typing import Optional

import uvicorn
from pydantic import ValidationError as PydanticValidationError

from .api import create_app
from .config import DynamoDBConfig
from .core import TableGateway, create_table_gateway
from .exceptions import KeyboardStoreError

logger = logging.getLogger(__name__)


def configure_logging(config: DynamoDBConfig) -> None:
    level = logging.DEBUG if config.enable_debug_logging else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    if not config.enable_debug_logging:
        # botocore logs every request at DEBUG
        logging.getLogger("botocore").setLevel(logging.WARNING)


def bootstrap(config: DynamoDBConfig) -> TableGateway:
    """Build the gateway and make sure its table is ready.

    Raises:
        KeyboardStoreError: The table could not be checked or provisioned
    """
    gateway = create_table_gateway(config)
    gateway.ensure_table()

    try:
        keyboards = gateway.scan()
    except KeyboardStoreError as e:
        logger.warning(f"Couldn't load initial catalog from {gateway.table_name}: {e}")
    else:
        logger.info(f"Table {gateway.table_name} holds {len(keyboards)} keyboard(s): "
                    f"{[keyboard.model_dump() for keyboard in keyboards]}")
    return gateway


def main(config: Optional[DynamoDBConfig] = None) -> None:
    if config is None:
        try:
            config = DynamoDBConfig.from_env()
        except PydanticValidationError as e:
            print(f"Invalid configuration: {e}", file=sys.stderr)
            raise SystemExit(1) from e

    configure_logging(config)

    try:
        gateway = bootstrap(config)
    except KeyboardStoreError as e:
        logger.critical(f"Startup failed: {e}")
        raise SystemExit(1) from e

    app = create_app(gateway)
    uvicorn.run(app, host=config.api_host, port=config.api_port)


if __name__ == "__main__":
    main()
