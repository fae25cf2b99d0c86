#!/usr/bin/env python3
"""
Basic usage of the keyboard store against a local DynamoDB.

1. Setting up configuration
2. Provisioning the keyboard table if it is missing
3. Writing keyboards (an identical key overwrites)
4. Reading them back by composite key, by id, and with a scan
"""

from keyboard_store import (
    DynamoDBConfig,
    Keyboard,
    KeyboardStoreError,
    create_table_gateway,
)


def main():
    """Walk through the gateway operations."""

    # 1. Configure DynamoDB connection
    print("1. Setting up DynamoDB configuration...")
    config = DynamoDBConfig.for_local_development()

    # In a deployed environment, use environment variables instead:
    # config = DynamoDBConfig.from_env()

    gateway = create_table_gateway(config)
    print(f"   Table: {gateway.table_name}")

    # 2. Make sure the table exists
    print("2. Checking for the keyboard table...")
    if gateway.exists():
        print("   Table already exists")
    else:
        descriptor = gateway.create()
        print(f"   Created table with key schema {descriptor.key_schema}, status {descriptor.table_status}")

    # 3. Write keyboards
    print("3. Adding keyboards...")
    for keyboard in [
        Keyboard(id="1", name="Model M"),
        Keyboard(id="1", name="Model F"),
        Keyboard(id="2", name="HHKB Professional"),
        Keyboard(id="1", name="Model M"),  # same key, overwrites
    ]:
        gateway.put(keyboard)

    try:
        gateway.put(Keyboard(id="model-m", name="Model M"))
    except KeyboardStoreError as e:
        print(f"   Rejected: {e}")

    # 4. Read back
    print("4. Reading keyboards...")
    print(f"   By key:  {gateway.get('1', 'Model F')}")
    print(f"   By id:   {gateway.query_by_id('1')}")
    print(f"   Scan:    {gateway.scan()}")

    print("\n✅ Keyboard store example completed!")


if __name__ == "__main__":
    main()
