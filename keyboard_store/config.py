import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models.domain_models import Keyboard

# Load environment variables from .env file if it exists
load_dotenv()


class DynamoDBConfig(BaseModel):
    """Configuration for DynamoDB connection, table provisioning and the HTTP API."""

    aws_access_key_id: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID"),
        description="AWS access key ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY"),
        description="AWS secret access key"
    )

    region_name: str = Field(
        default_factory=lambda: os.getenv("AWS_REGION", "us-east-1"),
        description="AWS region name"
    )

    # DynamoDB specific settings
    endpoint_url: Optional[str] = Field(
        default_factory=lambda: os.getenv("DYNAMODB_ENDPOINT_URL"),
        description="DynamoDB endpoint URL (for local development)"
    )

    # Table configuration
    table_prefix: str = Field(
        default_factory=lambda: os.getenv("DYNAMODB_TABLE_PREFIX", ""),
        description="Prefix to add to all table names"
    )

    keyboard_table_name: str = Field(
        default_factory=lambda: os.getenv("KEYBOARD_TABLE_NAME", Keyboard.Meta.table_name),
        description="Base name of the keyboard catalog table"
    )

    # Provisioning settings
    read_capacity_units: int = Field(
        default=5,
        description="Provisioned read capacity units for newly created tables"
    )

    write_capacity_units: int = Field(
        default=5,
        description="Provisioned write capacity units for newly created tables"
    )

    provisioning_timeout_seconds: float = Field(
        default=300.0,
        description="Upper bound on waiting for a new table to become ACTIVE"
    )

    provisioning_poll_delay_seconds: float = Field(
        default=20.0,
        description="Delay between table status polls while provisioning"
    )

    # Connection settings
    max_pool_connections: int = Field(
        default=50,
        description="Maximum number of connections in the connection pool"
    )

    retries: int = Field(
        default=3,
        description="Number of retry attempts for failed requests"
    )

    timeout_seconds: float = Field(
        default=30.0,
        description="Request timeout in seconds"
    )

    # Environment settings
    environment: str = Field(
        default_factory=lambda: os.getenv("ENVIRONMENT", "prod"),
        description="Current environment (dev, staging, prod)"
    )

    # Logging settings
    enable_debug_logging: bool = Field(
        default_factory=lambda: os.getenv("DYNAMODB_DEBUG_LOGGING", "false").lower() == "true",
        description="Enable debug logging for DynamoDB operations"
    )

    # HTTP API settings
    api_host: str = Field(
        default_factory=lambda: os.getenv("API_HOST", "localhost"),
        description="Interface the HTTP API binds to"
    )

    api_port: int = Field(
        default_factory=lambda: int(os.getenv("API_PORT", "8080")),
        description="Port the HTTP API listens on"
    )

    @field_validator('region_name')
    @classmethod
    def validate_region(cls, v):
        """Validate AWS region name."""
        if not v:
            raise ValueError("AWS region name is required")
        return v

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        valid_environments = ['dev', 'staging', 'prod']
        if v not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v

    @field_validator('read_capacity_units', 'write_capacity_units')
    @classmethod
    def validate_capacity(cls, v):
        """Provisioned capacity must be at least one unit."""
        if v < 1:
            raise ValueError("Capacity units must be at least 1")
        return v

    @field_validator('provisioning_timeout_seconds', 'provisioning_poll_delay_seconds')
    @classmethod
    def validate_positive_seconds(cls, v):
        if v <= 0:
            raise ValueError("Provisioning durations must be positive")
        return v

    def get_table_name(self, base_name: str) -> str:
        """Get the full table name with prefix and environment.

        Args:
            base_name: Base table name

        Returns:
            Full table name with prefix and environment
        """
        parts = []

        if self.table_prefix:
            parts.append(self.table_prefix)

        if self.environment != "prod":
            parts.append(self.environment)

        parts.append(base_name)

        return "_".join(parts)

    @classmethod
    def from_env(cls) -> 'DynamoDBConfig':
        """Create configuration from environment variables.

        Returns:
            DynamoDBConfig instance
        """
        return cls()

    @classmethod
    def for_local_development(cls) -> 'DynamoDBConfig':
        """Create configuration for local DynamoDB development.

        Returns:
            DynamoDBConfig instance configured for local development
        """
        return cls(
            aws_access_key_id="local",
            aws_secret_access_key="local",
            region_name="us-east-1",
            endpoint_url="http://localhost:8000",
            environment="dev",
            enable_debug_logging=True,
            provisioning_poll_delay_seconds=1.0
        )

    model_config = ConfigDict(
        validate_assignment=True,
        use_enum_values=True
    )
