"""
Environment-specific deployment settings.

Cost-optimized defaults for development/testing.
"""

from dataclasses import dataclass
import os


@dataclass
class Settings:
    """Deployment settings with cost-optimized defaults."""

    # Environment
    environment: str = "dev"
    aws_region: str = "eu-west-2"  # Default AWS region

    # Table naming: <prefix>-<entity>-<environment>
    table_prefix: str = "crm"

    # Lambda Configuration
    lambda_memory_mb: int = 256
    lambda_timeout_seconds: int = 10
    log_level: str = "INFO"

    # Data protection (prod only)
    point_in_time_recovery: bool = False
    retain_tables: bool = False

    def table_name(self, entity: str) -> str:
        """Physical table name for an entity kind."""
        return f"{self.table_prefix}-{entity}-{self.environment}"

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        region = os.environ.get("AWS_REGION", cls.aws_region)
        log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

        # Production overrides
        if env == "prod":
            return cls(
                environment="prod",
                aws_region=region,
                lambda_memory_mb=512,
                lambda_timeout_seconds=15,
                log_level=log_level,
                point_in_time_recovery=True,
                retain_tables=True,
            )

        return cls(environment=env, aws_region=region, log_level=log_level)
