"""Runtime settings read from the Lambda environment."""

from dataclasses import dataclass
import os

STORAGE_BACKENDS = ("memory", "dynamodb")


@dataclass
class Settings:
    """Settings for the record store runtime."""

    environment: str = "dev"

    # "memory" for local runs, "dynamodb" once the tables exist
    storage_backend: str = "memory"

    customers_table: str = "crm-customers"
    interactions_table: str = "crm-interactions"
    purchases_table: str = "crm-purchases"

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown storage backend {self.storage_backend!r}; "
                f"expected one of {', '.join(STORAGE_BACKENDS)}"
            )

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        return cls(
            environment=env,
            storage_backend=os.environ.get("STORAGE_BACKEND", "memory").lower(),
            customers_table=os.environ.get("CUSTOMERS_TABLE", f"crm-customers-{env}"),
            interactions_table=os.environ.get(
                "INTERACTIONS_TABLE", f"crm-interactions-{env}"
            ),
            purchases_table=os.environ.get("PURCHASES_TABLE", f"crm-purchases-{env}"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )
