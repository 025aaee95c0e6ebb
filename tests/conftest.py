"""
Pytest configuration to ensure paths are set up correctly for tests.

This allows imports like `from handlers import health_check` to work
when running tests, simulating the Lambda environment where code
is deployed from the src/ directory.
"""

import os
import sys
from pathlib import Path

import boto3
import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add repository root AND src/ to sys.path if missing.

    The src/ directory is added to simulate Lambda's import behavior,
    where Code.from_asset("src") makes src/ the root of the package.
    """
    repo_root = Path(__file__).resolve().parents[1]
    src_root = repo_root / "src"

    # Add repo root first (for imports like infrastructure.*)
    root_str = str(repo_root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)

    # Add src/ for Lambda-style imports (from handlers import ...)
    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Ensure boto3 has offline-friendly defaults so tests do not require AWS access.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("AWS_SESSION_TOKEN", "test")
os.environ.setdefault("ENVIRONMENT", "dev")

# Lambda environment variables used by handlers
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("CUSTOMERS_TABLE", "test-customers-table")
os.environ.setdefault("INTERACTIONS_TABLE", "test-interactions-table")
os.environ.setdefault("PURCHASES_TABLE", "test-purchases-table")

# Create a default boto3 session so resources/clients do not error during import.
boto3.setup_default_session(region_name="eu-west-2")


@pytest.fixture
def service():
    """CrmService over fresh in-memory stores."""
    from repositories.entity_store import in_memory_stores
    from services.crm_service import CrmService

    return CrmService(stores=in_memory_stores())


@pytest.fixture
def customer_payload():
    return {
        "name": "Acme",
        "company": "Acme Co",
        "email": "a@acme.com",
        "phone": "555-0100",
    }


@pytest.fixture
def interaction_payload():
    return {
        "date": "2024-03-01",
        "interaction_type": "call",
        "description": "Renewal discussion",
        "status": "Open",
        "comments": "Follow up next week",
    }


@pytest.fixture
def purchase_payload():
    return {
        "date": "2024-03-02",
        "product": "Widget",
        "quantity": 3,
        "price": 1200,
    }
