"""Lightweight health check handler."""

import json
from datetime import datetime, timezone

from utils.settings import Settings


def lambda_handler(event, context):
    """Report liveness plus the storage backend this instance is wired to."""
    settings = Settings.from_environment()
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(
            {
                "status": "ok",
                "service": "crm-store",
                "environment": settings.environment,
                "storage_backend": settings.storage_backend,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        ),
    }
