"""
Handler for POST /rpc/{operation}.

The body carries positional arguments as ``{"args": [...]}``. Every call that
names a known operation answers 200 with the result envelope
(``{"Ok": ...}`` or ``{"Err": {"<Kind>": "<message>"}}``); domain errors are
not mapped to HTTP status codes.
"""

from __future__ import annotations

import base64
import binascii
import json
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from models.response import Result
from utils.error_handling import AppError, InternalError, InvalidPayloadError
from utils.logging_config import get_logger

logger = get_logger(__name__)

QUERY = "query"
UPDATE = "update"

# Argument kinds: identifiers and filter strings must arrive as JSON strings,
# payloads and records are handed to the service as-is for model parsing.
TEXT = "text"
RECORD = "record"


@dataclass(frozen=True)
class Operation:
    """One remotely callable service method."""

    name: str
    kind: str
    method: str
    params: Tuple[Tuple[str, str], ...] = ()


OPERATIONS: Dict[str, Operation] = {
    op.name: op
    for op in (
        Operation("listCustomers", QUERY, "list_customers"),
        Operation("getCustomer", QUERY, "get_customer", (("id", TEXT),)),
        Operation("addCustomer", UPDATE, "add_customer", (("payload", RECORD),)),
        Operation("updateCustomer", UPDATE, "update_customer", (("customer", RECORD),)),
        Operation("deleteCustomer", UPDATE, "delete_customer", (("id", TEXT),)),
        Operation(
            "addInteraction",
            UPDATE,
            "add_interaction",
            (("customerId", TEXT), ("payload", RECORD)),
        ),
        Operation(
            "listCustomerInteractions",
            QUERY,
            "list_customer_interactions",
            (("customerId", TEXT),),
        ),
        Operation(
            "addPurchase",
            UPDATE,
            "add_purchase",
            (("customerId", TEXT), ("payload", RECORD)),
        ),
        Operation(
            "listCustomerPurchases",
            QUERY,
            "list_customer_purchases",
            (("customerId", TEXT),),
        ),
        Operation("getPurchase", QUERY, "get_purchase", (("id", TEXT),)),
        Operation("getInteraction", QUERY, "get_interaction", (("id", TEXT),)),
        Operation("updateInteraction", UPDATE, "update_interaction", (("interaction", RECORD),)),
        Operation("deleteInteraction", UPDATE, "delete_interaction", (("id", TEXT),)),
        Operation("updatePurchase", UPDATE, "update_purchase", (("purchase", RECORD),)),
        Operation("deletePurchase", UPDATE, "delete_purchase", (("id", TEXT),)),
        Operation("filterByStatus", QUERY, "filter_by_status", (("status", TEXT),)),
        Operation("getPurchasesByDate", QUERY, "get_purchases_by_date", (("date", TEXT),)),
    )
}

# Lazy-loaded service to avoid import-time AWS clients
_crm_service: Optional["CrmService"] = None


def _get_crm_service():
    """Lazy-load CrmService."""
    global _crm_service
    if _crm_service is None:
        from services.crm_service import CrmService
        _crm_service = CrmService()
    return _crm_service


def _response(status: int, body: Dict, correlation_id: str) -> Dict:
    return {
        "statusCode": status,
        "headers": {
            "Content-Type": "application/json",
            "X-Correlation-Id": correlation_id,
        },
        "body": json.dumps(body),
    }


def _operation_name(event: Dict) -> str:
    path_params = event.get("pathParameters") or {}
    if path_params.get("operation"):
        return path_params["operation"]
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    return path.rstrip("/").rsplit("/", 1)[-1]


def _parse_args(event: Dict) -> List[Any]:
    """Pull the positional argument list out of the request body."""
    raw = event.get("body") or ""
    if event.get("isBase64Encoded") and raw:
        try:
            raw = base64.b64decode(raw, validate=True).decode()
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise InvalidPayloadError("Request body is not valid base64 UTF-8") from exc
    if not raw.strip():
        return []
    try:
        body = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidPayloadError(f"Request body is not valid JSON: {exc.msg}") from exc
    if not isinstance(body, dict):
        raise InvalidPayloadError("Request body must be a JSON object")
    args = body.get("args", [])
    if not isinstance(args, list):
        raise InvalidPayloadError("args must be a JSON array")
    return args


def invoke(service: Any, operation: Operation, args: List[Any]) -> Result:
    """Check arity and text arguments, then call the bound service method."""
    if len(args) != len(operation.params):
        names = ", ".join(name for name, _ in operation.params) or "no arguments"
        raise InvalidPayloadError(
            f"{operation.name} expects {len(operation.params)} argument(s) ({names}), "
            f"got {len(args)}"
        )
    for (name, kind), value in zip(operation.params, args):
        if kind == TEXT and not isinstance(value, str):
            raise InvalidPayloadError(f"{name} must be a string")
    return getattr(service, operation.method)(*args)


def lambda_handler(event, context):
    """Dispatch one RPC call and render its result envelope."""
    correlation_id = str(uuid.uuid4())
    name = _operation_name(event)
    operation = OPERATIONS.get(name)
    if operation is None:
        logger.warning(
            "Unknown operation",
            extra={"operation": name, "correlation_id": correlation_id},
        )
        return _response(
            404, {"message": "Unknown operation", "operation": name}, correlation_id
        )

    try:
        result = invoke(_get_crm_service(), operation, _parse_args(event))
    except AppError as exc:
        result = Result.failure(exc)
    except Exception:
        logger.exception(
            "Operation failed",
            extra={"operation": name, "correlation_id": correlation_id},
        )
        result = Result.failure(
            InternalError(f"Unexpected failure (correlation_id={correlation_id})")
        )

    logger.info(
        "Operation served",
        extra={
            "operation": name,
            "kind": operation.kind,
            "outcome": "ok" if result.is_ok else result.error_kind,
            "correlation_id": correlation_id,
        },
    )
    return _response(200, result.to_dict(), correlation_id)
