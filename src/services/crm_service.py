"""
CRM record service.

Implements every customer, interaction and purchase operation on top of the
three standalone stores. Public methods return a ``Result`` instead of
raising for NotFound/InvalidPayload; anything else propagates to the caller.

Adding an interaction or purchase writes the customer store and then the
standalone store as two separate calls. A failure between them leaves the
stores out of step; there is no journal to replay.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from models.customer import Customer, CustomerPayload
from models.interaction import Interaction, InteractionPayload
from models.purchase import Purchase, PurchasePayload
from models.response import Result
from repositories.entity_store import EntityStore, Stores, build_stores
from utils.error_handling import AppError, InvalidPayloadError, not_found
from utils.identifiers import generate_id
from utils.logging_config import get_logger
from utils.settings import Settings
from utils.validators import ensure_valid_id, ensure_valid_payload, is_valid_id

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


def returns_result(func: Callable[..., Any]) -> Callable[..., Result]:
    """Wrap a method so AppErrors become ``Result.failure``."""

    @wraps(func)
    def wrapper(*args, **kwargs) -> Result:
        try:
            return Result.success(func(*args, **kwargs))
        except AppError as exc:
            logger.info(
                "Operation rejected",
                extra={"operation": func.__name__, "kind": exc.kind, "error": exc.message},
            )
            return Result.failure(exc)

    return wrapper


def _coerce(model: Type[M], payload: Any) -> M:
    """Parse a mapping into ``model``; models of the right type pass through."""
    if type(payload) is model:
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise InvalidPayloadError(
            f"Invalid {model.__name__}: {exc.error_count()} validation error(s)"
        ) from exc


class CrmService:
    """Customer, interaction and purchase operations."""

    def __init__(
        self,
        stores: Optional[Stores] = None,
        id_factory: Callable[[], str] = generate_id,
    ):
        self.stores = stores if stores is not None else build_stores(Settings.from_environment())
        self.id_factory = id_factory

    @property
    def customers(self) -> EntityStore[Customer]:
        return self.stores.customers

    @property
    def interactions(self) -> EntityStore[Interaction]:
        return self.stores.interactions

    @property
    def purchases(self) -> EntityStore[Purchase]:
        return self.stores.purchases

    # Customers

    @returns_result
    def list_customers(self) -> List[Customer]:
        return self.customers.values()

    @returns_result
    def get_customer(self, customer_id: str) -> Customer:
        ensure_valid_id(customer_id)
        customer = self.customers.get(customer_id)
        if customer is None:
            raise not_found("Customer", customer_id)
        return customer

    @returns_result
    def add_customer(self, payload: Any) -> Customer:
        """Create a customer with a fresh id and empty histories."""
        ensure_valid_payload(payload)
        fields = _coerce(CustomerPayload, payload)
        customer = Customer(
            id=self.id_factory(),
            **fields.model_dump(),
            interactions=[],
            purchases=[],
        )
        self.customers.insert(customer.id, customer)
        logger.info("Customer added", extra={"customer_id": customer.id})
        return customer

    @returns_result
    def update_customer(self, record: Any) -> Customer:
        """Replace a stored customer verbatim, embedded lists included."""
        customer = _coerce(Customer, record)
        if not self.customers.contains_key(customer.id):
            raise not_found("Customer", customer.id)
        self.customers.insert(customer.id, customer)
        logger.info("Customer updated", extra={"customer_id": customer.id})
        return customer

    @returns_result
    def delete_customer(self, customer_id: str) -> str:
        """Remove a customer. Its interactions and purchases stay in their stores."""
        ensure_valid_id(customer_id)
        removed = self.customers.remove(customer_id)
        if removed is None:
            raise not_found("Customer", customer_id)
        logger.info("Customer deleted", extra={"customer_id": removed.id})
        return removed.id

    def _find_customer(self, customer_id: str) -> Optional[Customer]:
        if not is_valid_id(customer_id):
            return None
        return self.customers.get(customer_id)

    def _require_customer(self, customer_id: str) -> Customer:
        customer = self.customers.get(customer_id)
        if customer is None:
            raise not_found("Customer", customer_id)
        return customer

    # Interactions

    @returns_result
    def add_interaction(self, customer_id: str, payload: Any) -> str:
        """
        Record an interaction for a customer and return its id.

        The customer keeps a snapshot of the new interaction; later edits to
        the standalone record do not reach it.
        """
        ensure_valid_id(customer_id, "Invalid customer UUID")
        ensure_valid_payload(payload)
        fields = _coerce(InteractionPayload, payload)
        interaction = Interaction(id=self.id_factory(), **fields.model_dump())

        customer = self._require_customer(customer_id)
        customer.interactions.append(interaction)
        self.customers.insert(customer.id, customer)
        self.interactions.insert(interaction.id, interaction)
        logger.info(
            "Interaction added",
            extra={"customer_id": customer.id, "interaction_id": interaction.id},
        )
        return interaction.id

    @returns_result
    def list_customer_interactions(self, customer_id: str) -> List[Interaction]:
        """Embedded interactions; a bad or unknown id gives an empty list."""
        customer = self._find_customer(customer_id)
        return customer.interactions if customer else []

    @returns_result
    def get_interaction(self, interaction_id: str) -> Interaction:
        ensure_valid_id(interaction_id)
        interaction = self.interactions.get(interaction_id)
        if interaction is None:
            raise not_found("Interaction", interaction_id)
        return interaction

    @returns_result
    def update_interaction(self, record: Any) -> Interaction:
        interaction = _coerce(Interaction, record)
        if not self.interactions.contains_key(interaction.id):
            raise not_found("Interaction", interaction.id)
        self.interactions.insert(interaction.id, interaction)
        logger.info("Interaction updated", extra={"interaction_id": interaction.id})
        return interaction

    @returns_result
    def delete_interaction(self, interaction_id: str) -> str:
        ensure_valid_id(interaction_id)
        removed = self.interactions.remove(interaction_id)
        if removed is None:
            raise not_found("Interaction", interaction_id)
        logger.info("Interaction deleted", extra={"interaction_id": removed.id})
        return removed.id

    @returns_result
    def filter_by_status(self, status: str) -> List[Interaction]:
        """Standalone interactions whose status matches, ignoring case."""
        wanted = status.lower()
        return [i for i in self.interactions.values() if i.status.lower() == wanted]

    # Purchases

    @returns_result
    def add_purchase(self, customer_id: str, payload: Any) -> str:
        """Record a purchase for a customer and return its id."""
        ensure_valid_id(customer_id, "Invalid customer UUID")
        ensure_valid_payload(payload)
        fields = _coerce(PurchasePayload, payload)
        purchase = Purchase(id=self.id_factory(), **fields.model_dump())

        customer = self._require_customer(customer_id)
        customer.purchases.append(purchase)
        self.customers.insert(customer.id, customer)
        self.purchases.insert(purchase.id, purchase)
        logger.info(
            "Purchase added",
            extra={"customer_id": customer.id, "purchase_id": purchase.id},
        )
        return purchase.id

    @returns_result
    def list_customer_purchases(self, customer_id: str) -> List[Purchase]:
        customer = self._find_customer(customer_id)
        return customer.purchases if customer else []

    @returns_result
    def get_purchase(self, purchase_id: str) -> Purchase:
        ensure_valid_id(purchase_id)
        purchase = self.purchases.get(purchase_id)
        if purchase is None:
            raise not_found("Purchase", purchase_id)
        return purchase

    @returns_result
    def update_purchase(self, record: Any) -> Purchase:
        purchase = _coerce(Purchase, record)
        if not self.purchases.contains_key(purchase.id):
            raise not_found("Purchase", purchase.id)
        self.purchases.insert(purchase.id, purchase)
        logger.info("Purchase updated", extra={"purchase_id": purchase.id})
        return purchase

    @returns_result
    def delete_purchase(self, purchase_id: str) -> str:
        ensure_valid_id(purchase_id)
        removed = self.purchases.remove(purchase_id)
        if removed is None:
            raise not_found("Purchase", purchase_id)
        logger.info("Purchase deleted", extra={"purchase_id": removed.id})
        return removed.id

    @returns_result
    def get_purchases_by_date(self, date: str) -> List[Purchase]:
        """Purchases whose date string equals ``date``, ignoring case."""
        wanted = date.lower()
        return [p for p in self.purchases.values() if p.date.lower() == wanted]
