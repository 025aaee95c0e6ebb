"""Pydantic models for stored records and operation payloads."""

from models.customer import Customer, CustomerPayload  # noqa: F401
from models.interaction import Interaction, InteractionPayload  # noqa: F401
from models.purchase import Purchase, PurchasePayload  # noqa: F401
from models.response import Result  # noqa: F401
