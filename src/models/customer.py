"""Customer models."""

from typing import List

from pydantic import BaseModel, Field

from models.interaction import Interaction
from models.purchase import Purchase


class CustomerPayload(BaseModel):
    """Fields supplied when creating a customer."""

    name: str
    company: str
    email: str
    phone: str


class Customer(CustomerPayload):
    """
    Stored customer record.

    ``interactions`` and ``purchases`` are snapshots taken when each entry was
    added; they are not refreshed when the standalone record changes.
    """

    id: str
    interactions: List[Interaction] = Field(default_factory=list)
    purchases: List[Purchase] = Field(default_factory=list)
