"""Interaction models."""

from pydantic import BaseModel


class InteractionPayload(BaseModel):
    """Fields supplied when logging an interaction."""

    date: str
    interaction_type: str
    description: str
    status: str
    comments: str


class Interaction(InteractionPayload):
    """Stored interaction record."""

    id: str
