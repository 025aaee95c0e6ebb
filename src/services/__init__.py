"""Business logic services used by handlers.

Services are imported lazily by handlers so that cold starts do not touch
DynamoDB until the first call needs it.
"""

# Do NOT import services here - use lazy loading in handlers instead
