"""Typed failures raised by the billing services.

Each one is scoped to a single request; the API layer maps them to HTTP
status codes in api/errors.py.
"""


class BillingError(Exception):
    """Base class for domain errors."""


class NotFoundError(BillingError):
    """A referenced party, product, invoice or company does not exist."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class InvalidRequestError(BillingError):
    """Request is well-formed JSON but cannot be acted on (missing selection, empty update)."""


class ConflictError(BillingError):
    """
    A uniqueness rule would be violated.

    Duplicate SKU, duplicate invoice number or a second company registration.
    """
