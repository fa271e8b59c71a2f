"""Carry the authenticated company's id through the call stack via contextvars."""

from contextlib import contextmanager
from contextvars import ContextVar
from uuid import UUID

_current_company_id: ContextVar[UUID | None] = ContextVar("current_company_id", default=None)


def get_current_company_id() -> UUID:
    """
    Company id of the authenticated request.

    Raises RuntimeError when called outside an authenticated request.
    """
    company_id = _current_company_id.get()
    if company_id is None:
        raise RuntimeError("No company context set; the request was not authenticated.")
    return company_id


def current_company_id_or_none() -> UUID | None:
    """Company id if one is set, else None (registration, background jobs)."""
    return _current_company_id.get()


def set_current_company_id(company_id: UUID) -> None:
    """Set by the auth middleware once the bearer token checks out."""
    _current_company_id.set(company_id)


def clear_current_company_id() -> None:
    """Reset the context. Call from a finally block."""
    _current_company_id.set(None)


@contextmanager
def company_context(company_id: UUID):
    """
    Temporarily act as a company.

    Example:
        with company_context(company.id):
            party_service.create(PartyCreate(name="Ravi", phone="9999900000", place="Kochi"))
    """
    previous = _current_company_id.get()
    set_current_company_id(company_id)
    try:
        yield
    finally:
        if previous is None:
            clear_current_company_id()
        else:
            set_current_company_id(previous)
