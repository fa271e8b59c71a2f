"""
Company service for the merchant identity printed on invoices.

The companies table holds at most one row (enforced by a unique, always-true
`singleton` column). Registration is the initialization step that creates
it; afterwards it can only be read and updated.
"""

import logging
from uuid import UUID, uuid4

import psycopg2.errors

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction, compute_changes
from core.exceptions import ConflictError, InvalidRequestError, NotFoundError
from core.models import Company, CompanyCreate, CompanyUpdate
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

_UPDATABLE_COLUMNS = {
    "fssai_number", "gst_number", "phone_number", "alternate_number",
    "owner_name", "email", "logo"
}


class CompanyService:
    """Service for the singleton company record."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def exists(self) -> bool:
        """Whether the company has been registered."""
        return bool(self.postgres.execute_scalar("SELECT EXISTS (SELECT 1 FROM companies)"))

    def get(self) -> Company | None:
        """The company, or None before registration."""
        row = self.postgres.execute_single("SELECT * FROM companies LIMIT 1")

        if row is None:
            return None

        return Company.model_validate(row)

    def initialize(self, data: CompanyCreate, password_hash: str) -> Company:
        """
        Create the company record.

        Args:
            data: Registration data (its plain password is ignored here)
            password_hash: bcrypt hash of the password

        Returns:
            Created company

        Raises:
            ConflictError: If a company already exists, or email/FSSAI/GST is taken
        """
        if self.exists():
            raise ConflictError("Only one company can be registered")

        company_id = uuid4()
        now = now_utc()

        try:
            row = self.postgres.execute_returning(
                """
                INSERT INTO companies (
                    id, singleton, fssai_number, gst_number, phone_number, alternate_number,
                    owner_name, email, logo, password_hash, created_at, updated_at
                ) VALUES (
                    %s, true, %s, %s, %s, %s,
                    %s, lower(%s), %s, %s, %s, %s
                )
                RETURNING *
                """,
                (
                    company_id, data.fssai_number, data.gst_number, data.phone_number,
                    data.alternate_number, data.owner_name, data.email, data.logo,
                    password_hash, now, now
                )
            )[0]
        except psycopg2.errors.UniqueViolation:
            raise ConflictError("Only one company can be registered")

        company = Company.model_validate(row)

        self.audit.log_change(
            entity_type="company",
            entity_id=company.id,
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json", exclude={"password"}, exclude_none=True)},
            company_id=company.id
        )

        logger.info(f"Company {company.id} registered")
        return company

    def get_credentials(self, email: str) -> tuple[Company, str] | None:
        """
        Company and password hash for a login email (case-insensitive).

        Returns:
            (company, password_hash), or None if no company has this email
        """
        row = self.postgres.execute_single(
            "SELECT * FROM companies WHERE email = lower(%s)",
            (email,)
        )

        if row is None:
            return None

        return Company.model_validate(row), row["password_hash"]

    def update(self, company_id: UUID, data: CompanyUpdate) -> Company:
        """
        Update company identity fields.

        Raises:
            InvalidRequestError: If no fields were given
            NotFoundError: If the id is not the registered company
        """
        updates = {
            k: v for k, v in data.model_dump(exclude_none=True).items()
            if k in _UPDATABLE_COLUMNS
        }
        if not updates:
            raise InvalidRequestError("No data provided for update")

        row = self.postgres.execute_single(
            "SELECT * FROM companies WHERE id = %s",
            (company_id,)
        )
        if row is None:
            raise NotFoundError("Company", company_id)
        current = Company.model_validate(row)

        if "email" in updates:
            updates["email"] = updates["email"].lower()

        set_parts = []
        params = []
        for field, value in updates.items():
            set_parts.append(f"{field} = %s")
            params.append(value)

        set_parts.append("updated_at = %s")
        params.append(now_utc())
        params.append(company_id)

        try:
            rows = self.postgres.execute_returning(
                f"""
                UPDATE companies
                SET {', '.join(set_parts)}
                WHERE id = %s
                RETURNING *
                """,
                tuple(params)
            )
        except psycopg2.errors.UniqueViolation:
            raise ConflictError("Email, FSSAI or GST number already in use")
        if not rows:
            raise NotFoundError("Company", company_id)
        row = rows[0]

        updated = Company.model_validate(row)

        changes = compute_changes(
            current.model_dump(mode="json"),
            updated.model_dump(mode="json")
        )
        if changes:
            self.audit.log_change(
                entity_type="company",
                entity_id=company_id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        return updated
