"""
Party service for the customer registry.

Parties are referenced by invoices only by id. Invoices copy the party's
name and phone when they are created, so edits and deletions here never
change historical invoices.
"""

import logging
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction, compute_changes
from core.exceptions import NotFoundError
from core.models import Party, PartyCreate
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class PartyService:
    """Service for party operations."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def create(self, data: PartyCreate) -> Party:
        """
        Create a new party.

        Args:
            data: Party creation data

        Returns:
            Created party
        """
        party_id = uuid4()
        now = now_utc()

        row = self.postgres.execute_returning(
            """
            INSERT INTO parties (id, name, phone, place, created_at, updated_at)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING *
            """,
            (party_id, data.name, data.phone, data.place, now, now)
        )[0]

        party = Party.model_validate(row)

        self.audit.log_change(
            entity_type="party",
            entity_id=party.id,
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json")}
        )

        logger.info(f"Created party {party.id}")
        return party

    def get_by_id(self, party_id: UUID) -> Party | None:
        """
        Get party by ID.

        Returns:
            Party if found, None otherwise.
        """
        row = self.postgres.execute_single(
            "SELECT * FROM parties WHERE id = %s",
            (party_id,)
        )

        if row is None:
            return None

        return Party.model_validate(row)

    def require(self, party_id: UUID) -> Party:
        """
        Get party by ID or fail.

        Raises:
            NotFoundError: If party does not exist
        """
        party = self.get_by_id(party_id)
        if party is None:
            raise NotFoundError("Party", party_id)
        return party

    def list_all(self) -> list[Party]:
        """All parties ordered by name."""
        rows = self.postgres.execute(
            "SELECT * FROM parties ORDER BY name ASC, created_at ASC"
        )

        return [Party.model_validate(row) for row in rows]

    def replace(self, party_id: UUID, data: PartyCreate) -> Party:
        """
        Replace every editable field of a party.

        Raises:
            NotFoundError: If party does not exist
        """
        current = self.require(party_id)

        rows = self.postgres.execute_returning(
            """
            UPDATE parties
            SET name = %s, phone = %s, place = %s, updated_at = %s
            WHERE id = %s
            RETURNING *
            """,
            (data.name, data.phone, data.place, now_utc(), party_id)
        )
        if not rows:
            raise NotFoundError("Party", party_id)
        row = rows[0]

        updated = Party.model_validate(row)

        changes = compute_changes(
            current.model_dump(mode="json"),
            updated.model_dump(mode="json")
        )
        if changes:
            self.audit.log_change(
                entity_type="party",
                entity_id=party_id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        return updated

    def delete(self, party_id: UUID) -> bool:
        """
        Delete a party. Existing invoices keep their copied name and phone.

        Returns:
            True if deleted, False if not found
        """
        current = self.get_by_id(party_id)
        if current is None:
            return False

        deleted = self.postgres.execute_returning(
            "DELETE FROM parties WHERE id = %s RETURNING id",
            (party_id,)
        )
        if not deleted:
            return False

        self.audit.log_change(
            entity_type="party",
            entity_id=party_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json")}
        )

        return True
