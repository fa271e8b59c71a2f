"""
Invoice service: builds priced invoices and serves the invoice registry.

Creating an invoice resolves the party and every product (creating inline
ones), prices the lines with core.pricing, draws the next number from the
invoice_sequence counter and inserts the invoice. All of it runs in one
transaction, so a missing product on the third line leaves no inline
party/product rows behind and burns no invoice number.

Stored invoices are immutable apart from payment_status.
"""

import logging
from typing import Any
from uuid import UUID, uuid4

import psycopg2.errors
from psycopg2.extras import Json

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction
from core.config import BillingConfig
from core.exceptions import ConflictError, InvalidRequestError, NotFoundError
from core.models import (
    Invoice, InvoiceCreate, LineItemRequest, Party, PaymentStatus, ProductCreate,
)
from core.pricing import PricedLine, format_invoice_number, price_line, total_invoice
from core.services.party_service import PartyService
from core.services.product_service import ProductService
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

# Invoices with the live party attached for display
_SELECT_WITH_PARTY = """
    SELECT i.*,
           CASE WHEN p.id IS NULL THEN NULL
                ELSE json_build_object('id', p.id, 'name', p.name, 'phone', p.phone, 'place', p.place)
           END AS party
    FROM invoices i
    LEFT JOIN parties p ON p.id = i.party_id
"""


class InvoiceService:
    """Service for invoice operations."""

    def __init__(
        self,
        postgres: PostgresClient,
        audit: AuditLogger,
        party_service: PartyService,
        product_service: ProductService,
        config: BillingConfig | None = None,
    ):
        self.postgres = postgres
        self.audit = audit
        self.party_service = party_service
        self.product_service = product_service
        self.config = config or BillingConfig()

    def _next_invoice_number(self) -> str:
        """
        Take the next number from the single-row counter.

        The upsert locks the counter row until the surrounding transaction
        ends, so concurrent creates get distinct numbers.
        """
        sequence = self.postgres.execute_scalar(
            """
            INSERT INTO invoice_sequence (id, last_value) VALUES (1, 1)
            ON CONFLICT (id) DO UPDATE SET last_value = invoice_sequence.last_value + 1
            RETURNING last_value
            """
        )
        return format_invoice_number(
            sequence,
            self.config.invoice_number_prefix,
            self.config.invoice_number_width,
        )

    def _resolve_party(self, data: InvoiceCreate) -> Party:
        if data.party_id is not None:
            return self.party_service.require(data.party_id)
        return self.party_service.create(data.party)

    def _price_item(self, item: LineItemRequest) -> PricedLine:
        if item.product_id is not None:
            product = self.product_service.require(item.product_id)
            discount = item.discount_percent
        else:
            product = self.product_service.create(ProductCreate(
                name=item.product.name,
                weight=item.product.weight,
                price=item.product.price,
            ))
            discount = item.discount_percent
            if discount is None:
                discount = item.product.discount

        try:
            return price_line(
                product_id=product.id,
                name=product.name,
                quantity=item.quantity,
                unit_price=product.price,
                discount_percent=discount,
            )
        except ValueError as e:
            raise InvalidRequestError(str(e))

    def create(self, data: InvoiceCreate) -> Invoice:
        """
        Build, price and store an invoice.

        Args:
            data: Party reference, line items, tax and payment status

        Returns:
            Stored invoice with party name/phone and product prices copied in

        Raises:
            NotFoundError: If the party or any product id is unknown (nothing is written)
            InvalidRequestError: If a tax rate is over 100 or an amount is too large to store
            ConflictError: If the invoice number is already taken
        """
        tax_mode = data.tax_mode or self.config.default_tax_mode

        with self.postgres.transaction():
            party = self._resolve_party(data)
            lines = [self._price_item(item) for item in data.items]
            try:
                totals = total_invoice(lines, data.tax, tax_mode)
            except ValueError as e:
                # Amounts that would not fit the invoice columns
                raise InvalidRequestError(str(e))
            items = [line.to_line_item().model_dump(mode="json") for line in lines]

            invoice_id = uuid4()
            invoice_number = self._next_invoice_number()
            now = now_utc()

            try:
                row = self.postgres.execute_returning(
                    """
                    INSERT INTO invoices (
                        id, invoice_number, party_id, party_name, party_phone,
                        items, subtotal, tax_mode, tax_rate, tax, discount, total,
                        payment_status, created_at, updated_at
                    ) VALUES (
                        %s, %s, %s, %s, %s,
                        %s, %s, %s, %s, %s, %s, %s,
                        %s, %s, %s
                    )
                    RETURNING *
                    """,
                    (
                        invoice_id, invoice_number, party.id, party.name, party.phone,
                        Json(items), totals.subtotal, totals.tax_mode.value, totals.tax_rate,
                        totals.tax, totals.discount, totals.total,
                        data.payment_status.value, now, now
                    )
                )[0]
            except psycopg2.errors.UniqueViolation:
                raise ConflictError(f"Invoice number {invoice_number} already exists")

            row["party"] = {"id": party.id, "name": party.name, "phone": party.phone, "place": party.place}
            invoice = Invoice.model_validate(row)

            self.audit.log_change(
                entity_type="invoice",
                entity_id=invoice.id,
                action=AuditAction.CREATE,
                changes={
                    "created": {
                        "invoice_number": invoice_number,
                        "party_id": str(party.id),
                        "subtotal": str(totals.subtotal),
                        "tax": str(totals.tax),
                        "total": str(totals.total),
                        "payment_status": data.payment_status.value,
                    }
                }
            )

        logger.info(f"Created invoice {invoice_number} for party {party.id} (total {totals.total})")
        return invoice

    def get_by_id(self, invoice_id: UUID) -> Invoice | None:
        """
        Get invoice by ID.

        Returns:
            Invoice if found, None otherwise.
        """
        row = self.postgres.execute_single(
            f"{_SELECT_WITH_PARTY} WHERE i.id = %s",
            (invoice_id,)
        )

        if row is None:
            return None

        return Invoice.model_validate(row)

    def list_all(self, limit: int | None = None) -> list[Invoice]:
        """
        List invoices.

        Args:
            limit: Maximum results (None for all)

        Returns:
            Invoices ordered by creation time DESC
        """
        rows = self.postgres.execute(
            f"{_SELECT_WITH_PARTY} ORDER BY i.created_at DESC LIMIT %s",
            (limit,)
        )

        return [Invoice.model_validate(row) for row in rows]

    def list_for_party(self, party_id: UUID) -> list[Invoice]:
        """
        List invoices billed to a party. The party itself may since have been deleted.

        Returns:
            Invoices ordered by creation time DESC
        """
        rows = self.postgres.execute(
            f"{_SELECT_WITH_PARTY} WHERE i.party_id = %s ORDER BY i.created_at DESC",
            (party_id,)
        )

        return [Invoice.model_validate(row) for row in rows]

    def update_payment_status(self, invoice_id: UUID, status: PaymentStatus) -> Invoice:
        """
        Set the payment status. Setting the current status again is a no-op.

        Raises:
            NotFoundError: If invoice does not exist
        """
        current = self.get_by_id(invoice_id)
        if current is None:
            raise NotFoundError("Invoice", invoice_id)

        if current.payment_status == status:
            return current

        rows = self.postgres.execute_returning(
            """
            UPDATE invoices
            SET payment_status = %s, updated_at = %s
            WHERE id = %s AND payment_status <> %s
            RETURNING *
            """,
            (status.value, now_utc(), invoice_id, status.value)
        )

        if not rows:
            # Deleted, or set to this status by another request, since the read
            latest = self.get_by_id(invoice_id)
            if latest is None:
                raise NotFoundError("Invoice", invoice_id)
            return latest

        row = rows[0]
        row["party"] = current.party.model_dump() if current.party else None
        updated = Invoice.model_validate(row)

        self.audit.log_change(
            entity_type="invoice",
            entity_id=invoice_id,
            action=AuditAction.UPDATE,
            changes={
                "payment_status": {"old": current.payment_status.value, "new": status.value}
            }
        )

        return updated

    def get_history(self, invoice_id: UUID) -> list[dict[str, Any]]:
        """
        Audit entries for an invoice (creation and payment status changes), newest first.

        Raises:
            NotFoundError: If invoice does not exist
        """
        if self.get_by_id(invoice_id) is None:
            raise NotFoundError("Invoice", invoice_id)
        return self.audit.get_entity_history("invoice", invoice_id)

    def delete(self, invoice_id: UUID) -> bool:
        """
        Permanently delete an invoice. The number is not reused.

        Returns:
            True if deleted, False if not found
        """
        current = self.get_by_id(invoice_id)
        if current is None:
            return False

        deleted = self.postgres.execute_returning(
            "DELETE FROM invoices WHERE id = %s RETURNING id",
            (invoice_id,)
        )
        if not deleted:
            return False

        self.audit.log_change(
            entity_type="invoice",
            entity_id=invoice_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json", exclude={"party"})}
        )

        return True
