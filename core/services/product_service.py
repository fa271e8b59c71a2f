"""
Product service for the catalog.

Products get a generated SKU ("SV" + 4 random alphanumerics by default).
The store enforces SKU uniqueness; a generated SKU that collides is
regenerated a bounded number of times before the create fails.
"""

import logging
import secrets
import string
from typing import Callable
from uuid import UUID, uuid4

import psycopg2.errors

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction, compute_changes
from core.config import BillingConfig
from core.exceptions import ConflictError, NotFoundError
from core.models import Product, ProductCreate, ProductReplace
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

SKU_ALPHABET = string.ascii_uppercase + string.digits


def generate_sku(prefix: str = "SV", length: int = 4) -> str:
    """Random SKU candidate, e.g. 'SV7K2Q'."""
    return prefix + "".join(secrets.choice(SKU_ALPHABET) for _ in range(length))


class ProductService:
    """Service for product catalog operations."""

    def __init__(
        self,
        postgres: PostgresClient,
        audit: AuditLogger,
        config: BillingConfig | None = None,
        sku_generator: Callable[[], str] | None = None,
    ):
        self.postgres = postgres
        self.audit = audit
        self.config = config or BillingConfig()
        self._sku_generator = sku_generator or (
            lambda: generate_sku(self.config.sku_prefix, self.config.sku_random_length)
        )

    def _insert(self, product_id: UUID, data: ProductCreate, sku: str) -> dict:
        now = now_utc()
        # Savepoint per attempt so a collision inside a larger transaction can be retried
        with self.postgres.transaction():
            return self.postgres.execute_returning(
                """
                INSERT INTO products (
                    id, name, sku, weight, price, stock,
                    manufacture_date, expire_date, created_at, updated_at
                ) VALUES (
                    %s, %s, %s, %s, %s, %s,
                    %s, %s, %s, %s
                )
                RETURNING *
                """,
                (
                    product_id, data.name, sku, data.weight, data.price, data.stock,
                    data.manufacture_date, data.expire_date, now, now
                )
            )[0]

    def create(self, data: ProductCreate) -> Product:
        """
        Create a new product.

        Args:
            data: Product creation data; sku is generated when omitted

        Returns:
            Created product

        Raises:
            ConflictError: If the given SKU exists, or every generated SKU collided
        """
        product_id = uuid4()

        if data.sku is not None:
            try:
                row = self._insert(product_id, data, data.sku)
            except psycopg2.errors.UniqueViolation:
                raise ConflictError(f"SKU {data.sku} already exists")
        else:
            attempts = self.config.sku_max_attempts
            for attempt in range(1, attempts + 1):
                sku = self._sku_generator()
                try:
                    row = self._insert(product_id, data, sku)
                    break
                except psycopg2.errors.UniqueViolation:
                    logger.warning(f"Generated SKU {sku} already taken (attempt {attempt}/{attempts})")
            else:
                raise ConflictError(f"Could not generate a unique SKU after {attempts} attempts")

        product = Product.model_validate(row)

        self.audit.log_change(
            entity_type="product",
            entity_id=product.id,
            action=AuditAction.CREATE,
            changes={"created": product.model_dump(mode="json", exclude={"created_at", "updated_at"})}
        )

        return product

    def get_by_id(self, product_id: UUID) -> Product | None:
        """
        Get product by ID.

        Returns:
            Product if found, None otherwise.
        """
        row = self.postgres.execute_single(
            "SELECT * FROM products WHERE id = %s",
            (product_id,)
        )

        if row is None:
            return None

        return Product.model_validate(row)

    def require(self, product_id: UUID) -> Product:
        """
        Get product by ID or fail.

        Raises:
            NotFoundError: If product does not exist
        """
        product = self.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def list_all(self) -> list[Product]:
        """All products ordered by name."""
        rows = self.postgres.execute(
            "SELECT * FROM products ORDER BY name ASC, created_at ASC"
        )

        return [Product.model_validate(row) for row in rows]

    def replace(self, product_id: UUID, data: ProductReplace) -> Product:
        """
        Replace every editable field of a product.

        Raises:
            NotFoundError: If product does not exist
            ConflictError: If the new SKU belongs to another product
        """
        current = self.require(product_id)
        sku = data.sku or current.sku

        try:
            rows = self.postgres.execute_returning(
                """
                UPDATE products
                SET name = %s, sku = %s, weight = %s, price = %s, stock = %s,
                    manufacture_date = %s, expire_date = %s, updated_at = %s
                WHERE id = %s
                RETURNING *
                """,
                (
                    data.name, sku, data.weight, data.price, data.stock,
                    data.manufacture_date, data.expire_date, now_utc(), product_id
                )
            )
        except psycopg2.errors.UniqueViolation:
            raise ConflictError(f"SKU {sku} already exists")
        if not rows:
            raise NotFoundError("Product", product_id)
        row = rows[0]

        updated = Product.model_validate(row)

        changes = compute_changes(
            current.model_dump(mode="json"),
            updated.model_dump(mode="json")
        )
        if changes:
            self.audit.log_change(
                entity_type="product",
                entity_id=product_id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        return updated

    def delete(self, product_id: UUID) -> bool:
        """
        Delete a product. Invoice lines keep their copied name and price.

        Returns:
            True if deleted, False if not found
        """
        current = self.get_by_id(product_id)
        if current is None:
            return False

        deleted = self.postgres.execute_returning(
            "DELETE FROM products WHERE id = %s RETURNING id",
            (product_id,)
        )
        if not deleted:
            return False

        self.audit.log_change(
            entity_type="product",
            entity_id=product_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json")}
        )

        return True
