import logging
import uuid
from datetime import datetime, timezone
from typing import List

from garage.core.categories import REQUIRED_CATEGORIES, is_required_category
from garage.core.errors import ConflictError, InsufficientStockError, NotFoundError, ValidationError
from garage.repositories.base import PartRepository
from garage.schemas.parts import Part
from garage.services import validation as v

logger = logging.getLogger(__name__)


class CatalogStore:
    """Globally shared part definitions and their stock."""

    def __init__(self, parts: PartRepository):
        self.parts = parts

    def list(self) -> List[Part]:
        return self.parts.list()

    def get(self, part_id: str) -> Part:
        part = self.parts.get(part_id)
        if part is None:
            raise NotFoundError("Part not found.")
        return part

    def create(self, name, category, price, stock, performance=None) -> Part:
        name = v.require_text(name, "Part name")
        category = v.optional_text(category)
        if not is_required_category(category):
            raise ValidationError(
                f"Invalid category '{category}'. Expected one of: {', '.join(REQUIRED_CATEGORIES)}."
            )
        price = v.non_negative_money(price, "price")
        stock = v.non_negative_int(stock, "stock")
        perf = v.performance(performance)

        if self.parts.get_by_name(name) is not None:
            raise ConflictError(f"A part named '{name}' already exists.")

        now = datetime.now(timezone.utc)
        part = Part(
            id=str(uuid.uuid4()),
            name=name,
            category=category,
            price=price,
            stock=stock,
            performance=perf,
            created_at=now,
            updated_at=now,
        )
        created = self.parts.create(part)
        logger.info("Created part %s (%s, %s) stock=%d", created.id, created.name, created.category, created.stock)
        return created

    def decrement_stock(self, part_id: str, qty) -> Part:
        qty = v.positive_int(qty, "qty")
        updated = self.parts.decrement_stock(part_id, qty)
        if updated is None:
            part = self.get(part_id)
            raise InsufficientStockError(
                f"Insufficient stock for part '{part.name}'", required=qty, available=part.stock
            )
        return updated

    def increment_stock(self, part_id: str, qty) -> Part:
        qty = v.positive_int(qty, "qty")
        updated = self.parts.increment_stock(part_id, qty)
        if updated is None:
            raise NotFoundError("Part not found.")
        return updated

    def restock(self, part_id: str, qty) -> Part:
        part = self.increment_stock(part_id, qty)
        logger.info("Restocked part %s by %s -> %d", part_id, qty, part.stock)
        return part
