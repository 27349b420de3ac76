import uuid
from datetime import datetime, timezone
from typing import Optional

from garage.core.errors import ConflictError, InsufficientStockError, NotFoundError
from garage.schemas.parts import Performance
from garage.schemas.teams import InventoryItem, Team
from garage.services import validation as v


class TeamInventory:
    """Per-team owned part units."""

    def find(self, team: Team, item_id: str) -> InventoryItem:
        item = next((i for i in team.inventory if i.id == item_id), None)
        if item is None:
            raise NotFoundError("Inventory item not found.")
        return item

    def upsert_from_purchase(self, team: Team, source_part_id: str, part_name: str, category: str,
                             qty: int, unit_cost, performance: Optional[Performance]) -> InventoryItem:
        """Merge into the row bought from the same catalog part, or start a new one.

        The latest purchase wins for ``unit_cost`` and ``performance``.
        """
        qty = v.positive_int(qty, "qty")
        unit_cost = v.non_negative_money(unit_cost, "unit cost")
        perf = v.performance(performance)

        item = next((i for i in team.inventory if i.source_part_id == source_part_id), None)
        if item is not None:
            item.quantity += qty
            item.unit_cost = unit_cost
            item.performance = perf
            item.part_name = part_name
            item.category = category
            return item

        item = InventoryItem(
            id=str(uuid.uuid4()),
            source_part_id=source_part_id,
            part_name=part_name,
            category=category,
            performance=perf,
            quantity=qty,
            unit_cost=unit_cost,
            acquired_at=datetime.now(timezone.utc),
        )
        team.inventory.append(item)
        return item

    def add_manual(self, team: Team, part_name, category=None, qty=0, unit_cost=0) -> InventoryItem:
        item = InventoryItem(
            id=str(uuid.uuid4()),
            source_part_id=None,
            part_name=v.require_text(part_name, "Part name"),
            category=v.optional_text(category),
            quantity=v.non_negative_int(qty, "qty"),
            unit_cost=v.non_negative_money(unit_cost, "unit cost"),
            acquired_at=datetime.now(timezone.utc),
        )
        team.inventory.append(item)
        return item

    def remove(self, team: Team, item_id: str) -> None:
        item = self.find(team, item_id)
        for car in team.cars:
            if any(ip.inventory_item_id == item.id for ip in car.installed_parts):
                raise ConflictError(
                    f"Inventory item '{item.part_name}' is installed on car {car.code} and cannot be removed."
                )
        team.inventory.remove(item)

    def take_unit(self, item: InventoryItem) -> None:
        if item.quantity <= 0:
            raise InsufficientStockError(
                f"No units left of '{item.part_name}'", required=1, available=item.quantity
            )
        item.quantity -= 1

    def return_unit(self, team: Team, item_id: str) -> InventoryItem:
        item = self.find(team, item_id)
        item.quantity += 1
        return item
