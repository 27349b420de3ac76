"""garage schema: catalog, teams and their children

Revision ID: 3f2a9c1d7e10
Revises:
Create Date: 2026-10-19 10:12:41.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "parts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(160), nullable=False, unique=True),
        sa.Column("category", sa.String(120), nullable=False),
        sa.Column("price", sa.Numeric(38, 9), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("p", sa.Integer(), nullable=False),
        sa.Column("a", sa.Integer(), nullable=False),
        sa.Column("m", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("stock >= 0", name="ck_parts_stock_non_negative"),
    )
    op.create_table(
        "teams",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("country", sa.String(120), nullable=True),
        sa.Column("budget_total", sa.Numeric(38, 9), nullable=False),
        sa.Column("budget_spent", sa.Numeric(38, 9), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_table(
        "team_sponsors",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("team_id", sa.String(36), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.String(300), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_table(
        "contributions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("team_id", sa.String(36), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("sponsor_id", sa.String(36), nullable=False),
        sa.Column("sponsor_name", sa.String(120), nullable=True),
        sa.Column("amount", sa.Numeric(38, 9), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("description", sa.String(300), nullable=True),
    )
    op.create_table(
        "inventory_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("team_id", sa.String(36), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("source_part_id", sa.String(36), nullable=True),
        sa.Column("part_name", sa.String(160), nullable=False),
        sa.Column("category", sa.String(120), nullable=True),
        sa.Column("p", sa.Integer(), nullable=False),
        sa.Column("a", sa.Integer(), nullable=False),
        sa.Column("m", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_cost", sa.Numeric(38, 9), nullable=False),
        sa.Column("acquired_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
    )
    op.create_table(
        "drivers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("team_id", sa.String(36), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("skill", sa.Integer(), nullable=False),
    )
    op.create_table(
        "race_results",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("driver_id", sa.String(36), sa.ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("date", sa.String(40), nullable=False),
        sa.Column("race", sa.String(160), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("points", sa.Float(), nullable=False),
    )
    op.create_table(
        "cars",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("team_id", sa.String(36), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(40), nullable=False),
        sa.Column("name", sa.String(120), nullable=True),
        sa.Column("driver_id", sa.String(36), nullable=True),
        sa.Column("is_finalized", sa.Boolean(), nullable=False),
    )
    op.create_table(
        "installed_parts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("car_id", sa.String(36), sa.ForeignKey("cars.id", ondelete="CASCADE"), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("inventory_item_id", sa.String(36), nullable=False),
        sa.Column("part_name", sa.String(160), nullable=False),
        sa.Column("category", sa.String(120), nullable=False),
        sa.Column("category_key", sa.String(120), nullable=False),
        sa.Column("p", sa.Integer(), nullable=False),
        sa.Column("a", sa.Integer(), nullable=False),
        sa.Column("m", sa.Integer(), nullable=False),
        sa.Column("installed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_table(
        "sponsors",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
    )

    # Child lookups always go through the owning team / car
    for table in ("team_sponsors", "contributions", "inventory_items", "drivers", "cars"):
        op.create_index(f"ix_{table}_team_id", table, ["team_id"], unique=False)
    op.create_index("ix_contributions_sponsor_id", "contributions", ["sponsor_id"], unique=False)
    op.create_index("ix_inventory_items_source_part_id", "inventory_items", ["source_part_id"], unique=False)
    op.create_index("ix_race_results_driver_id", "race_results", ["driver_id"], unique=False)
    op.create_index("ix_installed_parts_car_id", "installed_parts", ["car_id"], unique=False)
    op.create_index("ix_installed_parts_inventory_item_id", "installed_parts", ["inventory_item_id"], unique=False)


def downgrade() -> None:
    op.drop_table("sponsors")
    op.drop_table("installed_parts")
    op.drop_table("cars")
    op.drop_table("race_results")
    op.drop_table("drivers")
    op.drop_table("inventory_items")
    op.drop_table("contributions")
    op.drop_table("team_sponsors")
    op.drop_table("teams")
    op.drop_table("parts")
