# src/frenzy_stage/models/inventory.py
"""SQLAlchemy models for the fishing game inventory."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from frenzy_stage.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PlayerInventory(Base):
    """Currency and equipment held by one wallet address."""

    __tablename__ = "player_inventory"

    # Stored exactly as supplied; addresses differing only in case are distinct players.
    address: Mapped[str] = mapped_column(String(42), primary_key=True)
    bait: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    fishing_rods: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    money: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=_utcnow, onupdate=_utcnow)

    items: Mapped[list[InventoryItem]] = relationship(
        "InventoryItem",
        back_populates="inventory",
        cascade="all, delete-orphan",
        order_by="InventoryItem.item_id",
    )


class InventoryItem(Base):
    """A stack of identical caught items.

    The item's catalogue data is copied onto the row when first caught, so
    later catalogue changes do not reprice items already held.
    """

    __tablename__ = "inventory_item"

    address: Mapped[str] = mapped_column(
        String(42),
        ForeignKey("player_inventory.address", ondelete="CASCADE"),
        primary_key=True,
    )
    item_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    item_type: Mapped[str] = mapped_column(String(32), nullable=False)
    value: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    inventory: Mapped[PlayerInventory] = relationship("PlayerInventory", back_populates="items")
