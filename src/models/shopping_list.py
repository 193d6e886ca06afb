"""Shopping list models."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class ShoppingList(Base, TimestampMixin):
    """Shopping list; each user has at most one active list."""

    __tablename__ = "shopping_lists"
    __table_args__ = (
        Index(
            "uq_shopping_lists_user_active",
            "user_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False, default="Shopping List")
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    # Relationships
    user = relationship("User", backref="shopping_lists")
    items = relationship(
        "ShoppingListItem",
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        order_by="ShoppingListItem.sort_order",
    )


class ShoppingListItem(Base, TimestampMixin):
    """Item on a shopping list."""

    __tablename__ = "shopping_list_items"

    id = Column(Integer, primary_key=True, index=True)
    shopping_list_id = Column(Integer, ForeignKey("shopping_lists.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    quantity = Column(String(50), nullable=True)  # "2", "1.5"
    unit = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    checked = Column(Boolean, default=False, index=True)
    checked_at = Column(DateTime(timezone=True), nullable=True)
    sort_order = Column(Integer, default=0)

    # Relationships
    shopping_list = relationship("ShoppingList", back_populates="items")
