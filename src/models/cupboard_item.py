"""Cupboard item model for manually entered stock."""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class CupboardItem(Base, TimestampMixin):
    """Item the user added by hand, one row per entry."""

    __tablename__ = "cupboard_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    item_name = Column(String(255), nullable=False)
    quantity = Column(String(50), nullable=True)
    unit = Column(String(50), nullable=True)
    category = Column(String(100), nullable=True)
    added_date = Column(Date, nullable=False)
    shelf_life_days = Column(Integer, nullable=True)  # Overrides the category default
    notes = Column(Text, nullable=True)
    is_depleted = Column(Boolean, nullable=False, default=False)

    # Relationships
    user = relationship("User", backref="cupboard_items")
