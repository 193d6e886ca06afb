"""Purchase history model: running statistics per user and normalized item name."""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class PurchaseHistory(Base, TimestampMixin):
    """Receipt-derived stock record, mutated on every purchase event.

    Rows are never deleted; only is_depleted toggles.
    """

    __tablename__ = "purchase_history"
    __table_args__ = (
        UniqueConstraint("user_id", "item_name", name="uq_purchase_history_user_item"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    item_name = Column(String(255), nullable=False)  # Normalized: lowercase, trimmed
    last_purchased = Column(Date, nullable=False)
    purchase_count = Column(Integer, nullable=False, default=1)
    avg_quantity = Column(String(50), nullable=True)  # as bought on first purchase ("2 lb"), then running average ("1.5")
    avg_frequency_days = Column(Integer, nullable=True)  # Null until a second purchase date
    estimated_deplete_date = Column(Date, nullable=True)

    # User overrides from the cupboard screen
    user_override_date = Column(Date, nullable=True)  # Last "still have it" confirmation
    user_shelf_life_days = Column(Integer, nullable=True)
    user_quantity_override = Column(String(50), nullable=True)

    is_depleted = Column(Boolean, nullable=False, default=False)

    # Relationships
    user = relationship("User", backref="purchase_history")
