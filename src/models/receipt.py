"""Receipt models for normalized lines handed over by the OCR pipeline."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class Receipt(Base, TimestampMixin):
    """A scanned receipt and the state of recording its purchases."""

    __tablename__ = "receipts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    store_name = Column(String(255), nullable=True)
    purchase_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending, completed, failed
    error_message = Column(Text, nullable=True)

    # Summary of what was done
    items_recorded = Column(Integer, nullable=True)
    processed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", backref="receipts")
    items = relationship(
        "ReceiptItem",
        back_populates="receipt",
        cascade="all, delete-orphan",
        order_by="ReceiptItem.id",
    )


class ReceiptItem(Base, TimestampMixin):
    """One normalized line of a receipt."""

    __tablename__ = "receipt_items"

    id = Column(Integer, primary_key=True, index=True)
    receipt_id = Column(Integer, ForeignKey("receipts.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)  # Display name
    normalized_name = Column(String(255), nullable=False, index=True)
    quantity = Column(String(50), nullable=True)
    unit = Column(String(50), nullable=True)
    category = Column(String(100), nullable=True)

    # Relationships
    receipt = relationship("Receipt", back_populates="items")
