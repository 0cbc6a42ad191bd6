from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric, Text, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .base import Base, utcnow


class Payment(Base):
    """Append-only audit record; inserting one marks the parent and its students as paid"""
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    parent_id = Column(Integer, ForeignKey("parents.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    category = Column(String(30), nullable=False, default="membership")
    payment_method = Column(String(30), nullable=False, default="cash")
    notes = Column(Text, nullable=True)
    receipt_url = Column(String, nullable=True)
    created_by = Column(String(64), ForeignKey("user_profiles.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)

    parent = relationship("Parent", back_populates="payments")
    created_by_user = relationship("UserProfile")

    def __repr__(self):
        return f"<Payment(id={self.id}, parent_id={self.parent_id}, amount={self.amount})>"
