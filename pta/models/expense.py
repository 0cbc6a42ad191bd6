from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric, Text, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .base import TenantModel, utcnow


class Expense(TenantModel):
    __tablename__ = "expenses"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    category = Column(String(50), nullable=False)
    receipt_url = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(String(64), ForeignKey("user_profiles.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    school = relationship("School", back_populates="expenses")
    created_by_user = relationship("UserProfile")

    def __repr__(self):
        return f"<Expense(id={self.id}, description={self.description}, amount={self.amount})>"
