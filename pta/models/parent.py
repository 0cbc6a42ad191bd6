from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, expression
from .base import TenantModel, utcnow


class Parent(TenantModel):
    __tablename__ = "parents"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), ForeignKey('user_profiles.id', ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String, nullable=False)
    contact_number = Column(String, nullable=True)
    email = Column(String, unique=True, nullable=True)
    # Written only by PaymentService / PaymentStatusService
    payment_status = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    payment_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    user = relationship("UserProfile", back_populates="parent_record")
    school = relationship("School", back_populates="parents")
    students = relationship(
        "Student",
        back_populates="parent",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Student.name",
    )
    payments = relationship(
        "Payment",
        back_populates="parent",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Payment.created_at.desc()",
    )

    def __repr__(self):
        return f"<Parent(name={self.name}, email={self.email})>"
