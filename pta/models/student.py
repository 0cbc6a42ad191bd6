from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, expression
from .base import Base, utcnow


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    student_number = Column(String, unique=True, nullable=True)

    # NULL class means "no class assigned"
    class_id = Column(Integer, ForeignKey('classes.id', ondelete="SET NULL"), nullable=True, index=True)
    parent_id = Column(Integer, ForeignKey('parents.id', ondelete="CASCADE"), nullable=False, index=True)

    # Mirrors the parent's status; written only by the propagation rule
    payment_status = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    class_ = relationship("Class", back_populates="students")
    parent = relationship("Parent", back_populates="students")

    def __repr__(self):
        return f"<Student(id={self.id}, name={self.name})>"
