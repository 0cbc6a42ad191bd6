from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .base import TenantModel, utcnow


class Class(TenantModel):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)  # e.g., "Grade 3 - Section A"
    grade_level = Column(String, nullable=True)
    teacher_id = Column(String(64), ForeignKey("user_profiles.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    school = relationship("School", back_populates="classes")
    teacher = relationship("UserProfile", back_populates="taught_classes")
    # Students survive class deletion with class_id set to NULL
    students = relationship(
        "Student",
        back_populates="class_",
        passive_deletes=True,
        order_by="Student.name",
    )

    def __repr__(self):
        # Access __dict__ directly to avoid loading attributes
        name = self.__dict__.get('name', '<detached>')
        school_id = self.__dict__.get('school_id', '<detached>')
        return f"<Class(name={name}, school_id={school_id})>"
