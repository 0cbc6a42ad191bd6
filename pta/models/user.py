from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from .base import Base, utcnow


class UserProfile(Base):
    """One profile per authenticated identity; ``id`` is the auth provider's subject"""
    __tablename__ = "user_profiles"

    id = Column(String(64), primary_key=True)
    full_name = Column(String, nullable=True)
    role = Column(String(20), nullable=False)
    school_id = Column(Integer, ForeignKey("schools.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    school = relationship("School", back_populates="user_profiles")
    taught_classes = relationship("Class", back_populates="teacher", passive_deletes=True)
    parent_record = relationship("Parent", back_populates="user", uselist=False, passive_deletes=True)

    def __repr__(self):
        return f"<UserProfile(id={self.id}, full_name={self.full_name}, role={self.role})>"
