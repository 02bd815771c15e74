"""
Staff profile model used for authorization
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from app.database import Base
from app.auth.permissions import Role

class Profile(Base):
    """One row per identity of the external identity provider"""
    __tablename__ = "profiles"
    
    id = Column(String(36), primary_key=True, index=True)  # identity provider user id
    role = Column(String(20), default=Role.SOPORTE.value, nullable=False)
    email = Column(String(150), unique=True, index=True, nullable=False)
    full_name = Column(String(150), nullable=True)
    avatar_url = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    def __repr__(self):
        return f"<Profile(id={self.id}, email='{self.email}', role='{self.role}')>"
