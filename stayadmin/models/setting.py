from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON
from ..database import Base


EMERGENCY_KEY = "emergency_mode"


class AppSetting(Base):
    """Key/value application setting. Public ones are readable without auth."""
    __tablename__ = "app_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(100), nullable=False, unique=True)
    value = Column(JSON, nullable=True)
    public = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<AppSetting {self.key}>"
