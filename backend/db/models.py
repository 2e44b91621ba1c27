from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from db.database import Base


class Preference(Base):
    __tablename__ = "preferences"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
