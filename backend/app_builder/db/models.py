from sqlalchemy import JSON, Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class AppRecord(Base):
    __tablename__ = "apps"

    id = Column(String(36), primary_key=True)
    app_name = Column(String(255), nullable=False)
    entities = Column(JSON, nullable=False)
    roles = Column(JSON, nullable=False)
    features = Column(JSON, nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
