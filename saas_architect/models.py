# saas_architect/models.py
from sqlalchemy import Column, String, DateTime, Text
import datetime

from saas_architect.db import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class GenerationRecord(Base):
    __tablename__ = "generations"

    id = Column(String(36), primary_key=True, index=True)
    idea = Column(Text, nullable=False)
    roles_input = Column(Text, nullable=False)
    monetization_type = Column(String(32), nullable=False)
    tenant_type = Column(String(16), nullable=False)
    tech_stack = Column(Text, nullable=False)
    ai_response = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True, nullable=False)
