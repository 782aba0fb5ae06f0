import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Uuid

from ledgerdesk.core.database import Base


class Tenant(Base):
    """Tenant (workspace) owning transactions and a review workspace."""

    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(Uuid, nullable=False, unique=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
