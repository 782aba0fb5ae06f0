import uuid
from datetime import datetime

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import relationship

from ledgerdesk.core.database import Base


class Transaction(Base):
    """A transaction in the tenant's permanent ledger."""

    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_tenant_date", "tenant_id", "date"),
        Index("ix_transactions_tenant_external_id", "tenant_id", "external_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    key = Column(Uuid, nullable=False, unique=True, default=uuid.uuid4)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)  # negative = debit
    payee = Column(String(255), nullable=False)
    memo = Column(String(1000), nullable=True)
    source = Column(String(200), nullable=True)
    external_id = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    splits = relationship(
        "Split",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="Split.order",
    )


class Split(Base):
    """Category allocation of (part of) a transaction amount."""

    __tablename__ = "splits"

    id = Column(Integer, primary_key=True, index=True)
    transaction_id = Column(
        Integer,
        ForeignKey("transactions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount = Column(Numeric(18, 2), nullable=False)
    category = Column(String(200), nullable=False, default="")  # "" = uncategorized
    order = Column(Integer, nullable=False, default=0)

    transaction = relationship("Transaction", back_populates="splits")
