import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
)

from ledgerdesk.core.database import Base


class DuplicateStatus(str, enum.Enum):
    """How an imported transaction relates to the tenant's existing history."""

    NEW = "new"
    EXACT_DUPLICATE = "exact_duplicate"
    POTENTIAL_DUPLICATE = "potential_duplicate"


class ImportReviewTransaction(Base):
    """An imported transaction staged for review.

    Rows live here from upload until the review is completed or abandoned;
    accepted rows are copied into ``transactions`` and every row is removed.
    """

    __tablename__ = "import_review_transactions"
    __table_args__ = (
        Index("ix_import_review_tenant_external_id", "tenant_id", "external_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    key = Column(Uuid, nullable=False, unique=True, default=uuid.uuid4)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    payee = Column(String(255), nullable=False)
    memo = Column(String(1000), nullable=True)
    source = Column(String(200), nullable=True)
    external_id = Column(String(255), nullable=True)
    duplicate_status = Column(
        Enum(DuplicateStatus, values_callable=lambda members: [m.value for m in members], native_enum=False),
        nullable=False,
        default=DuplicateStatus.NEW,
    )
    duplicate_of_key = Column(Uuid, nullable=True)
    is_selected = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
